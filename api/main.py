"""Main FastAPI application for the RegStress Engine."""

from datetime import datetime
from typing import Any, Dict, List
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from regstress import __version__
from regstress.core.exceptions import ConfigurationError, ScenarioNotFoundError
from .models import (
    BatchStressRequest, CapitalRequest, HealthResponse, ImpactRequest,
    LCRRequest, ScenarioInfo, StressRequest
)
from .services import CalculationService, ImpactAnalysisService, StressTestService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="RegStress Engine API",
    description="Regulatory liquidity and capital stress testing engine",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
calculation_service = CalculationService()
stress_test_service = StressTestService(calculation_service)
impact_service = ImpactAnalysisService(calculation_service.config)


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "RegStress Engine API",
        "version": __version__,
        "description": "Regulatory liquidity and capital stress testing engine",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    try:
        checks = {
            "api": "ok",
            "calculation_service": "ok" if calculation_service.smoke_check() else "error",
            "scenario_catalog": "ok" if stress_test_service.list_scenarios() else "error",
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        checks = {"api": "ok", "error": str(e)}

    status = "unhealthy" if "error" in checks or "error" in checks.values() else "healthy"
    return HealthResponse(status=status, timestamp=datetime.now(), checks=checks)


@app.get("/scenarios", response_model=List[ScenarioInfo])
async def list_stress_scenarios():
    """List available predefined stress scenarios."""
    return stress_test_service.list_scenarios()


@app.post("/lcr", response_model=Dict[str, Any])
async def calculate_lcr(request: LCRRequest):
    """Calculate the Liquidity Coverage Ratio."""
    logger.info(f"LCR request for {len(request.assets)} assets")
    return await calculation_service.calculate_lcr(request)


@app.post("/capital", response_model=Dict[str, Any])
async def calculate_capital(request: CapitalRequest):
    """Calculate capital adequacy, leverage and large exposures."""
    logger.info(f"Capital adequacy request for {len(request.assets)} assets")
    return await calculation_service.calculate_capital(request)


@app.post("/stress", response_model=Dict[str, Any])
async def run_stress_test(request: StressRequest):
    """Run one stress scenario, inline or by catalog id."""
    logger.info(f"Stress request: {request.scenario_id or request.scenario.scenario_id}")
    return await stress_test_service.run_stress_test(request)


@app.post("/stress/batch", response_model=Dict[str, Any])
async def run_stress_batch(request: BatchStressRequest):
    """Run several stress scenarios; the full catalog when none are given."""
    logger.info(
        f"Batch stress request: {len(request.scenario_ids)} catalog ids, {len(request.scenarios)} inline scenarios"
    )
    return await stress_test_service.run_batch(request)


@app.post("/impact", response_model=Dict[str, Any])
async def analyze_impact(request: ImpactRequest):
    """Analyze the impact of a proposed regulatory change."""
    return await impact_service.analyze(request)


# Error handlers
@app.exception_handler(ScenarioNotFoundError)
async def scenario_not_found_handler(request, exc):
    """Handle unknown scenario ids."""
    logger.warning(f"Scenario not found: {exc.scenario_id}")
    return JSONResponse(
        status_code=404,
        content={"detail": exc.message, "code": exc.code}
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc):
    """Handle invalid parameters or configuration."""
    logger.error(f"ConfigurationError: {exc.message}")
    return JSONResponse(
        status_code=400,
        content={"detail": f"Invalid input: {exc.message}", "code": exc.code}
    )


@app.exception_handler(ValidationError)
async def result_validation_error_handler(request, exc):
    """Handle invalid results built by the engine; request bodies are checked by FastAPI."""
    logger.error(f"Result validation failed: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "RESULT_VALIDATION_ERROR"}
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc):
    """Handle ValueError exceptions."""
    logger.error(f"ValueError: {str(exc)}")
    return JSONResponse(
        status_code=400,
        content={"detail": f"Invalid input: {str(exc)}"}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
