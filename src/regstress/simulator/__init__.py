"""Synthetic data generation."""

from .portfolio import BankSize, BankSnapshot, PortfolioGenerator

__all__ = [
    "BankSize",
    "BankSnapshot",
    "PortfolioGenerator",
]
