"""Synthetic portfolio generation."""

from .portfolio import PortfolioGenerator, PortfolioProfile

__all__ = ["PortfolioGenerator", "PortfolioProfile"]
