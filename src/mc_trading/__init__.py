"""Monte Carlo simulation of fixed-fractional trading strategies."""

__version__ = "0.1.0"
