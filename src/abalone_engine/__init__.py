"""Abalone rules engine and negamax search opponent."""

__version__ = "0.1.0"
