"""Piggy Bank personal finance tracking service."""

__version__ = "0.1.0"
