"""Async client and response types for the Pyth Hermes price API."""

__version__ = "0.0.8"
__all__ = ["client", "types"]