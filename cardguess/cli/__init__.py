"""Command-line interface for the guessing engine."""

from .main import app, main

__all__ = ["app", "main"]
