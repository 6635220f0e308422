"""Logging package -- call setup_logging() once at startup."""

from .setup import setup_logging

__all__ = ["setup_logging"]
