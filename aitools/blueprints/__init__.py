"""Blueprints package."""

from .aitools import aitools_bp

__all__ = [
    "aitools_bp",
]
