"""
Command-line interface components.

This package contains the clouddns entry point.
"""

from .main import main

__all__ = ["main"]
