"""
Command-line interface for the game catalog package.

This module provides CLI commands for:
- Resolving records from a source, the cache, or both
- Storing and deleting cached records
"""

from .main import main

__all__ = [
    "main",
]
