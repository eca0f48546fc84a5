"""
Database module for the catalog cache.

This module handles:
- Database schema creation
- Key-indexed reads and writes of cached records
"""

from .models import create_database
from .operations import CatalogRepository

__all__ = [
    "CatalogRepository",
    "create_database",
]
