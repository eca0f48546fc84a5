"""
Game Catalog Package - board game data ingestion and reconciliation.

This package provides:
1. Fetching and parsing game data from BoardGameGeek and pricing from
   CoolStuffInc and Miniature Market
2. Reconciling freshly fetched records against a local SQLite cache
"""

__version__ = "0.2.0"
__author__ = "Game Catalog Maintainers"

# Main package imports for convenience
from .database import CatalogRepository
from .error_handling import CatalogError, ErrorKind
from .logging_config import setup_logging
from .models import (
    CoolStuffIncPrice,
    FetchOutcome,
    GameRecord,
    MergeResult,
    MiniatureMarketPrice,
    ResolveResult,
    SourceMode,
)
from .pipeline import CatalogPipeline
from .reconcile import merge
from .service import CatalogService

__all__ = [
    "CatalogError",
    "CatalogPipeline",
    "CatalogRepository",
    "CatalogService",
    "CoolStuffIncPrice",
    "ErrorKind",
    "FetchOutcome",
    "GameRecord",
    "MergeResult",
    "MiniatureMarketPrice",
    "ResolveResult",
    "SourceMode",
    "merge",
    "setup_logging",
]
