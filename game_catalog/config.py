"""
Configuration settings for the game catalog ingestion pipeline.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent  # Go up one level to workspace root
DATABASE_PATH = Path(os.environ.get("GAME_CATALOG_DB", PROJECT_ROOT / "game_catalog.db"))
# Logs directory for per-run logs
LOGS_DIR = Path(os.environ.get("GAME_CATALOG_LOGS", PROJECT_ROOT / "game_catalog_cache" / "logs"))

# HTTP configuration
REQUEST_TIMEOUT = float(os.environ.get("GAME_CATALOG_TIMEOUT", "30"))
USER_AGENT = os.environ.get(
    "GAME_CATALOG_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
)

# Largest contiguous range a single request may resolve
MAX_BATCH_SIZE = int(os.environ.get("GAME_CATALOG_MAX_BATCH", "20"))

# Source URL templates; the marker is replaced by the identifier (or a
# comma-joined identifier list for BGG)
BGG_URL_TEMPLATE = "https://boardgamegeek.com/xmlapi2/thing?id=<bggid>&stats=1"
BGG_ID_MARKER = "<bggid>"

CSI_URL_TEMPLATE = "https://www.coolstuffinc.com/p/<csiid>"
CSI_ID_MARKER = "<csiid>"

MM_URL_TEMPLATE = "https://www.miniaturemarket.com/catalog/product/view/id/<mmid>"
MM_ID_MARKER = "<mmid>"

# Accept headers per markup flavour
XML_ACCEPT = "text/xml"
HTML_ACCEPT = "text/html"
