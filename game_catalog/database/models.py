import logging
import os
import sqlite3

logger = logging.getLogger(__name__)

# One cache table per external source
TABLES = ("bgg_games", "csi_prices", "mm_prices")


def create_database(db_path="game_catalog.db"):
    """Create the database and cache tables for catalog records."""

    # Ensure database directory exists (only if path contains directory)
    db_dir = os.path.dirname(str(db_path))
    if db_dir:  # Only create directory if there is one
        os.makedirs(db_dir, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        cursor = conn.cursor()
        for table in TABLES:
            # The full record lives in payload as JSON; name is kept for lookups
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id INTEGER PRIMARY KEY,
                    name TEXT,
                    payload TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Database ready at {db_path}")
