"""
Database operations for cached catalog records.

This module provides the key-indexed repository the pipeline reads from and
writes merged records back to.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Type, Union

from ..error_handling import ErrorKind, RepositoryError, translate_errors
from ..models import CatalogRecord, CoolStuffIncPrice, GameRecord, MiniatureMarketPrice
from .models import create_database

logger = logging.getLogger(__name__)

TABLE_FOR_RECORD: Dict[Type[CatalogRecord], str] = {
    GameRecord: "bgg_games",
    CoolStuffIncPrice: "csi_prices",
    MiniatureMarketPrice: "mm_prices",
}


class CatalogRepository:
    """
    SQLite-backed cache for one record type.
    """

    def __init__(self, db_path: Union[str, Path], record_type: Type[CatalogRecord]):
        """
        Initialize the repository.

        Args:
            db_path: Path to the SQLite database
            record_type: Record class stored by this repository
        """
        self.db_path = Path(db_path)
        self.record_type = record_type
        self.table = TABLE_FOR_RECORD[record_type]

        # Create database if it doesn't exist
        if not self.db_path.exists():
            logger.info(f"Database not found at {self.db_path}, creating it...")
            create_database(str(self.db_path))

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def read_by_id(self, identifier: int) -> Optional[CatalogRecord]:
        """Return the cached record, or None if nothing is stored under this id."""
        conn = self._connect()
        try:
            row = conn.execute(f"SELECT payload FROM {self.table} WHERE id = ?", (identifier,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return self.record_type.from_dict(json.loads(row[0]))

    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def write(self, record: CatalogRecord) -> None:
        """Insert or update a record keyed by its identifier."""
        self._check_type(record)
        conn = self._connect()
        try:
            conn.execute(f"""
                INSERT INTO {self.table} (id, name, payload, last_updated)
                VALUES (?, ?, ?, datetime('now'))
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    payload = excluded.payload,
                    last_updated = datetime('now')
            """, (record.identifier, record.display_name, json.dumps(record.to_dict())))
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Saved {self.table} record {record.identifier}: {record.display_name}")

    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def insert(self, record: CatalogRecord) -> None:
        """Insert a new record; an existing identifier is an error."""
        self._check_type(record)
        conn = self._connect()
        try:
            conn.execute(f"""
                INSERT INTO {self.table} (id, name, payload, last_updated)
                VALUES (?, ?, ?, datetime('now'))
            """, (record.identifier, record.display_name, json.dumps(record.to_dict())))
            conn.commit()
        except sqlite3.IntegrityError:
            raise RepositoryError(f"{self.table} already holds a record {record.identifier}",
                                  identifier=record.identifier)
        finally:
            conn.close()
        logger.info(f"Inserted {self.table} record {record.identifier}: {record.display_name}")

    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def delete_by_id(self, identifier: int) -> bool:
        """Delete a record; returns whether anything was removed."""
        conn = self._connect()
        try:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (identifier,))
            conn.commit()
            deleted = cursor.rowcount > 0
        finally:
            conn.close()
        if deleted:
            logger.info(f"Deleted {self.table} record {identifier}")
        return deleted

    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def count(self) -> int:
        conn = self._connect()
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]
        finally:
            conn.close()

    def _check_type(self, record: CatalogRecord) -> None:
        if not isinstance(record, self.record_type):
            raise RepositoryError(
                f"{self.table} stores {self.record_type.__name__}, got {type(record).__name__}"
            )
