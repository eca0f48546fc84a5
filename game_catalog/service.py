"""
Request-facing service for catalog data.

Decodes and validates raw request parameters, then hands primitive values to
the pipeline or the repository. Every method returns plain data or a
``CatalogError``; nothing raises past this layer.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from . import config
from .database import CatalogRepository
from .error_handling import CatalogError, ErrorKind, safe_execute
from .models import CatalogRecord, SourceMode
from .pipeline import CatalogPipeline
from .sources import SOURCES, Source

logger = logging.getLogger(__name__)

CACHE_ALIASES = ("db", "cache")
SYNC_FLAGS = {"y": True, "n": False}


def success_message(message: str) -> Dict[str, str]:
    return {"type": "Operation Successful", "message": message}


def _invalid(message: str) -> CatalogError:
    return CatalogError(ErrorKind.INVALID_PARAMETERS, message)


def parse_mode(source: Source, mode: str) -> Optional[SourceMode]:
    """Decode a mode string; the source's own name is an alias for remote."""
    mode = (mode or "").strip().lower()
    if mode in (source.name, SourceMode.REMOTE.value):
        return SourceMode.REMOTE
    if mode in CACHE_ALIASES:
        return SourceMode.CACHE
    if mode == SourceMode.HYBRID.value:
        return SourceMode.HYBRID
    return None


class CatalogService:
    """
    Entry points for reading, storing and deleting catalog records.
    """

    def __init__(self, db_path: Union[str, Path] = config.DATABASE_PATH,
                 pipeline_factory: Optional[Callable[[Source, CatalogRepository], CatalogPipeline]] = None):
        """
        Initialize the service.

        Args:
            db_path: Path to the SQLite cache
            pipeline_factory: Builds a pipeline for a source and repository;
                defaults to ``CatalogPipeline``
        """
        self.db_path = Path(db_path)
        self.pipeline_factory = pipeline_factory or CatalogPipeline
        self._repositories: Dict[str, CatalogRepository] = {}
        self._repositories_lock = threading.Lock()

    def repository(self, source: Source) -> CatalogRepository:
        with self._repositories_lock:
            if source.name not in self._repositories:
                self._repositories[source.name] = CatalogRepository(self.db_path, source.record_type)
            return self._repositories[source.name]

    def _source(self, name: str) -> Union[Source, CatalogError]:
        source = SOURCES.get((name or "").lower())
        if source is None:
            return _invalid(f"The source value of {name} is not a valid source")
        return source

    def get(self, source_name: str, identifier: int, mode: Optional[str] = None,
            batch: int = 1, sync: str = "n") -> Union[CatalogRecord, list, Dict[str, Any], CatalogError]:
        """
        Resolve one record (or a batch) from the remote source, the cache, or both.

        Returns:
            The record or record list; a dict of records and per-identifier
            errors when some identifiers failed or a write-back was skipped;
            or a CatalogError when nothing resolved
        """
        source = self._source(source_name)
        if isinstance(source, CatalogError):
            return source

        source_mode = parse_mode(source, mode or source.name)
        if source_mode is None:
            return _invalid(f"The source parameter value of {mode} is not a valid source value.")
        sync_flag = SYNC_FLAGS.get((sync or "").strip().lower())
        if sync_flag is None:
            return _invalid(f"The sync parameter value of {sync} is not a valid sync value")
        if identifier is None or identifier < 1:
            return _invalid(f"The {source.record_type.ID_FIELD} must be a positive integer")
        if batch < 1:
            return _invalid(f"The batch parameter value of {batch} must be at least 1")

        repository, error = self._open_repository(source, source_mode)
        if error is not None:
            return error
        pipeline = self.pipeline_factory(source, repository)
        result = pipeline.resolve(identifier, source_mode, batch, sync_flag)
        for sync_error in result.sync_errors.values():
            logger.warning(f"Write-back skipped: {sync_error.message}")
        # Partial results carry their per-identifier errors back to the caller
        if result.ok and result.has_side_errors:
            return result.to_dict()
        return result.value

    def put(self, source_name: str, identifier: int, payload: Dict[str, Any]) -> Union[Dict[str, str], CatalogError]:
        """Update (or insert) a record whose identifier must match ``identifier``."""
        source = self._source(source_name)
        if isinstance(source, CatalogError):
            return source
        if identifier is None or identifier < 1:
            return _invalid(f"There was no valid {source.label} id provided")
        record = self._decode(source, payload)
        if isinstance(record, CatalogError):
            return record
        if record.identifier != identifier:
            return _invalid(f"The provided record content does not match the id {identifier}")

        _, error = safe_execute(self.repository(source).write, record, identifier=identifier,
                                error_kind=ErrorKind.REPOSITORY_FAULT)
        return error or success_message("The Put Request Completed Successfully")

    def post(self, source_name: str, payload: Dict[str, Any]) -> Union[Dict[str, str], CatalogError]:
        """Insert a new record."""
        source = self._source(source_name)
        if isinstance(source, CatalogError):
            return source
        record = self._decode(source, payload)
        if isinstance(record, CatalogError):
            return record

        _, error = safe_execute(self.repository(source).insert, record, identifier=record.identifier,
                                error_kind=ErrorKind.REPOSITORY_FAULT)
        return error or success_message("The Post Request Completed Successfully")

    def delete(self, source_name: str, identifier: int) -> Union[Dict[str, str], CatalogError]:
        """Delete a cached record."""
        source = self._source(source_name)
        if isinstance(source, CatalogError):
            return source
        if identifier is None or identifier < 1:
            return _invalid(f"The request has no valid {source.label} id")

        deleted, error = safe_execute(self.repository(source).delete_by_id, identifier, identifier=identifier,
                                      error_kind=ErrorKind.REPOSITORY_FAULT)
        if error is not None:
            return error
        if not deleted:
            return CatalogError(ErrorKind.NOT_FOUND, f"No cached {source.label} record {identifier}", identifier)
        return success_message("The Delete Request Completed Successfully")

    def _open_repository(self, source: Source, mode: SourceMode):
        if mode is SourceMode.REMOTE:
            return None, None
        return safe_execute(self.repository, source, error_kind=ErrorKind.REPOSITORY_FAULT,
                            error_msg="Could not open the catalog cache")

    def _decode(self, source: Source, payload: Optional[Dict[str, Any]]) -> Union[CatalogRecord, CatalogError]:
        if not payload:
            return _invalid(f"There was no valid {source.label} data provided")
        id_field = source.record_type.ID_FIELD
        identifier = payload.get(id_field)
        if not isinstance(identifier, int) or identifier < 1:
            return _invalid(f"The provided record has no valid {id_field}")
        try:
            return source.record_type.from_dict(payload)
        except TypeError as e:
            return _invalid(f"The provided {source.label} data is incomplete: {e}")
