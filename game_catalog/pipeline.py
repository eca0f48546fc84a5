"""
Pipeline orchestrating fetch, parse, merge and write-back for one source.

A run moves through fetching (remote and/or cache), merging and an optional
sync step. Runs share nothing but the injected repository and fetch client,
so one pipeline instance can serve concurrent requests.
"""

import logging
from typing import Dict, List, Optional, Tuple

from . import config
from .batch import expand
from .error_handling import CatalogError, ErrorKind, safe_execute
from .fetch import FetchClient
from .models import CatalogRecord, ResolveResult, SourceMode
from .reconcile import merge
from .sources import Source

logger = logging.getLogger(__name__)

RemoteRecords = Dict[int, CatalogRecord]
Failures = Dict[int, CatalogError]


class CatalogPipeline:
    """
    Resolves catalog records for one external source.
    """

    def __init__(self, source: Source, repository=None, fetch_client: Optional[FetchClient] = None,
                 max_batch_size: int = config.MAX_BATCH_SIZE):
        """
        Initialize the pipeline.

        Args:
            source: External source descriptor
            repository: Cache repository exposing ``read_by_id`` and ``write``;
                required for cache and hybrid modes
            fetch_client: Client used for remote reads (one is created otherwise)
            max_batch_size: Largest batch a single request may ask for
        """
        self.source = source
        self.repository = repository
        self.fetch_client = fetch_client or FetchClient(source)
        self.max_batch_size = max_batch_size

    def resolve(self, identifier: int, mode: SourceMode = SourceMode.REMOTE,
                batch_size: int = 1, sync: bool = False) -> ResolveResult:
        """
        Resolve ``batch_size`` sequential identifiers starting at ``identifier``.

        Args:
            identifier: First identifier of the request
            mode: Remote only, cache only, or hybrid (fetch both and merge)
            batch_size: Number of sequential identifiers to resolve
            sync: In hybrid mode, write changed records back to the repository

        Returns:
            ResolveResult carrying the records, per-identifier failures and any
            total failure
        """
        error = self._validate(identifier, mode, batch_size)
        if error is not None:
            logger.warning(f"Rejected {self.source.label} request: {error.message}")
            return ResolveResult(identifiers=[identifier], error=error)

        identifiers = expand(identifier, batch_size)
        result = ResolveResult(identifiers=identifiers)
        logger.info(f"Resolving {self.source.label} id(s) {identifiers[0]}-{identifiers[-1]} in {mode.value} mode")

        if mode is SourceMode.REMOTE:
            self._resolve_remote(result)
        elif mode is SourceMode.CACHE:
            self._resolve_cache(result)
        else:
            self._resolve_hybrid(result, sync)

        self._finish(result)
        return result

    def _validate(self, identifier: int, mode: SourceMode, batch_size: int) -> Optional[CatalogError]:
        if identifier < 1:
            return CatalogError(ErrorKind.INVALID_PARAMETERS, f"Identifier must be positive, got {identifier}")
        if batch_size < 1:
            return CatalogError(ErrorKind.INVALID_PARAMETERS, f"Batch size must be at least 1, got {batch_size}")
        if batch_size > self.max_batch_size:
            return CatalogError(ErrorKind.INVALID_PARAMETERS,
                                f"Batch size {batch_size} exceeds the limit of {self.max_batch_size}")
        if mode is SourceMode.CACHE and batch_size > 1:
            return CatalogError(ErrorKind.INVALID_PARAMETERS, "Batch reads are not supported in cache mode")
        if mode is not SourceMode.REMOTE and self.repository is None:
            return CatalogError(ErrorKind.INVALID_PARAMETERS, f"{mode.value} mode needs a cache repository")
        return None

    # Fetching

    def _fetch_remote(self, identifiers: List[int]) -> Tuple[RemoteRecords, Failures, Optional[CatalogError]]:
        """
        Fetch and parse the remote copies.

        Returns:
            Tuple of (records by id, per-id failures, failure of the whole document)
        """
        if len(identifiers) > 1 and self.source.supports_batch:
            return self._fetch_batch(identifiers)

        records: RemoteRecords = {}
        failures: Failures = {}
        for identifier in identifiers:
            outcome = self.fetch_client.fetch(identifier)
            if not outcome.ok:
                failures[identifier] = outcome.to_error(identifier)
                continue
            record, error = safe_execute(
                self.source.parse_one, outcome.body, identifier,
                identifier=identifier, error_kind=ErrorKind.MALFORMED,
                error_msg=f"Could not parse {self.source.label} id {identifier}",
            )
            if error is not None:
                failures[identifier] = error
            else:
                records[identifier] = record
        return records, failures, None

    def _fetch_batch(self, identifiers: List[int]) -> Tuple[RemoteRecords, Failures, Optional[CatalogError]]:
        outcome = self.fetch_client.fetch(identifiers)
        if not outcome.ok:
            return {}, {}, outcome.to_error()

        parsed, error = safe_execute(
            self.source.parse_many, outcome.body, error_kind=ErrorKind.MALFORMED,
            error_msg=f"Could not parse {self.source.label} batch {identifiers[0]}-{identifiers[-1]}",
        )
        if error is not None:
            if error.kind is ErrorKind.NOT_FOUND:
                return {}, {i: _not_found(self.source, i) for i in identifiers}, None
            return {}, {}, error

        wanted = set(identifiers)
        records: RemoteRecords = {}
        for record in parsed:
            if record.identifier in wanted:
                records[record.identifier] = record
            else:
                logger.warning(f"{self.source.label} returned unrequested id {record.identifier}")
        failures = {i: _not_found(self.source, i) for i in identifiers if i not in records}
        return records, failures, None

    def _read_cached(self, identifier: int) -> Tuple[Optional[CatalogRecord], Optional[CatalogError]]:
        return safe_execute(
            self.repository.read_by_id, identifier,
            identifier=identifier, error_kind=ErrorKind.REPOSITORY_FAULT,
            error_msg=f"Cache read failed for {self.source.label} id {identifier}",
        )

    # Modes

    def _resolve_remote(self, result: ResolveResult) -> None:
        records, failures, error = self._fetch_remote(result.identifiers)
        if error is not None:
            result.error = error
            return
        result.records = [records[i] for i in result.identifiers if i in records]
        result.failures = failures

    def _resolve_cache(self, result: ResolveResult) -> None:
        identifier = result.identifiers[0]
        cached, error = self._read_cached(identifier)
        if error is not None:
            result.error = error
        elif cached is None:
            result.error = CatalogError(ErrorKind.NOT_FOUND,
                                        f"{self.source.label} id {identifier} could not be found in the database",
                                        identifier)
        else:
            result.records = [cached]

    def _resolve_hybrid(self, result: ResolveResult, sync: bool) -> None:
        remote_records, remote_failures, remote_error = self._fetch_remote(result.identifiers)
        if remote_error is not None:
            logger.warning(f"Remote side unavailable, falling back to cache: {remote_error.message}")
            remote_failures = {
                i: CatalogError(remote_error.kind, remote_error.message, i) for i in result.identifiers
            }

        for identifier in result.identifiers:
            remote = remote_records.get(identifier)
            cached, error = self._read_cached(identifier)
            if error is not None:
                result.failures[identifier] = error
                continue

            if remote is None and cached is None:
                result.failures[identifier] = remote_failures.get(identifier) or _not_found(self.source, identifier)
                continue
            if remote is None:
                result.remote_errors[identifier] = remote_failures[identifier]

            merged = merge(remote, cached)
            result.records.append(merged.record)
            if merged.changed:
                logger.info(f"{self.source.label} id {identifier} changed: {', '.join(sorted(merged.overridden))}")
                if sync:
                    self._sync(result, merged.record)
            else:
                logger.info(f"{self.source.label} id {identifier} unchanged")

    # Syncing

    def _sync(self, result: ResolveResult, record: CatalogRecord) -> None:
        _, error = safe_execute(
            self.repository.write, record,
            identifier=record.identifier, error_kind=ErrorKind.REPOSITORY_FAULT,
            error_msg=f"Sync failed for {self.source.label} id {record.identifier}",
        )
        if error is not None:
            result.sync_errors[record.identifier] = error
        else:
            result.synced.append(record.identifier)

    def _finish(self, result: ResolveResult) -> None:
        if result.error is None and not result.records:
            if len(result.identifiers) == 1:
                result.error = result.failures[result.identifiers[0]]
            elif all(f.kind is ErrorKind.NOT_FOUND for f in result.failures.values()):
                result.error = CatalogError(
                    ErrorKind.NOT_FOUND,
                    f"None of the requested {self.source.label} ids "
                    f"{result.identifiers[0]}-{result.identifiers[-1]} could be found",
                )
            else:
                result.error = next(iter(result.failures.values()))

        if result.error is not None:
            logger.error(f"{self.source.label} request failed: {result.error.kind.value} - {result.error.message}")
        elif result.failures:
            logger.warning(f"{self.source.label} request partially resolved: "
                           f"{len(result.records)} found, {len(result.failures)} failed")


def _not_found(source: Source, identifier: int) -> CatalogError:
    return CatalogError(ErrorKind.NOT_FOUND, f"The requested {source.label} id {identifier} could not be found",
                        identifier)
