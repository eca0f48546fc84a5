"""
Shared data models for the game catalog package.
"""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .error_handling import CatalogError, ErrorKind


class CatalogRecord:
    """Mixin for records keyed by a single source identifier."""
    ID_FIELD = "id"
    NAME_FIELD = "name"

    @property
    def identifier(self) -> int:
        return getattr(self, self.ID_FIELD)

    @property
    def display_name(self) -> Optional[str]:
        return getattr(self, self.NAME_FIELD)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class GameRecord(CatalogRecord):
    """A BoardGameGeek game entry."""
    ID_FIELD = "bgg_id"

    bgg_id: int
    name: str
    year_published: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    min_playing_time: Optional[int] = None
    max_playing_time: Optional[int] = None
    playing_time: Optional[int] = None
    min_age: Optional[int] = None
    bgg_rating: Optional[float] = None
    bgg_rating_users: Optional[int] = None
    bgg_rank: Optional[int] = None
    complexity_weight: Optional[float] = None
    parent_game_id: Optional[int] = None
    game_type: Optional[str] = None
    image_url: Optional[str] = None
    image_thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    publishers: List[str] = field(default_factory=list)
    designers: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    mechanisms: List[str] = field(default_factory=list)
    expansion_ids: List[int] = field(default_factory=list)
    # Hand-maintained review status, never supplied by BGG
    review_state: Optional[str] = None


@dataclass
class CoolStuffIncPrice(CatalogRecord):
    """Pricing scraped from a CoolStuffInc product page."""
    ID_FIELD = "csi_id"
    NAME_FIELD = "title"

    csi_id: int
    title: str
    sku: Optional[str] = None
    msrp: Optional[float] = None
    cur_price: Optional[float] = None
    availability: Optional[str] = None
    image_url: Optional[str] = None
    release_date: Optional[str] = None


@dataclass
class MiniatureMarketPrice(CatalogRecord):
    """Pricing scraped from a Miniature Market product page."""
    ID_FIELD = "mm_id"
    NAME_FIELD = "title"

    mm_id: int
    title: str
    sku: Optional[str] = None
    msrp: Optional[float] = None
    cur_price: Optional[float] = None
    availability: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class SourceMode(str, Enum):
    """Where a request reads its data from."""
    REMOTE = "remote"
    CACHE = "cache"
    HYBRID = "hybrid"


class FetchStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_FAULT = "server_fault"
    CLIENT_FAULT = "client_fault"
    TRANSPORT_FAULT = "transport_fault"


_FETCH_ERROR_KINDS = {
    FetchStatus.NOT_FOUND: ErrorKind.NOT_FOUND,
    FetchStatus.RATE_LIMITED: ErrorKind.RATE_LIMITED,
    FetchStatus.SERVER_FAULT: ErrorKind.SERVER_FAULT,
    FetchStatus.CLIENT_FAULT: ErrorKind.CLIENT_FAULT,
    FetchStatus.TRANSPORT_FAULT: ErrorKind.TRANSPORT_FAULT,
}


@dataclass
class FetchOutcome:
    """Result of a single GET against a remote source."""
    status: FetchStatus
    body: Optional[Union[str, bytes]] = None
    detail: Optional[str] = None
    status_code: Optional[int] = None
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @classmethod
    def success(cls, body: Union[str, bytes], url: Optional[str] = None) -> "FetchOutcome":
        return cls(FetchStatus.SUCCESS, body=body, status_code=200, url=url)

    @classmethod
    def failure(cls, status: FetchStatus, detail: str, status_code: Optional[int] = None,
                url: Optional[str] = None) -> "FetchOutcome":
        return cls(status, detail=detail, status_code=status_code, url=url)

    def to_error(self, identifier: Optional[int] = None) -> CatalogError:
        if self.ok:
            raise ValueError("A successful fetch has no error")
        return CatalogError(_FETCH_ERROR_KINDS[self.status], self.detail or self.status.value, identifier)


@dataclass
class MergeResult:
    """Merged record plus which fields the remote copy overrode."""
    record: CatalogRecord
    changed: bool
    overridden: Dict[str, Tuple[Any, Any]] = field(default_factory=dict)


@dataclass
class ResolveResult:
    """
    Outcome of one pipeline run.

    ``records`` holds whatever resolved, in ascending identifier order.
    ``failures`` lists identifiers that produced no record. ``error`` is set
    only when the request as a whole failed.
    """
    identifiers: List[int]
    records: List[CatalogRecord] = field(default_factory=list)
    failures: Dict[int, CatalogError] = field(default_factory=dict)
    error: Optional[CatalogError] = None
    remote_errors: Dict[int, CatalogError] = field(default_factory=dict)
    sync_errors: Dict[int, CatalogError] = field(default_factory=dict)
    synced: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        return self.ok and bool(self.failures)

    @property
    def has_side_errors(self) -> bool:
        """True when something went wrong beside the records that resolved."""
        return self.partial or bool(self.remote_errors) or bool(self.sync_errors)

    @property
    def value(self) -> Union[CatalogRecord, List[CatalogRecord], CatalogError]:
        """The record, record list or error a caller should see."""
        if self.error is not None:
            return self.error
        if len(self.identifiers) == 1:
            return self.records[0]
        return list(self.records)

    def to_dict(self) -> Dict[str, Any]:
        """Records plus every per-identifier error, keyed by identifier."""
        return {
            "records": [record.to_dict() for record in self.records],
            "failures": {i: e.to_dict() for i, e in self.failures.items()},
            "remote_errors": {i: e.to_dict() for i, e in self.remote_errors.items()},
            "sync_errors": {i: e.to_dict() for i, e in self.sync_errors.items()},
            "synced": list(self.synced),
        }
