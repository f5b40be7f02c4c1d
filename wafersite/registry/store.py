"""In-memory record database and blob storage used by the registry."""

from __future__ import annotations

import copy
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any


class RecordNotFound(LookupError):
    """The requested record or stored object does not exist."""


class FilterOp(Enum):
    """Comparison operators a filter can apply to a field."""

    EQUAL = "eq"
    NOT_EQUAL = "neq"
    GREATER_THAN = "gt"
    GREATER_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_EQUAL = "lte"
    LIKE = "like"
    IN = "in"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


@dataclass(frozen=True)
class Filter:
    """A single-field condition on a record."""

    field: str
    operator: FilterOp
    value: Any = None

    def matches(self, record: "Record") -> bool:
        actual = record.id if self.field == "id" else record.data.get(self.field)
        op = self.operator
        if op is FilterOp.IS_NULL:
            return actual is None
        if op is FilterOp.IS_NOT_NULL:
            return actual is not None
        if op is FilterOp.EQUAL:
            return actual == self.value
        if op is FilterOp.NOT_EQUAL:
            return actual != self.value
        if op is FilterOp.IN:
            return actual in (self.value or ())
        if op is FilterOp.LIKE:
            if actual is None or self.value is None:
                return False
            return _like_pattern(str(self.value)).fullmatch(str(actual)) is not None
        if actual is None or self.value is None:
            return False
        try:
            if op is FilterOp.GREATER_THAN:
                return actual > self.value
            if op is FilterOp.GREATER_EQUAL:
                return actual >= self.value
            if op is FilterOp.LESS_THAN:
                return actual < self.value
            if op is FilterOp.LESS_EQUAL:
                return actual <= self.value
        except TypeError:
            return False
        return False


def _like_pattern(pattern: str) -> re.Pattern[str]:
    """Translate an SQL LIKE pattern (``%`` and ``_``) into a case-sensitive regex."""
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.DOTALL)


@dataclass(frozen=True)
class SortField:
    """Sort key: field name and direction."""

    field: str
    desc: bool = False


@dataclass
class ListOptions:
    """Filtering, ordering and paging for a list query. A limit of 0 means no limit."""

    filters: list[Filter] = field(default_factory=list)
    sort: list[SortField] = field(default_factory=list)
    limit: int = 0
    offset: int = 0


@dataclass
class Record:
    """A stored row: its id and field values."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordList:
    """One page of records plus the number of matches before paging."""

    records: list[Record]
    total_count: int


def _sort_key(value: Any) -> tuple[int, Any]:
    if value is None:
        return (0, 0)
    if isinstance(value, (bool, int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (3, str(value))


class MemoryDatabase:
    """A dictionary-backed collection store with filter, sort and paging support.

    Every created record gets an id plus ``created_at``/``updated_at``
    timestamps; ``created_at`` increases strictly with insertion order.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._last_stamp: datetime | None = None

    def _stamp(self) -> str:
        now = datetime.now(timezone.utc)
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now.isoformat()

    def _records(self, collection: str) -> list[Record]:
        rows = self._collections.get(collection, {})
        return [Record(rid, data) for rid, data in rows.items()]

    def _matching(self, collection: str, filters: list[Filter] | None) -> list[Record]:
        filters = filters or []
        return [r for r in self._records(collection) if all(f.matches(r) for f in filters)]

    @staticmethod
    def _copy(record: Record) -> Record:
        return Record(record.id, copy.deepcopy(record.data))

    def get(self, collection: str, record_id: str) -> Record:
        """Return the record with ``record_id``; raise RecordNotFound if absent."""
        try:
            data = self._collections[collection][record_id]
        except KeyError:
            raise RecordNotFound(f"{collection}/{record_id}") from None
        return Record(record_id, copy.deepcopy(data))

    def get_by_field(self, collection: str, field: str, value: Any) -> Record:
        """Return the first record whose ``field`` equals ``value``."""
        wanted = Filter(field, FilterOp.EQUAL, value)
        for record in self._records(collection):
            if wanted.matches(record):
                return self._copy(record)
        raise RecordNotFound(f"{collection} where {field} = {value!r}")

    def list(self, collection: str, options: ListOptions | None = None) -> RecordList:
        """Return the filtered, sorted and paged records."""
        options = options or ListOptions()
        rows = self._matching(collection, options.filters)
        for sort in reversed(options.sort):
            rows.sort(
                key=lambda r, name=sort.field: _sort_key(
                    r.id if name == "id" else r.data.get(name)
                ),
                reverse=sort.desc,
            )
        total = len(rows)
        start = max(options.offset, 0)
        page = rows[start:start + options.limit] if options.limit > 0 else rows[start:]
        return RecordList([self._copy(r) for r in page], total)

    def list_all(self, collection: str, filters: list[Filter] | None = None) -> list[Record]:
        """Return every record matching ``filters``, in insertion order."""
        return [self._copy(r) for r in self._matching(collection, filters)]

    def count(self, collection: str, filters: list[Filter] | None = None) -> int:
        """Return how many records match ``filters``."""
        return len(self._matching(collection, filters))

    def create(self, collection: str, data: dict[str, Any]) -> Record:
        """Insert a new record and return it with its generated id."""
        record_id = uuid.uuid4().hex
        stamp = self._stamp()
        stored = copy.deepcopy(data)
        stored.setdefault("created_at", stamp)
        stored.setdefault("updated_at", stamp)
        self._collections.setdefault(collection, {})[record_id] = stored
        return Record(record_id, copy.deepcopy(stored))

    def update(self, collection: str, record_id: str, data: dict[str, Any]) -> Record:
        """Merge ``data`` into an existing record and return the result."""
        try:
            stored = self._collections[collection][record_id]
        except KeyError:
            raise RecordNotFound(f"{collection}/{record_id}") from None
        stored.update(copy.deepcopy(data))
        stored["updated_at"] = self._stamp()
        return Record(record_id, copy.deepcopy(stored))


class MemoryStorage:
    """Folder/key blob storage held in memory."""

    def __init__(self) -> None:
        self._folders: dict[str, dict[str, bytes]] = {}
        self.public: dict[str, bool] = {}

    @property
    def folders(self) -> list[str]:
        return sorted(self._folders)

    def create_folder(self, name: str, public: bool = False) -> None:
        """Create ``name`` if it does not exist yet; existing folders are left as they are."""
        if name not in self._folders:
            self._folders[name] = {}
            self.public[name] = public

    def put(self, folder: str, key: str, data: bytes) -> None:
        """Store ``data`` under ``folder/key``, creating the folder on demand."""
        self.create_folder(folder)
        self._folders[folder][key] = bytes(data)

    def get(self, folder: str, key: str) -> bytes:
        """Return the bytes at ``folder/key``; raise RecordNotFound if absent."""
        try:
            return self._folders[folder][key]
        except KeyError:
            raise RecordNotFound(f"{folder}/{key}") from None