"""Submission Store backends.

The store is the only durable copy of submission state. It offers row-level
CRUD over named tables with equality filters, plus a best-effort in-process
change feed. Two backends are provided:

- ``SqlSubmissionStore`` runs SQLAlchemy Core statements in worker threads so
  the event loop stays responsive.
- ``InMemorySubmissionStore`` keeps rows in dictionaries. It is used when no
  database is configured and by the test-suite, which can inject latency or
  read failures.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy import MetaData, Table, delete, insert, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from groupfinder.services.errors import TransientStoreError

logger = logging.getLogger(__name__)

Row = dict[str, Any]
Filters = Mapping[str, Any]
T = TypeVar("T")

CHANGE_QUEUE_SIZE = 256


def _plain(value: Any) -> Any:
    """Unwrap enum members so rows only ever hold plain values."""
    return value.value if isinstance(value, Enum) else value


def _plain_mapping(values: Mapping[str, Any] | None) -> Row:
    return {key: _plain(value) for key, value in (values or {}).items()}


def _matches(row: Mapping[str, Any], filters: Filters) -> bool:
    return all(row.get(column) == value for column, value in filters.items())


@dataclass(frozen=True)
class ChangeEvent:
    """A single row change observed by the store."""

    kind: str  # "insert", "update" or "delete"
    table: str
    row: Row


class ChangeSubscription:
    """Async iterator over change events for one table and filter."""

    _CLOSED = object()

    def __init__(self, feed: ChangeFeed, table: str, filters: Filters) -> None:
        self._feed = feed
        self.table = table
        self.filters = _plain_mapping(filters)
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=CHANGE_QUEUE_SIZE)
        self.closed = False

    def wants(self, event: ChangeEvent) -> bool:
        return event.table == self.table and _matches(event.row, self.filters)

    def offer(self, event: ChangeEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.debug("Dropping %s change on %s; subscriber is behind", event.kind, event.table)

    def close(self) -> None:
        """Stop the subscription; iteration ends once queued events drain."""
        if self.closed:
            return
        self.closed = True
        self._feed.discard(self)
        try:
            self._queue.put_nowait(self._CLOSED)
        except asyncio.QueueFull:
            # Make room for the sentinel; pending changes are best-effort anyway.
            self._queue.get_nowait()
            self._queue.put_nowait(self._CLOSED)

    def __aiter__(self) -> ChangeSubscription:
        return self

    async def __anext__(self) -> ChangeEvent:
        item = await self._queue.get()
        if item is self._CLOSED:
            raise StopAsyncIteration
        return item  # type: ignore[no-any-return]


class ChangeFeed:
    """Fan-out of row changes to in-process subscribers."""

    def __init__(self) -> None:
        self._subscriptions: list[ChangeSubscription] = []

    def open(self, table: str, filters: Filters | None = None) -> ChangeSubscription:
        subscription = ChangeSubscription(self, table, filters or {})
        self._subscriptions.append(subscription)
        return subscription

    def discard(self, subscription: ChangeSubscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    def emit(self, kind: str, table: str, rows: list[Row]) -> None:
        for row in rows:
            event = ChangeEvent(kind=kind, table=table, row=dict(row))
            for subscription in list(self._subscriptions):
                if subscription.wants(event):
                    subscription.offer(event)

    def close_all(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.close()


class SubmissionStore(ABC):
    """Durable record storage with equality filters and a change feed."""

    def __init__(self) -> None:
        self.changes = ChangeFeed()

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insert ``row`` and return it with its store-assigned ``id``."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Return rows matching every filter, optionally ordered by a column.

        Ties on ``order_by`` are broken by ``id`` in the same direction so the
        order is stable between calls.
        """

    @abstractmethod
    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        """Apply ``patch`` to rows matching every filter; return the affected count."""

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> int:
        """Delete rows matching every filter; return the affected count."""

    def subscribe_to_changes(
        self, table: str, filters: Filters | None = None
    ) -> ChangeSubscription:
        """Open a change stream for ``table``; close it when done."""
        return self.changes.open(table, filters)

    async def close(self) -> None:
        """Release resources and end all change subscriptions."""
        self.changes.close_all()


class SqlSubmissionStore(SubmissionStore):
    """Store backed by SQLAlchemy tables registered on ``metadata``."""

    def __init__(self, session_factory: sessionmaker[Session], metadata: MetaData) -> None:
        super().__init__()
        self._session_factory = session_factory
        self._metadata = metadata

    def create_schema(self) -> None:
        """Create any missing tables on the bound engine."""
        with self._session_factory() as db:
            self._metadata.create_all(bind=db.get_bind())

    def _table(self, name: str) -> Table:
        try:
            return self._metadata.tables[name]
        except KeyError as err:
            raise ValueError(f"Unknown table {name!r}") from err

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except (OperationalError, InterfaceError, PoolTimeoutError) as err:
            logger.warning("Database unavailable: %s", err)
            raise TransientStoreError("Database is unavailable") from err

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        created = await self._run(self._insert_sync, table, _plain_mapping(row))
        self.changes.emit("insert", table, [created])
        return created

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        return await self._run(
            self._select_sync, table, _plain_mapping(filters), order_by, descending
        )

    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        rows = await self._run(
            self._update_sync, table, _plain_mapping(filters), _plain_mapping(patch)
        )
        self.changes.emit("update", table, rows)
        return len(rows)

    async def delete(self, table: str, filters: Filters) -> int:
        rows = await self._run(self._delete_sync, table, _plain_mapping(filters))
        self.changes.emit("delete", table, rows)
        return len(rows)

    def _insert_sync(self, table_name: str, row: Row) -> Row:
        table = self._table(table_name)
        with self._session_factory() as db:
            result = db.execute(insert(table).values(**row).returning(*table.c))
            created = dict(result.mappings().one())
            db.commit()
        return created

    def _select_sync(
        self, table_name: str, filters: Row, order_by: str | None, descending: bool
    ) -> list[Row]:
        table = self._table(table_name)
        stmt = select(table).where(*(table.c[column] == value for column, value in filters.items()))
        if order_by is not None:
            columns = [table.c[order_by], table.c.id]
            stmt = stmt.order_by(*(col.desc() if descending else col.asc() for col in columns))
        with self._session_factory() as db:
            return [dict(row) for row in db.execute(stmt).mappings()]

    def _update_sync(self, table_name: str, filters: Row, patch: Row) -> list[Row]:
        table = self._table(table_name)
        stmt = (
            update(table)
            .where(*(table.c[column] == value for column, value in filters.items()))
            .values(**patch)
            .returning(*table.c)
        )
        with self._session_factory() as db:
            rows = [dict(row) for row in db.execute(stmt).mappings()]
            db.commit()
        return rows

    def _delete_sync(self, table_name: str, filters: Row) -> list[Row]:
        table = self._table(table_name)
        stmt = (
            delete(table)
            .where(*(table.c[column] == value for column, value in filters.items()))
            .returning(*table.c)
        )
        with self._session_factory() as db:
            rows = [dict(row) for row in db.execute(stmt).mappings()]
            db.commit()
        return rows


class InMemorySubmissionStore(SubmissionStore):
    """Dictionary-backed store.

    Each operation sleeps for ``latency`` seconds before touching the data and
    then applies its change without yielding, so conditional updates behave
    like a single-row compare-and-set even when callers interleave.
    """

    def __init__(self, *, latency: float = 0.0) -> None:
        super().__init__()
        self.latency = latency
        self.fail_reads = False
        self.fail_writes = False
        self._tables: dict[str, dict[int, Row]] = defaultdict(dict)
        self._ids: dict[str, itertools.count[int]] = defaultdict(lambda: itertools.count(1))

    async def _io(self, *, write: bool) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if write and self.fail_writes:
            raise TransientStoreError("Store write failed")
        if not write and self.fail_reads:
            raise TransientStoreError("Store read failed")

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        await self._io(write=True)
        created = _plain_mapping(row)
        created["id"] = next(self._ids[table])
        self._tables[table][created["id"]] = created
        self.changes.emit("insert", table, [created])
        return dict(created)

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        await self._io(write=False)
        wanted = _plain_mapping(filters)
        rows = [dict(row) for row in self._tables[table].values() if _matches(row, wanted)]
        if order_by is not None:
            rows.sort(key=lambda row: (row[order_by], row["id"]), reverse=descending)
        return rows

    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        await self._io(write=True)
        wanted = _plain_mapping(filters)
        changes = _plain_mapping(patch)
        updated: list[Row] = []
        for row in self._tables[table].values():
            if _matches(row, wanted):
                row.update(changes)
                updated.append(dict(row))
        self.changes.emit("update", table, updated)
        return len(updated)

    async def delete(self, table: str, filters: Filters) -> int:
        await self._io(write=True)
        wanted = _plain_mapping(filters)
        rows = self._tables[table]
        removed = [rows.pop(key) for key, row in list(rows.items()) if _matches(row, wanted)]
        self.changes.emit("delete", table, removed)
        return len(removed)
