"""Document store boundary used by the cascade engine.

The store mirrors the primitives of a managed document database:

- documents are addressed by ``collection/id`` references
- queries are equality, membership (``in``) or ordering filters on a field
- the only atomic unit is a bounded write batch

Two platform limits are part of the contract and are enforced here so that
callers fail loudly instead of silently truncating work:

- ``max_batch_size``: mutations allowed in one atomic batch
- ``max_in_filter``: values allowed in one membership filter
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import and_, delete, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from menuboard.models import Document

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 500
DEFAULT_MAX_IN_FILTER = 30


class StoreError(RuntimeError):
    """Base exception raised for document store failures."""


class BatchLimitExceededError(StoreError):
    """Raised when a write batch would exceed the per-batch operation cap."""


class InFilterLimitExceededError(StoreError):
    """Raised when a membership filter carries more values than allowed."""


class DocumentNotFoundError(StoreError):
    """Raised when an update targets a document that does not exist."""


@dataclass(frozen=True)
class DocumentRef:
    """Reference to a single document."""

    collection: str
    id: str

    @property
    def path(self) -> str:
        """Return the stable identity used for deduplication."""
        return f"{self.collection}/{self.id}"

    def __str__(self) -> str:
        return self.path


@dataclass
class DocumentSnapshot:
    """Point-in-time read of a document; ``data`` is None when missing."""

    ref: DocumentRef
    data: dict[str, Any] | None = None

    @property
    def id(self) -> str:
        return self.ref.id

    @property
    def exists(self) -> bool:
        return self.data is not None

    def get(self, name: str, default: Any = None) -> Any:
        """Return a field value, or ``default`` when absent."""
        if self.data is None:
            return default
        return self.data.get(name, default)


class FilterOp(str, Enum):
    """Supported query operators."""

    EQ = "=="
    IN = "in"
    LT = "<"


@dataclass(frozen=True)
class FieldFilter:
    """A single ``field <op> value`` clause."""

    field: str
    op: FilterOp
    value: Any

    @classmethod
    def eq(cls, name: str, value: Any) -> FieldFilter:
        return cls(name, FilterOp.EQ, value)

    @classmethod
    def is_in(cls, name: str, values: Sequence[Any]) -> FieldFilter:
        return cls(name, FilterOp.IN, tuple(values))

    @classmethod
    def lt(cls, name: str, value: Any) -> FieldFilter:
        return cls(name, FilterOp.LT, value)

    def matches(self, data: Mapping[str, Any]) -> bool:
        """Evaluate the clause against a document body."""
        if self.field not in data:
            return False
        current = data[self.field]
        if self.op is FilterOp.EQ:
            return current == self.value
        if self.op is FilterOp.IN:
            return current in self.value
        try:
            return current < self.value
        except TypeError:
            return False


class WriteOpKind(str, Enum):
    """Kinds of mutation a write batch can carry."""

    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOp:
    """One queued mutation inside a write batch."""

    kind: WriteOpKind
    ref: DocumentRef
    data: Mapping[str, Any] | None = None


@dataclass
class WriteBatch:
    """Bounded, all-or-nothing group of mutations.

    Adding more than ``limit`` operations raises ``BatchLimitExceededError``.
    """

    store: DocumentStore
    limit: int
    ops: list[WriteOp] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ops)

    def _add(self, op: WriteOp) -> WriteBatch:
        if len(self.ops) >= self.limit:
            raise BatchLimitExceededError(
                f"Write batch is limited to {self.limit} operations"
            )
        self.ops.append(op)
        return self

    def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> WriteBatch:
        return self._add(WriteOp(WriteOpKind.SET, ref, dict(data)))

    def update(self, ref: DocumentRef, data: Mapping[str, Any]) -> WriteBatch:
        return self._add(WriteOp(WriteOpKind.UPDATE, ref, dict(data)))

    def delete(self, ref: DocumentRef) -> WriteBatch:
        return self._add(WriteOp(WriteOpKind.DELETE, ref))

    async def commit(self) -> None:
        """Apply every queued operation atomically."""
        if not self.ops:
            return
        await self.store.commit(list(self.ops))


class DocumentStore(ABC):
    """Abstract document database client."""

    def __init__(
        self,
        *,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_in_filter: int = DEFAULT_MAX_IN_FILTER,
    ) -> None:
        if max_batch_size < 1 or max_in_filter < 1:
            raise ValueError("Store limits must be positive")
        self.max_batch_size = max_batch_size
        self.max_in_filter = max_in_filter

    def batch(self) -> WriteBatch:
        """Start a new write batch bounded by ``max_batch_size``."""
        return WriteBatch(store=self, limit=self.max_batch_size)

    def _check_filters(self, filters: Sequence[FieldFilter]) -> None:
        for clause in filters:
            if clause.op is FilterOp.IN and len(clause.value) > self.max_in_filter:
                raise InFilterLimitExceededError(
                    f"'in' filter on {clause.field!r} has {len(clause.value)} values; "
                    f"the limit is {self.max_in_filter}"
                )

    async def query(self, collection: str, *filters: FieldFilter) -> list[DocumentSnapshot]:
        """Return the documents of ``collection`` matching every filter."""
        self._check_filters(filters)
        return await self._query(collection, filters)

    async def count(self, collection: str, *filters: FieldFilter) -> int:
        """Return how many documents of ``collection`` match every filter."""
        self._check_filters(filters)
        return await self._count(collection, filters)

    async def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        await self.batch().set(ref, data).commit()

    async def update(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        await self.batch().update(ref, data).commit()

    async def delete(self, ref: DocumentRef) -> None:
        await self.batch().delete(ref).commit()

    @abstractmethod
    async def get(self, ref: DocumentRef) -> DocumentSnapshot:
        """Read a single document."""

    @abstractmethod
    async def commit(self, ops: Sequence[WriteOp]) -> None:
        """Apply ``ops`` atomically."""

    @abstractmethod
    async def _query(
        self, collection: str, filters: Sequence[FieldFilter]
    ) -> list[DocumentSnapshot]:
        """Backend query implementation."""

    @abstractmethod
    async def _count(self, collection: str, filters: Sequence[FieldFilter]) -> int:
        """Backend count implementation."""


def _field_expression(name: str, sample: Any) -> ColumnElement[Any]:
    """Return a typed JSON accessor matching the Python type of ``sample``."""
    element = Document.data[name]
    if isinstance(sample, bool):
        return element.as_boolean()
    if isinstance(sample, int):
        return element.as_integer()
    if isinstance(sample, float):
        return element.as_float()
    return element.as_string()


def _filter_clause(clause: FieldFilter) -> ColumnElement[bool]:
    if clause.op is FilterOp.IN:
        values = list(clause.value)
        if not values:
            return false()
        return _field_expression(clause.field, values[0]).in_(values)
    expression = _field_expression(clause.field, clause.value)
    if clause.op is FilterOp.EQ:
        return expression == clause.value
    return expression < clause.value


class SqlDocumentStore(DocumentStore):
    """Document store persisted in a single SQLAlchemy-managed table.

    Every read uses its own short-lived session and every batch commit is one
    database transaction, so concurrent callers never share a session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_in_filter: int = DEFAULT_MAX_IN_FILTER,
    ) -> None:
        super().__init__(max_batch_size=max_batch_size, max_in_filter=max_in_filter)
        self._session_factory = session_factory

    async def get(self, ref: DocumentRef) -> DocumentSnapshot:
        async with self._session_factory() as session:
            row = await session.get(Document, (ref.collection, ref.id))
            return DocumentSnapshot(ref, dict(row.data) if row is not None else None)

    async def _query(
        self, collection: str, filters: Sequence[FieldFilter]
    ) -> list[DocumentSnapshot]:
        stmt = (
            select(Document)
            .where(Document.collection == collection, *[_filter_clause(f) for f in filters])
            .order_by(Document.doc_id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [
                DocumentSnapshot(DocumentRef(row.collection, row.doc_id), dict(row.data))
                for row in result.scalars()
            ]

    async def _count(self, collection: str, filters: Sequence[FieldFilter]) -> int:
        stmt = select(func.count()).select_from(Document).where(
            and_(Document.collection == collection, *[_filter_clause(f) for f in filters])
        )
        async with self._session_factory() as session:
            return int((await session.execute(stmt)).scalar_one())

    async def commit(self, ops: Sequence[WriteOp]) -> None:
        if len(ops) > self.max_batch_size:
            raise BatchLimitExceededError(
                f"Write batch is limited to {self.max_batch_size} operations"
            )
        async with self._session_factory() as session:
            async with session.begin():
                for op in ops:
                    await self._apply(session, op)
        logger.debug("Committed write batch of %d operations", len(ops))

    async def _apply(self, session: AsyncSession, op: WriteOp) -> None:
        key = (op.ref.collection, op.ref.id)
        if op.kind is WriteOpKind.DELETE:
            await session.execute(
                delete(Document).where(
                    Document.collection == op.ref.collection,
                    Document.doc_id == op.ref.id,
                )
            )
            return

        row = await session.get(Document, key, with_for_update=True)
        if op.kind is WriteOpKind.SET:
            if row is None:
                session.add(Document(collection=key[0], doc_id=key[1], data=dict(op.data or {})))
            else:
                row.data = dict(op.data or {})
            await session.flush()
            return

        if row is None:
            raise DocumentNotFoundError(f"No document to update at {op.ref.path}")
        # Assign a new mapping so the JSON column is flagged as modified.
        row.data = {**row.data, **(op.data or {})}
        await session.flush()
