"""Tests for the SQLAlchemy-backed document store."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from menuboard.db.session import create_tables, drop_tables
from menuboard.services.cascade import CascadeDeletionService
from menuboard.services.document_store import (
    BatchLimitExceededError,
    DocumentNotFoundError,
    DocumentRef,
    FieldFilter,
    InFilterLimitExceededError,
    SqlDocumentStore,
)
from menuboard.services.relationships import Collections
from tests.fakes import ALICE, BOB


@pytest_asyncio.fixture()
async def sql_store(tmp_path: Path) -> AsyncIterator[SqlDocumentStore]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")
    await create_tables(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    try:
        yield SqlDocumentStore(factory, max_batch_size=3, max_in_filter=2)
    finally:
        await drop_tables(engine)
        await engine.dispose()


@pytest.mark.asyncio
async def test_set_get_update_delete(sql_store: SqlDocumentStore) -> None:
    ref = DocumentRef(Collections.PROJECTS, "p1")

    assert not (await sql_store.get(ref)).exists
    await sql_store.set(ref, {"authorId": ALICE, "authorName": "Alice"})
    await sql_store.update(ref, {"authorName": "Withdrawn chef"})

    snapshot = await sql_store.get(ref)
    assert snapshot.data == {"authorId": ALICE, "authorName": "Withdrawn chef"}

    await sql_store.delete(ref)
    assert not (await sql_store.get(ref)).exists


@pytest.mark.asyncio
async def test_update_missing_document_fails(sql_store: SqlDocumentStore) -> None:
    with pytest.raises(DocumentNotFoundError):
        await sql_store.update(DocumentRef(Collections.USERS, "ghost"), {"name": "x"})


@pytest.mark.asyncio
async def test_failed_batch_is_rolled_back(sql_store: SqlDocumentStore) -> None:
    batch = sql_store.batch()
    batch.set(DocumentRef(Collections.LIKES, "l1"), {"userId": ALICE})
    batch.update(DocumentRef(Collections.LIKES, "missing"), {"userId": BOB})

    with pytest.raises(DocumentNotFoundError):
        await batch.commit()
    assert not (await sql_store.get(DocumentRef(Collections.LIKES, "l1"))).exists


@pytest.mark.asyncio
async def test_queries_and_counts(sql_store: SqlDocumentStore) -> None:
    batch = sql_store.batch()
    batch.set(DocumentRef(Collections.COMMENTS, "c1"), {"projectId": "p1", "authorId": BOB})
    batch.set(DocumentRef(Collections.COMMENTS, "c2"), {"projectId": "p2", "authorId": ALICE})
    batch.set(DocumentRef(Collections.COMMENTS, "c3"), {"projectId": "p3", "authorId": BOB})
    await batch.commit()
    await sql_store.set(
        DocumentRef(Collections.DIGEST_SUBSCRIPTIONS, "s1"), {"digestId": "d1", "isActive": True}
    )
    await sql_store.set(
        DocumentRef(Collections.DIGEST_SUBSCRIPTIONS, "s2"), {"digestId": "d1", "isActive": False}
    )
    await sql_store.set(DocumentRef(Collections.WEATHER_LOGS, "w1"), {"date": "2026-10-01"})
    await sql_store.set(DocumentRef(Collections.WEATHER_LOGS, "w2"), {"date": "2026-10-18"})

    by_author = await sql_store.query(Collections.COMMENTS, FieldFilter.eq("authorId", BOB))
    assert [s.id for s in by_author] == ["c1", "c3"]

    in_projects = await sql_store.query(
        Collections.COMMENTS, FieldFilter.is_in("projectId", ["p1", "p2"])
    )
    assert [s.id for s in in_projects] == ["c1", "c2"]

    assert await sql_store.query(Collections.COMMENTS, FieldFilter.is_in("projectId", [])) == []

    active = await sql_store.count(
        Collections.DIGEST_SUBSCRIPTIONS,
        FieldFilter.eq("digestId", "d1"),
        FieldFilter.eq("isActive", True),
    )
    assert active == 1

    stale = await sql_store.query(Collections.WEATHER_LOGS, FieldFilter.lt("date", "2026-10-17"))
    assert [s.id for s in stale] == ["w1"]


@pytest.mark.asyncio
async def test_store_limits_are_enforced(sql_store: SqlDocumentStore) -> None:
    with pytest.raises(InFilterLimitExceededError):
        await sql_store.query(Collections.COMMENTS, FieldFilter.is_in("projectId", ["a", "b", "c"]))

    batch = sql_store.batch()
    for i in range(3):
        batch.delete(DocumentRef(Collections.LIKES, f"l{i}"))
    with pytest.raises(BatchLimitExceededError):
        batch.delete(DocumentRef(Collections.LIKES, "l3"))


@pytest.mark.asyncio
async def test_user_cascade_against_database(sql_store: SqlDocumentStore) -> None:
    await sql_store.set(DocumentRef(Collections.USERS, ALICE), {"name": "Alice"})
    await sql_store.set(DocumentRef(Collections.USERS, BOB), {"name": "Bob"})
    for p in range(3):
        await sql_store.set(DocumentRef(Collections.PROJECTS, f"p{p}"), {"authorId": ALICE})
        await sql_store.set(
            DocumentRef(Collections.COMMENTS, f"c{p}"), {"authorId": BOB, "projectId": f"p{p}"}
        )
    await sql_store.set(DocumentRef(Collections.LIKES, "l1"), {"userId": ALICE, "projectId": "x"})
    await sql_store.set(DocumentRef(Collections.COMMENTS, "keep"), {"authorId": BOB, "projectId": "x"})

    summary = await CascadeDeletionService(sql_store, concurrency=1).delete_user(ALICE, ALICE)

    assert summary.complete
    assert summary.documents == 8
    assert not (await sql_store.get(DocumentRef(Collections.USERS, ALICE))).exists
    assert await sql_store.count(Collections.PROJECTS) == 0
    remaining = await sql_store.query(Collections.COMMENTS)
    assert [s.id for s in remaining] == ["keep"]
    assert (await sql_store.get(DocumentRef(Collections.USERS, BOB))).exists
