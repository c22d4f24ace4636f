"""Dependent-record locator.

Finds every document whose foreign-key field references a root entity. All
queries are read-only and independent, so they run concurrently. A single
failed query aborts the whole locate phase with ``PartialLocateError``;
callers never receive a partial dependent set.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence

from menuboard.services.document_store import DocumentRef, DocumentStore, FieldFilter
from menuboard.services.errors import PartialLocateError
from menuboard.services.relationships import Relationship
from menuboard.utils.chunking import chunked

logger = logging.getLogger(__name__)

LocateResult = dict[Relationship, list[DocumentRef]]


class DependentRecordLocator:
    """Issue equality and membership queries for a root identifier."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def locate(
        self, root_id: str, relationships: Iterable[Relationship]
    ) -> LocateResult:
        """Return references whose ``relationship.field`` equals ``root_id``."""
        rels = list(relationships)
        queries = [self._refs(rel, FieldFilter.eq(rel.field, root_id)) for rel in rels]
        pairs = list(zip(rels, queries))
        return await self._gather(pairs)

    async def locate_scoped(
        self, root_ids: Sequence[str], relationships: Iterable[Relationship]
    ) -> LocateResult:
        """Return references whose ``relationship.field`` is any of ``root_ids``.

        The id list is split into chunks no larger than the membership-filter
        cap and one query is issued per chunk per relationship.
        """
        rels = list(relationships)
        if not root_ids:
            return {rel: [] for rel in rels}

        chunks = list(chunked(list(dict.fromkeys(root_ids)), self.store.max_in_filter))
        pairs = [
            (rel, self._refs(rel, FieldFilter.is_in(rel.field, chunk)))
            for rel in rels
            for chunk in chunks
        ]
        logger.debug(
            "Locating %d relationships across %d id chunks (%d queries)",
            len(rels),
            len(chunks),
            len(pairs),
        )
        return await self._gather(pairs, expected=rels)

    async def _refs(self, rel: Relationship, clause: FieldFilter) -> list[DocumentRef]:
        snapshots = await self.store.query(rel.collection, clause)
        return [snapshot.ref for snapshot in snapshots]

    async def _gather(
        self,
        pairs: list[tuple[Relationship, Awaitable[list[DocumentRef]]]],
        expected: list[Relationship] | None = None,
    ) -> LocateResult:
        results = await asyncio.gather(*(query for _, query in pairs), return_exceptions=True)

        located: LocateResult = {rel: [] for rel in (expected or [rel for rel, _ in pairs])}
        failed: list[Relationship] = []
        errors: list[BaseException] = []
        for (rel, _), outcome in zip(pairs, results):
            if isinstance(outcome, BaseException):
                if rel not in failed:
                    failed.append(rel)
                errors.append(outcome)
                continue
            located[rel].extend(outcome)

        if failed:
            logger.warning(
                "Aborting locate: %d of %d queries failed (%s)",
                len(errors),
                len(pairs),
                ", ".join(str(rel) for rel in failed),
            )
            raise PartialLocateError(failed, errors) from errors[0]

        for rel, refs in located.items():
            logger.debug("Located %d documents via %s", len(refs), rel)
        return located
