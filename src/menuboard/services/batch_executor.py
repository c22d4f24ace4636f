"""Batch executor: commit planned groups as independent atomic batches.

Groups carry no ordering dependency between each other, so they are
committed concurrently under a semaphore. The root reference and any parent
references (the owned projects dependents are located through) are the
exception: they are committed in a final phase, one group at a time, that
starts only after every other group has finished and only if all of them
succeeded. A failed run therefore never removes the documents a retry needs
to find what is left.

A failed group is never rolled back and never blocks other dependent
groups. Re-running the whole locate, plan and execute pipeline is the
recovery path; deletes and anonymizing updates are idempotent.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from menuboard.services.document_store import DocumentRef, DocumentStore, WriteBatch
from menuboard.services.errors import RootCommitWithheldError
from menuboard.utils.chunking import chunked

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


class MutationKind(str, Enum):
    """Mutation applied to every reference of a group."""

    DELETE = "delete"
    UPDATE = "update"


@dataclass(frozen=True)
class Mutation:
    """Delete, or field-level update driven by a per-collection template."""

    kind: MutationKind
    template: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def delete(cls) -> Mutation:
        return cls(MutationKind.DELETE)

    @classmethod
    def update(cls, template: Mapping[str, Mapping[str, Any]]) -> Mutation:
        return cls(MutationKind.UPDATE, template)

    def apply(self, batch: WriteBatch, ref: DocumentRef) -> None:
        """Queue this mutation for ``ref`` on ``batch``."""
        if self.kind is MutationKind.DELETE:
            batch.delete(ref)
            return
        fields = self.template.get(ref.collection)
        if fields is None:
            raise ValueError(f"No update template for collection {ref.collection!r}")
        batch.update(ref, fields)


@dataclass
class GroupResult:
    """Outcome of committing one group."""

    index: int
    size: int
    error: BaseException | None = None
    contains_root: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ExecutionSummary:
    """Aggregate of every group result, in execution order."""

    results: list[GroupResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failed_groups(self) -> list[int]:
        return [result.index for result in self.results if not result.succeeded]

    @property
    def documents(self) -> int:
        return sum(result.size for result in self.results)

    @property
    def committed_documents(self) -> int:
        return sum(result.size for result in self.results if result.succeeded)

    @property
    def complete(self) -> bool:
        return self.failed == 0


class BatchExecutor:
    """Commit groups of references against a document store."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        max_batch_size: int | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("Concurrency must be at least 1")
        self.store = store
        self.concurrency = concurrency
        self.max_batch_size = max_batch_size or store.max_batch_size

    async def execute(
        self,
        groups: Sequence[Sequence[DocumentRef]],
        mutation: Mutation,
        *,
        root: DocumentRef | None = None,
        parents: Sequence[DocumentRef] = (),
    ) -> ExecutionSummary:
        """Commit every group and return the per-group outcome.

        Args:
            groups: Planned groups, each within the batch-size cap.
            mutation: What to do to each reference.
            root: Reference that must be committed after all other groups.
            parents: Intermediate owners (a user's projects) that other
                references are located through. They are committed with the
                root, after every dependent group, so a retry can still reach
                the dependents of a failed run.
        """
        leading, final = self._arrange(groups, root, parents)
        if not leading and not final:
            return ExecutionSummary()

        semaphore = asyncio.Semaphore(self.concurrency)
        results = list(
            await asyncio.gather(
                *(
                    self._commit_group(index, group, mutation, semaphore)
                    for index, group in enumerate(leading)
                )
            )
        )

        held = {ref.path for ref in parents}
        if root is not None:
            held.add(root.path)
        for offset, group in enumerate(final):
            index = len(leading) + offset
            failed = sum(1 for result in results if not result.succeeded)
            if failed:
                logger.warning(
                    "Withholding %d owner documents in group %d: %d earlier groups failed",
                    sum(1 for ref in group if ref.path in held),
                    index,
                    failed,
                )
                outcome = GroupResult(
                    index,
                    len(group),
                    RootCommitWithheldError(f"Group {index} kept for retry"),
                )
            else:
                outcome = await self._commit_group(index, group, mutation, semaphore)
            outcome.contains_root = root is not None and any(ref == root for ref in group)
            results.append(outcome)

        summary = ExecutionSummary(results)
        logger.info(
            "Executed %s across %d groups: %d succeeded, %d failed (%d/%d documents)",
            mutation.kind.value,
            summary.total,
            summary.succeeded,
            summary.failed,
            summary.committed_documents,
            summary.documents,
        )
        return summary

    def _arrange(
        self,
        groups: Sequence[Sequence[DocumentRef]],
        root: DocumentRef | None,
        parents: Sequence[DocumentRef],
    ) -> tuple[list[list[DocumentRef]], list[list[DocumentRef]]]:
        """Split groups into a concurrent phase and a sequential final phase.

        Parents and the root are pulled out of wherever the planner placed
        them. They fill the room left in the last dependent group, then
        further groups of at most the batch size, with the root last.
        """
        tail = list({ref.path: ref for ref in parents}.values())
        if root is not None:
            tail = [ref for ref in tail if ref.path != root.path]
            tail.append(root)
        if not tail:
            return [list(group) for group in groups if group], []

        held = {ref.path for ref in tail}
        leading = [[ref for ref in group if ref.path not in held] for group in groups]
        leading = [group for group in leading if group]
        if leading and len(leading[-1]) < self.max_batch_size:
            tail = leading.pop() + tail
        return leading, [list(chunk) for chunk in chunked(tail, self.max_batch_size)]

    async def _commit_group(
        self,
        index: int,
        group: Sequence[DocumentRef],
        mutation: Mutation,
        semaphore: asyncio.Semaphore,
    ) -> GroupResult:
        async with semaphore:
            try:
                batch = self.store.batch()
                for ref in group:
                    mutation.apply(batch, ref)
                await batch.commit()
            except Exception as exc:
                logger.warning(
                    "Batch group %d (%d documents) failed to commit",
                    index,
                    len(group),
                    exc_info=exc,
                )
                return GroupResult(index, len(group), exc)
        return GroupResult(index, len(group))
