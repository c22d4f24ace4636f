"""Hard deletion of a user's or a project's entire footprint.

Pipeline per request: locate dependents, build a deduplicated reference set
with the root last, plan groups within the batch-size cap, then execute the
groups. The store offers no transaction wider than one batch, so the
consistency model is idempotent eventual completeness: a partially failed
run is repaired by running it again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from menuboard.services.batch_executor import (
    DEFAULT_CONCURRENCY,
    BatchExecutor,
    ExecutionSummary,
    Mutation,
)
from menuboard.services.batch_planner import plan_batches
from menuboard.services.document_store import DocumentRef, DocumentStore
from menuboard.services.errors import AuthorizationError, NotFoundError, PartialCommitError
from menuboard.services.locator import DependentRecordLocator
from menuboard.services.reference_set import build_reference_set
from menuboard.services.relationships import PROJECT_SCOPED, USER_OWNED, Collections

logger = logging.getLogger(__name__)


@dataclass
class DeletionPlan:
    """References to delete and the groups they were planned into."""

    root: DocumentRef
    refs: list[DocumentRef] = field(default_factory=list)
    groups: list[list[DocumentRef]] = field(default_factory=list)
    parents: list[DocumentRef] = field(default_factory=list)

    @property
    def dependents(self) -> list[DocumentRef]:
        return [ref for ref in self.refs if ref.path != self.root.path]


class CascadeDeletionService:
    """Delete users and projects together with every dependent document."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.store = store
        self.locator = DependentRecordLocator(store)
        self.executor = BatchExecutor(store, concurrency=concurrency)

    async def plan_user_deletion(self, user_id: str) -> DeletionPlan:
        """Locate everything a user owns, directly or through their projects."""
        root = DocumentRef(Collections.USERS, user_id)
        owned = await self.locator.locate(user_id, USER_OWNED)

        projects = [
            ref
            for rel, refs in owned.items()
            if rel.collection == Collections.PROJECTS
            for ref in refs
        ]
        scoped = await self.locator.locate_scoped([ref.id for ref in projects], PROJECT_SCOPED)

        # Projects go last among dependents; the executor commits them with the root.
        others = [refs for rel, refs in owned.items() if rel.collection != Collections.PROJECTS]
        refs = build_reference_set([*scoped.values(), *others, projects], root=root)
        return self._plan(root, refs, parents=projects)

    async def plan_project_deletion(self, project_id: str) -> DeletionPlan:
        """Locate everything scoped to a single project."""
        root = DocumentRef(Collections.PROJECTS, project_id)
        scoped = await self.locator.locate(project_id, PROJECT_SCOPED)
        refs = build_reference_set(scoped, root=root)
        return self._plan(root, refs)

    async def delete_user(self, user_id: str, actor_id: str) -> ExecutionSummary:
        """Hard-delete ``user_id`` and every dependent document.

        Raises:
            AuthorizationError: The caller is not the user.
            NotFoundError: The user document does not exist.
            PartialLocateError: A dependent query failed; nothing was written.
            PartialCommitError: Some groups failed; committed groups remain.
        """
        if actor_id != user_id:
            raise AuthorizationError("Users can only delete their own account")

        snapshot = await self.store.get(DocumentRef(Collections.USERS, user_id))
        if not snapshot.exists:
            raise NotFoundError(f"User {user_id} not found")

        plan = await self.plan_user_deletion(user_id)
        return await self._execute(plan)

    async def delete_project(self, project_id: str, actor_id: str) -> ExecutionSummary:
        """Hard-delete ``project_id`` with its comments, likes, whispers and reactions.

        Raises:
            NotFoundError: The project document does not exist.
            AuthorizationError: The caller is not the project's author.
            PartialLocateError: A dependent query failed; nothing was written.
            PartialCommitError: Some groups failed; committed groups remain.
        """
        snapshot = await self.store.get(DocumentRef(Collections.PROJECTS, project_id))
        if not snapshot.exists:
            raise NotFoundError(f"Project {project_id} not found")
        if snapshot.get("authorId") != actor_id:
            raise AuthorizationError("Only the author can delete this project")

        plan = await self.plan_project_deletion(project_id)
        return await self._execute(plan)

    def _plan(
        self,
        root: DocumentRef,
        refs: list[DocumentRef],
        parents: list[DocumentRef] | None = None,
    ) -> DeletionPlan:
        groups = plan_batches(refs, self.store.max_batch_size)
        logger.info(
            "Planned deletion of %s: %d documents in %d groups",
            root.path,
            len(refs),
            len(groups),
        )
        return DeletionPlan(root=root, refs=refs, groups=groups, parents=parents or [])

    async def _execute(self, plan: DeletionPlan) -> ExecutionSummary:
        summary = await self.executor.execute(
            plan.groups, Mutation.delete(), root=plan.root, parents=plan.parents
        )
        if not summary.complete:
            raise PartialCommitError(summary)
        return summary
