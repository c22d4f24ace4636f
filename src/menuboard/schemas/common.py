"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field

from menuboard.services.batch_executor import ExecutionSummary


class ExecutionSummaryResponse(BaseModel):
    """Per-group outcome of a cascade run."""

    success: bool = Field(..., description="True when every batch group committed.")
    total: int = Field(..., description="Number of batch groups executed.")
    succeeded: int
    failed: int
    failed_groups: list[int] = Field(default_factory=list)
    documents: int = Field(..., description="Documents covered by the groups.")

    @classmethod
    def from_summary(cls, summary: ExecutionSummary) -> ExecutionSummaryResponse:
        return cls(
            success=summary.complete,
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
            failed_groups=summary.failed_groups,
            documents=summary.documents,
        )
