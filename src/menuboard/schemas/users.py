"""Schemas for account deletion, withdrawal and reactivation."""
from __future__ import annotations

from pydantic import BaseModel, Field

from menuboard.schemas.common import ExecutionSummaryResponse


class WithdrawRequest(BaseModel):
    """Withdrawal input; length limits are applied by truncation server-side."""

    reason: str | None = None
    feedback: str | None = None


class WithdrawResponse(ExecutionSummaryResponse):
    message: str


class ReactivateResponse(BaseModel):
    success: bool = True
    message: str
    needs_profile_setup: bool = Field(default=True)
