"""Schemas for digest administration."""
from __future__ import annotations

from pydantic import BaseModel

from menuboard.services.retention import RetentionOutcome


class DigestDeletionResponse(BaseModel):
    success: bool = True
    outcome: RetentionOutcome
    message: str
