# src/menuboard/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ExecutionSummaryResponse
from .digests import DigestDeletionResponse
from .users import ReactivateResponse, WithdrawRequest, WithdrawResponse

__all__ = [
    "DigestDeletionResponse",
    "ExecutionSummaryResponse",
    "ReactivateResponse",
    "WithdrawRequest",
    "WithdrawResponse",
]
