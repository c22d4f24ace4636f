# src/menuboard/services/__init__.py
"""Business logic services for the Menuboard application."""

from .batch_executor import BatchExecutor, ExecutionSummary, Mutation
from .cascade import CascadeDeletionService, DeletionPlan
from .document_store import DocumentRef, DocumentStore, SqlDocumentStore
from .locator import DependentRecordLocator
from .log_retention import LogRetentionService
from .retention import ConditionalRetentionGuard, RetentionOutcome
from .withdrawal import WithdrawalService

__all__ = [
    "BatchExecutor",
    "CascadeDeletionService",
    "ConditionalRetentionGuard",
    "DeletionPlan",
    "DependentRecordLocator",
    "DocumentRef",
    "DocumentStore",
    "ExecutionSummary",
    "LogRetentionService",
    "Mutation",
    "RetentionOutcome",
    "SqlDocumentStore",
    "WithdrawalService",
]
