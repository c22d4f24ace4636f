"""Batch planner: split a reference set into atomically committable groups."""

from __future__ import annotations

from collections.abc import Sequence

from menuboard.services.document_store import DocumentRef
from menuboard.utils.chunking import chunked


def plan_batches(refs: Sequence[DocumentRef], max_batch_size: int) -> list[list[DocumentRef]]:
    """Fill groups of at most ``max_batch_size`` references greedily, in order.

    The input is expected to be deduplicated already. Planning performs no I/O
    and is deterministic for the same input and limit.

    Raises:
        ValueError: If ``max_batch_size`` is smaller than one.
    """
    if max_batch_size < 1:
        raise ValueError(f"Batch size limit must be at least 1, got {max_batch_size}")
    return list(chunked(refs, max_batch_size))
