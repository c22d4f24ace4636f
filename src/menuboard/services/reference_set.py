"""Reference set builder.

Merges locator output into one ordered set of unique references. A document
can be reachable through more than one relationship (a comment on the user's
own project is both "authored by" and "scoped to a project owned by" the
user), so deduplication goes by document path, not object identity.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from menuboard.services.document_store import DocumentRef
from menuboard.services.relationships import Relationship

Located = Mapping[Relationship, Iterable[DocumentRef]] | Iterable[Iterable[DocumentRef]]


def build_reference_set(
    located: Located,
    root: DocumentRef | None = None,
) -> list[DocumentRef]:
    """Return unique references in first-seen order, root appended last.

    Args:
        located: Locator output, either keyed by relationship or a plain
            iterable of reference lists.
        root: Root document for a hard delete. Omit it for anonymization,
            which mutates the root separately.

    Returns:
        Deduplicated references; when ``root`` is given it appears exactly
        once, at the end.
    """
    groups = located.values() if isinstance(located, Mapping) else located

    unique: dict[str, DocumentRef] = {}
    for refs in groups:
        for ref in refs:
            unique.setdefault(ref.path, ref)

    if root is not None:
        unique.pop(root.path, None)
        unique[root.path] = root
    return list(unique.values())
