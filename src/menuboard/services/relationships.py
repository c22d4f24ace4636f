"""Schema of relationships between document collections.

The store enforces no foreign keys, so this table is the single place that
says which collections point at a user or a project. The locator consults it;
adding a dependent collection means adding one entry here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

RELATIONSHIP_SCHEMA_VERSION = 3


class Collections:
    """Collection names used by the platform."""

    USERS = "users"
    PROJECTS = "projects"
    COMMENTS = "comments"
    LIKES = "likes"
    WHISPERS = "whispers"
    REACTIONS = "reactions"
    PROJECT_UPDATES = "projectUpdates"
    DIGESTS = "digests"
    DIGEST_SUBSCRIPTIONS = "digest_subscriptions"
    WEATHER_LOGS = "weather_logs"


@dataclass(frozen=True)
class Relationship:
    """A ``collection.field`` pair whose value references a root entity."""

    collection: str
    field: str

    def __str__(self) -> str:
        return f"{self.collection}.{self.field}"


# Documents owned directly by a user (field == userId).
USER_OWNED: tuple[Relationship, ...] = (
    Relationship(Collections.PROJECTS, "authorId"),
    Relationship(Collections.COMMENTS, "authorId"),
    Relationship(Collections.LIKES, "userId"),
    Relationship(Collections.REACTIONS, "userId"),
    Relationship(Collections.DIGEST_SUBSCRIPTIONS, "userId"),
    Relationship(Collections.WEATHER_LOGS, "userId"),
)

# Documents scoped to a project (field == projectId).
PROJECT_SCOPED: tuple[Relationship, ...] = (
    Relationship(Collections.COMMENTS, "projectId"),
    Relationship(Collections.LIKES, "projectId"),
    Relationship(Collections.WHISPERS, "projectId"),
    Relationship(Collections.REACTIONS, "projectId"),
    Relationship(Collections.PROJECT_UPDATES, "projectId"),
)

# Records authored by a user that withdrawal anonymizes in place.
WITHDRAWAL_SCOPE: tuple[Relationship, ...] = (
    Relationship(Collections.PROJECTS, "authorId"),
    Relationship(Collections.COMMENTS, "authorId"),
    Relationship(Collections.WHISPERS, "senderId"),
)


def anonymized_fields(user_name: str, author_name: str) -> dict[str, dict[str, Any]]:
    """Return the per-collection field template written on withdrawal."""
    return {
        Collections.PROJECTS: {"authorName": author_name},
        Collections.COMMENTS: {"authorName": user_name, "avatarUrl": ""},
        Collections.WHISPERS: {"senderName": user_name},
    }
