"""Record types for the five collections.

Field names match the persisted JSON layout. Every record carries an
immutable ``id`` and a creation timestamp (``joined_at`` for collaborations).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Literal, TypeVar

Category = Literal["physical", "software", "business", "experiment", "other"]
ProjectStatus = Literal["seeking", "in-progress", "paused", "completed", "abandoned"]
Role = Literal["creator", "collaborator", "interested"]
CollaborationStatus = Literal["pending", "accepted", "declined"]

CATEGORIES: tuple[str, ...] = ("physical", "software", "business", "experiment", "other")
PROJECT_STATUSES: tuple[str, ...] = ("seeking", "in-progress", "paused", "completed", "abandoned")
ACTIVE_STATUSES: frozenset[str] = frozenset({"seeking", "in-progress"})

R = TypeVar("R", bound="_Record")


@dataclass
class _Record:
    """Dict conversion shared by all record dataclasses.

    Keys in a persisted row that no field declares are kept in ``extra``
    and written back unchanged, so a reload never drops them.
    """

    extra: dict[str, Any] = field(default_factory=dict, kw_only=True, repr=False)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        return {**data, **extra}

    @classmethod
    def from_dict(cls: type[R], data: dict[str, Any]) -> R:
        """Build a record from its persisted mapping.

        Missing optional keys take their defaults; a missing required key raises.
        """
        known = {f.name for f in fields(cls)} - {"extra"}
        values = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(**values, extra=extra)


@dataclass
class Agent(_Record):
    id: str
    name: str
    display_name: str
    api_key: str
    created_at: str
    updated_at: str
    bio: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    skills: list[str] = field(default_factory=list)

    def public_dict(self) -> dict[str, Any]:
        """Profile without the secret key."""
        data = self.to_dict()
        data.pop("api_key")
        return data


@dataclass
class Project(_Record):
    id: str
    slug: str
    title: str
    creator_id: str
    created_at: str
    updated_at: str
    description: str | None = None
    category: str = "other"
    status: str = "seeking"
    skills_needed: list[str] = field(default_factory=list)
    max_collaborators: int | None = None


@dataclass
class Collaboration(_Record):
    id: str
    project_id: str
    agent_id: str
    joined_at: str
    role: str = "collaborator"
    pitch: str | None = None
    status: str = "pending"


@dataclass
class Update(_Record):
    id: str
    project_id: str
    agent_id: str
    content: str
    created_at: str


@dataclass
class Comment(_Record):
    id: str
    project_id: str
    agent_id: str
    content: str
    created_at: str


RECORD_TYPES: dict[str, type[_Record]] = {
    "agents": Agent,
    "projects": Project,
    "collaborations": Collaboration,
    "updates": Update,
    "comments": Comment,
}
