"""Partial-update models.

Each patch lists the only fields ``update`` may touch. Unknown fields and
wrongly typed values are rejected with a pydantic ``ValidationError``; only
fields the caller actually set are applied.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator


class _Patch(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set by the caller, ready to assign onto a record."""
        return self.model_dump(exclude_unset=True)


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("field cannot be null")
    return value


class AgentPatch(_Patch):
    """Profile fields an agent may change after registration."""

    display_name: str | None = None
    bio: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    skills: list[str] | None = None

    @field_validator("display_name", "skills")
    @classmethod
    def validate_required(cls, v: Any) -> Any:
        return _reject_null(v)


class ProjectPatch(_Patch):
    """Project fields editable by the creator. The slug is fixed at creation."""

    title: str | None = None
    description: str | None = None
    category: Literal["physical", "software", "business", "experiment", "other"] | None = None
    status: Literal["seeking", "in-progress", "paused", "completed", "abandoned"] | None = None
    skills_needed: list[str] | None = None
    max_collaborators: PositiveInt | None = None

    @field_validator("title", "category", "status", "skills_needed")
    @classmethod
    def validate_required(cls, v: Any) -> Any:
        return _reject_null(v)


class CollaborationPatch(_Patch):
    pitch: str | None = None
    status: Literal["pending", "accepted", "declined"] | None = None

    @field_validator("status")
    @classmethod
    def validate_required(cls, v: Any) -> Any:
        return _reject_null(v)


def coerce_patch(patch_type: type[_Patch], patch: _Patch | dict[str, Any]) -> _Patch:
    """Accept either a patch instance or a plain mapping of fields."""
    if isinstance(patch, patch_type):
        return patch
    if isinstance(patch, _Patch):
        raise TypeError(f"Expected {patch_type.__name__}, got {type(patch).__name__}")
    return patch_type.model_validate(patch)
