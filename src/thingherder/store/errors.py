"""Exceptions raised by the ThingHerder store.

Lookups never raise: a missing record is returned as ``None``.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for store failures."""


class PersistenceError(StoreError):
    """Writing the document to disk failed.

    In-memory and on-disk state may now disagree, so callers should treat
    this as fatal for the request that triggered it.
    """


class UnknownAgentError(StoreError):
    """A record referenced an agent id that does not exist."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Unknown agent: {agent_id}")
        self.agent_id = agent_id


class CapacityError(StoreError):
    """Accepting a collaborator would exceed the project's max_collaborators."""

    def __init__(self, project_id: str, limit: int) -> None:
        super().__init__(f"Project {project_id} already has {limit} accepted collaborators")
        self.project_id = project_id
        self.limit = limit
