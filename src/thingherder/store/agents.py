"""Agent collection: registration, lookup and profile updates."""

from __future__ import annotations

import logging
from typing import Any

from thingherder.store.base import Collection
from thingherder.store.helpers import generate_api_key, new_id
from thingherder.store.patches import AgentPatch, coerce_patch
from thingherder.store.records import Agent

logger = logging.getLogger(__name__)


class AgentCollection(Collection[Agent]):
    name = "agents"

    def create(
        self,
        name: str,
        display_name: str,
        bio: str | None = None,
        email: str | None = None,
        skills: list[str] | None = None,
        avatar_url: str | None = None,
    ) -> Agent:
        """Insert a new agent with a fresh id and API key.

        Does not check name uniqueness; use ``name_exists`` first or
        ``create_unique``. The returned record is the only place the key is
        handed out.
        """
        with self._lock:
            now = self._clock()
            agent = Agent(
                id=new_id(),
                name=name,
                display_name=display_name,
                api_key=generate_api_key(),
                created_at=now,
                updated_at=now,
                bio=bio or None,
                email=email or None,
                avatar_url=avatar_url or None,
                skills=list(skills or []),
            )
            self._rows[agent.id] = agent
            self._save()
            logger.info("Registered agent %s (%s)", agent.name, agent.id)
            return self._copy(agent)

    def create_unique(self, name: str, display_name: str, **kwargs: Any) -> Agent | None:
        """Register only if no agent already uses ``name`` (case-insensitive).

        Returns None when the name is taken.
        """
        with self._lock:
            if self.name_exists(name):
                return None
            return self.create(name, display_name, **kwargs)

    def find_by_api_key(self, api_key: str) -> Agent | None:
        with self._lock:
            for agent in self._rows.values():
                if agent.api_key == api_key:
                    return self._copy(agent)
            return None

    def find_by_name(self, name: str) -> Agent | None:
        """Case-insensitive exact match on ``name``."""
        with self._lock:
            return self._copy(self._find_by_name(name))

    def name_exists(self, name: str) -> bool:
        with self._lock:
            return self._find_by_name(name) is not None

    def _find_by_name(self, name: str) -> Agent | None:
        wanted = name.lower()
        for agent in self._rows.values():
            if agent.name.lower() == wanted:
                return agent
        return None

    def update(self, agent_id: str, patch: AgentPatch | dict[str, Any]) -> Agent | None:
        """Apply a profile patch and refresh ``updated_at``. None if the id is unknown."""
        changes = coerce_patch(AgentPatch, patch).changes()
        with self._lock:
            agent = self._rows.get(agent_id)
            if agent is None:
                return None
            for key, value in changes.items():
                setattr(agent, key, value)
            agent.updated_at = self._clock()
            self._save()
            return self._copy(agent)
