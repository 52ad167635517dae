"""Collaboration collection: join requests, membership and capacity."""

from __future__ import annotations

import logging
from typing import Any

from thingherder.store.base import Collection
from thingherder.store.errors import CapacityError
from thingherder.store.helpers import new_id
from thingherder.store.patches import CollaborationPatch, coerce_patch
from thingherder.store.records import Collaboration

logger = logging.getLogger(__name__)


class CollaborationCollection(Collection[Collaboration]):
    name = "collaborations"

    def create(
        self,
        project_id: str,
        agent_id: str,
        role: str | None = None,
        pitch: str | None = None,
        status: str | None = None,
    ) -> Collaboration:
        """Insert without checking for an existing (project, agent) pair."""
        with self._lock:
            collab = Collaboration(
                id=new_id(),
                project_id=project_id,
                agent_id=agent_id,
                joined_at=self._clock(),
                role=role or "collaborator",
                pitch=pitch or None,
                status=status or "pending",
            )
            self._rows[collab.id] = collab
            self._save()
            logger.info(
                "Agent %s joined project %s as %s (%s)",
                agent_id, project_id, collab.role, collab.status,
            )
            return self._copy(collab)

    def create_unique(self, project_id: str, agent_id: str, **kwargs: Any) -> Collaboration | None:
        """Create only if the agent has no collaboration on the project yet.

        Returns None when one already exists.
        """
        with self._lock:
            if self._find(project_id, agent_id) is not None:
                return None
            return self.create(project_id, agent_id, **kwargs)

    def find_by_project_and_agent(self, project_id: str, agent_id: str) -> Collaboration | None:
        with self._lock:
            return self._copy(self._find(project_id, agent_id))

    def _find(self, project_id: str, agent_id: str) -> Collaboration | None:
        for collab in self._rows.values():
            if collab.project_id == project_id and collab.agent_id == agent_id:
                return collab
        return None

    def find_by_project(self, project_id: str) -> list[Collaboration]:
        with self._lock:
            return self._copy_all([c for c in self._rows.values() if c.project_id == project_id])

    def find_by_agent(self, agent_id: str) -> list[Collaboration]:
        with self._lock:
            return self._copy_all([c for c in self._rows.values() if c.agent_id == agent_id])

    def update(
        self, collab_id: str, patch: CollaborationPatch | dict[str, Any]
    ) -> Collaboration | None:
        """Apply a patch as-is. Capacity is not checked here; see ``accept``."""
        changes = coerce_patch(CollaborationPatch, patch).changes()
        with self._lock:
            collab = self._rows.get(collab_id)
            if collab is None:
                return None
            for key, value in changes.items():
                setattr(collab, key, value)
            self._save()
            return self._copy(collab)

    def accept(self, collab_id: str) -> Collaboration | None:
        """Mark a collaboration accepted, honouring the project's max_collaborators.

        The creator's own accepted row counts toward the limit, so a project
        with ``max_collaborators=1`` has no room for anyone else.

        Raises:
            CapacityError: the project is already at its limit.
        """
        with self._lock:
            collab = self._rows.get(collab_id)
            if collab is None:
                return None
            if collab.status == "accepted":
                return self._copy(collab)
            project = self._document["projects"].get(collab.project_id)
            limit = project.max_collaborators if project is not None else None
            if limit is not None and self._count_accepted(collab.project_id) >= limit:
                raise CapacityError(collab.project_id, limit)
            return self.update(collab_id, CollaborationPatch(status="accepted"))

    def decline(self, collab_id: str) -> Collaboration | None:
        return self.update(collab_id, CollaborationPatch(status="declined"))

    def delete(self, project_id: str, agent_id: str) -> bool:
        """Remove the agent's collaboration on the project.

        No-op returning False when there is none, or when it is the creator's
        own row, which only goes away with the project.
        """
        with self._lock:
            collab = self._find(project_id, agent_id)
            if collab is None:
                return False
            project = self._document["projects"].get(project_id)
            is_creator = project is not None and project.creator_id == agent_id
            if collab.role == "creator" or is_creator:
                logger.warning(
                    "Refusing to remove creator %s from project %s", agent_id, project_id
                )
                return False
            del self._rows[collab.id]
            self._save()
            logger.info("Agent %s left project %s", agent_id, project_id)
            return True

    def count_accepted(self, project_id: str) -> int:
        with self._lock:
            return self._count_accepted(project_id)

    def _count_accepted(self, project_id: str) -> int:
        return sum(
            1
            for c in self._rows.values()
            if c.project_id == project_id and c.status == "accepted"
        )
