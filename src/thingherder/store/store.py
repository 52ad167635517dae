"""ThingHerderStore — owns the document, the lock and the five collections."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from thingherder.store.activity import CommentCollection, UpdateCollection
from thingherder.store.agents import AgentCollection
from thingherder.store.base import Clock
from thingherder.store.collaborations import CollaborationCollection
from thingherder.store.document import COLLECTIONS, JsonDocument
from thingherder.store.helpers import utc_timestamp
from thingherder.store.projects import ProjectCollection
from thingherder.store.records import Project

if TYPE_CHECKING:
    from thingherder.config import ThingHerderConfig

logger = logging.getLogger(__name__)


class ThingHerderStore:
    """Single-file document store for agents, projects and their activity.

    Build one per process and hand it to whatever serves requests. Every
    collection method is atomic with respect to other threads; use
    ``atomic()`` to make a sequence of calls atomic as a whole.
    """

    def __init__(self, path: Path, *, indent: int = 2, clock: Clock | None = None) -> None:
        self.path = path
        self._lock = threading.RLock()
        self._document = JsonDocument(path, indent=indent)
        self._document.load()

        args = (self._document, self._lock, clock or utc_timestamp)
        self.agents = AgentCollection(*args)
        self.projects = ProjectCollection(*args)
        self.collaborations = CollaborationCollection(*args)
        self.updates = UpdateCollection(*args)
        self.comments = CommentCollection(*args)

    @classmethod
    def from_config(cls, config: ThingHerderConfig) -> ThingHerderStore:
        return cls(config.db_path, indent=config.json_indent)

    @contextmanager
    def atomic(self) -> Iterator[ThingHerderStore]:
        """Hold the store lock across several calls (check-then-act sequences)."""
        with self._lock:
            yield self

    def save(self) -> None:
        with self._lock:
            self._document.save()

    # ── Cross-collection views ───────────────────────────────

    def projects_for_agent(self, agent_id: str) -> list[Project]:
        """Projects the agent created, then those it was accepted into."""
        with self._lock:
            results = self.projects.find_by_creator(agent_id)
            seen = {p.id for p in results}
            for collab in self.collaborations.find_by_agent(agent_id):
                if collab.status != "accepted" or collab.project_id in seen:
                    continue
                project = self.projects.find_by_id(collab.project_id)
                if project is not None:
                    results.append(project)
                    seen.add(project.id)
            return results

    def project_summaries(self, **filters: Any) -> list[tuple[Project, int]]:
        """``projects.find_all`` results paired with their accepted collaborator count."""
        with self._lock:
            return [
                (p, self.collaborations.count_accepted(p.id))
                for p in self.projects.find_all(**filters)
            ]

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {name: len(self._document[name]) for name in COLLECTIONS}
