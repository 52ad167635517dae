"""Append-only project activity: build-log updates and discussion comments."""

from __future__ import annotations

import logging
from typing import TypeVar

from thingherder.store.base import Collection
from thingherder.store.helpers import new_id
from thingherder.store.records import Comment, Update

logger = logging.getLogger(__name__)

E = TypeVar("E", Update, Comment)


class _ActivityCollection(Collection[E]):
    record_type: type[E]
    newest_first: bool = False

    def create(self, project_id: str, agent_id: str, content: str) -> E:
        with self._lock:
            entry = self.record_type(
                id=new_id(),
                project_id=project_id,
                agent_id=agent_id,
                content=content,
                created_at=self._clock(),
            )
            self._rows[entry.id] = entry
            self._save()
            logger.info("Posted %s %s on project %s", self.name[:-1], entry.id, project_id)
            return self._copy(entry)

    def find_by_project(self, project_id: str) -> list[E]:
        with self._lock:
            rows = [e for e in self._rows.values() if e.project_id == project_id]
            if self.newest_first:
                rows.reverse()
            rows.sort(key=lambda e: e.created_at, reverse=self.newest_first)
            return self._copy_all(rows)


class UpdateCollection(_ActivityCollection[Update]):
    """Progress updates, listed newest first."""

    name = "updates"
    record_type = Update
    newest_first = True


class CommentCollection(_ActivityCollection[Comment]):
    """Discussion thread, listed oldest first."""

    name = "comments"
    record_type = Comment
