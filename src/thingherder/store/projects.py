"""Project collection: slugged projects, filtered listing and cascade delete."""

from __future__ import annotations

import logging
from typing import Any

from thingherder.store.base import Collection
from thingherder.store.errors import UnknownAgentError
from thingherder.store.helpers import new_id, slugify, unique_slug
from thingherder.store.patches import ProjectPatch, coerce_patch
from thingherder.store.records import ACTIVE_STATUSES, Collaboration, Project

logger = logging.getLogger(__name__)

# Collections whose rows belong to a project and go with it on delete.
DEPENDENT_COLLECTIONS = ("collaborations", "updates", "comments")


class ProjectCollection(Collection[Project]):
    name = "projects"

    def create(
        self,
        title: str,
        creator_id: str,
        description: str | None = None,
        category: str | None = None,
        skills_needed: list[str] | None = None,
        max_collaborators: int | None = None,
    ) -> Project:
        """Create a project in status "seeking" with a unique slug.

        The creator is recorded as an accepted collaborator with role
        "creator" in the same save.

        Raises:
            UnknownAgentError: ``creator_id`` is not a registered agent.
        """
        with self._lock:
            if creator_id not in self._document["agents"]:
                raise UnknownAgentError(creator_id)
            now = self._clock()
            slug = unique_slug(slugify(title), (p.slug for p in self._rows.values()))
            project = Project(
                id=new_id(),
                slug=slug,
                title=title,
                creator_id=creator_id,
                created_at=now,
                updated_at=now,
                description=description or None,
                category=category or "other",
                status="seeking",
                skills_needed=list(skills_needed or []),
                max_collaborators=max_collaborators or None,
            )
            membership = Collaboration(
                id=new_id(),
                project_id=project.id,
                agent_id=creator_id,
                joined_at=now,
                role="creator",
                status="accepted",
            )
            self._rows[project.id] = project
            self._document["collaborations"][membership.id] = membership
            self._save()
            logger.info("Created project %s (%s) by %s", project.slug, project.id, creator_id)
            return self._copy(project)

    def find_by_slug(self, slug: str) -> Project | None:
        with self._lock:
            for project in self._rows.values():
                if project.slug == slug:
                    return self._copy(project)
            return None

    def find_all(
        self,
        category: str | None = None,
        status: str | None = None,
        skill: str | None = None,
        limit: int | None = None,
        sort: str = "newest",
    ) -> list[Project]:
        """List projects, newest first.

        ``status`` is a comma-separated set such as "completed,abandoned";
        without it only seeking and in-progress projects are listed.
        ``sort="popular"`` is accepted but has no ranking yet and falls back
        to newest first.
        """
        if status:
            statuses = {s.strip() for s in status.split(",") if s.strip()}
        else:
            statuses = set(ACTIVE_STATUSES)
        if sort != "newest":
            logger.debug("Sort %r not implemented, using newest", sort)

        with self._lock:
            # Reversed insertion order so equal timestamps also list newest first.
            results = [
                p
                for p in reversed(list(self._rows.values()))
                if p.status in statuses
                and (not category or p.category == category)
                and (not skill or skill in p.skills_needed)
            ]
            results.sort(key=lambda p: p.created_at, reverse=True)
            if limit:
                results = results[: int(limit)]
            return self._copy_all(results)

    def find_by_creator(self, agent_id: str) -> list[Project]:
        with self._lock:
            return self._copy_all([p for p in self._rows.values() if p.creator_id == agent_id])

    def update(self, project_id: str, patch: ProjectPatch | dict[str, Any]) -> Project | None:
        """Apply a patch and refresh ``updated_at``. None if the id is unknown."""
        changes = coerce_patch(ProjectPatch, patch).changes()
        with self._lock:
            project = self._rows.get(project_id)
            if project is None:
                return None
            for key, value in changes.items():
                setattr(project, key, value)
            project.updated_at = self._clock()
            self._save()
            return self._copy(project)

    def delete(self, project_id: str) -> bool:
        """Remove a project with its collaborations, updates and comments.

        Returns False (and writes nothing) if the project does not exist.
        """
        with self._lock:
            if self._rows.pop(project_id, None) is None:
                return False
            removed = {}
            for name in DEPENDENT_COLLECTIONS:
                rows = self._document[name]
                doomed = [k for k, row in rows.items() if row.project_id == project_id]
                for k in doomed:
                    del rows[k]
                removed[name] = len(doomed)
            self._save()
            logger.info(
                "Deleted project %s (collaborations=%d, updates=%d, comments=%d)",
                project_id,
                removed["collaborations"],
                removed["updates"],
                removed["comments"],
            )
            return True
