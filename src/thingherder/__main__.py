"""Entry point: python -m thingherder [stats|projects|agent NAME]

- No args / "stats": record counts per collection
- "projects":        active projects, newest first
- "agent NAME":      public profile and projects of one agent
"""

from __future__ import annotations

import logging
import sys

from thingherder.config import load_config
from thingherder.store import ThingHerderStore


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _show_stats(store: ThingHerderStore) -> int:
    for name, count in store.stats().items():
        print(f"{name:<15} {count}")
    return 0


def _show_projects(store: ThingHerderStore) -> int:
    for project, count in store.project_summaries():
        limit = project.max_collaborators or "-"
        print(f"{project.slug:<52} {project.status:<12} {count}/{limit}")
    return 0


def _show_agent(store: ThingHerderStore, name: str) -> int:
    agent = store.agents.find_by_name(name)
    if agent is None:
        print(f"Agent not found: {name}", file=sys.stderr)
        return 1
    profile = agent.public_dict()
    for key in ("name", "display_name", "bio", "email", "avatar_url", "skills", "created_at"):
        print(f"{key:<13} {profile[key]}")
    projects = store.projects_for_agent(agent.id)
    print(f"projects      {len(projects)}")
    for project in projects:
        role = "creator" if project.creator_id == agent.id else "collaborator"
        print(f"  {project.slug} ({role}, {project.status})")
    return 0


def _usage() -> int:
    print("Usage: python -m thingherder [stats|projects|agent NAME]")
    print("  stats         — record counts per collection (default)")
    print("  projects      — active projects with collaborator counts")
    print("  agent NAME    — an agent's profile and projects")
    return 1


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    cmd = args[0] if args else "stats"

    config = load_config()
    _setup_logging(config.log_level)

    if cmd not in ("stats", "projects", "agent") or (cmd == "agent" and len(args) < 2):
        return _usage()

    store = ThingHerderStore.from_config(config)
    if cmd == "stats":
        return _show_stats(store)
    if cmd == "projects":
        return _show_projects(store)
    return _show_agent(store, args[1])


if __name__ == "__main__":
    sys.exit(main())
