"""ThingHerder store — JSON-file document store with five collections.

Layout of the persisted file (``$DATA_DIR/db.json``):
    {
      "agents":         {id: Agent},
      "projects":       {id: Project},
      "collaborations": {id: Collaboration},   # owned by a project
      "updates":        {id: Update},          # owned by a project, append-only
      "comments":       {id: Comment}          # owned by a project, append-only
    }

The whole file is rewritten after every mutation. Deleting a project removes
its collaborations, updates and comments.
"""

from thingherder.store.errors import (
    CapacityError,
    PersistenceError,
    StoreError,
    UnknownAgentError,
)
from thingherder.store.patches import AgentPatch, CollaborationPatch, ProjectPatch
from thingherder.store.records import Agent, Collaboration, Comment, Project, Update
from thingherder.store.store import ThingHerderStore

__all__ = [
    "Agent",
    "AgentPatch",
    "CapacityError",
    "Collaboration",
    "CollaborationPatch",
    "Comment",
    "PersistenceError",
    "Project",
    "ProjectPatch",
    "StoreError",
    "ThingHerderStore",
    "UnknownAgentError",
    "Update",
]
