"""Tests for the collaboration collection."""

from __future__ import annotations

import json
import threading

import pytest
from pydantic import ValidationError

from thingherder.store import CapacityError, ThingHerderStore


@pytest.fixture
def project(store: ThingHerderStore, ada):
    return store.projects.create("Self-Balancing Robot", ada.id)


class TestCreate:
    def test_defaults(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(project.id, bob.id)
        assert collab.role == "collaborator"
        assert collab.status == "pending"
        assert collab.pitch is None
        assert collab.joined_at

    def test_explicit_fields(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(
            project.id, bob.id, role="interested", pitch="Following along"
        )
        assert collab.role == "interested"
        assert collab.pitch == "Following along"

    def test_create_does_not_reject_duplicates(self, store: ThingHerderStore, project, bob):
        store.collaborations.create(project.id, bob.id)
        store.collaborations.create(project.id, bob.id)
        rows = [c for c in store.collaborations.find_by_project(project.id) if c.agent_id == bob.id]
        assert len(rows) == 2

    def test_pre_check_prevents_duplicate(self, store: ThingHerderStore, project, bob):
        if store.collaborations.find_by_project_and_agent(project.id, bob.id) is None:
            store.collaborations.create(project.id, bob.id)
        if store.collaborations.find_by_project_and_agent(project.id, bob.id) is None:
            store.collaborations.create(project.id, bob.id)
        assert len(store.collaborations.find_by_agent(bob.id)) == 1

    def test_create_unique(self, store: ThingHerderStore, project, ada, bob):
        assert store.collaborations.create_unique(project.id, bob.id, pitch="hi") is not None
        assert store.collaborations.create_unique(project.id, bob.id) is None
        assert store.collaborations.create_unique(project.id, ada.id) is None
        assert len(store.collaborations.find_by_project(project.id)) == 2

    def test_create_unique_under_threads(self, store: ThingHerderStore, project, bob):
        barrier = threading.Barrier(8)

        def join() -> None:
            barrier.wait()
            store.collaborations.create_unique(project.id, bob.id)

        threads = [threading.Thread(target=join) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store.collaborations.find_by_agent(bob.id)) == 1


class TestLookups:
    def test_find_by_project_and_agent(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(project.id, bob.id)
        assert store.collaborations.find_by_project_and_agent(project.id, bob.id) == collab
        assert store.collaborations.find_by_project_and_agent("other", bob.id) is None

    def test_find_by_project_and_agent_scans(self, store: ThingHerderStore, ada, bob):
        first = store.projects.create("One", ada.id)
        second = store.projects.create("Two", ada.id)
        store.collaborations.create(first.id, bob.id)
        store.collaborations.create(second.id, bob.id)
        assert len(store.collaborations.find_by_agent(bob.id)) == 2
        assert len(store.collaborations.find_by_agent(ada.id)) == 2
        assert len(store.collaborations.find_by_project(first.id)) == 2


class TestUpdate:
    def test_update_status(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(project.id, bob.id)
        updated = store.collaborations.update(collab.id, {"status": "declined"})
        assert updated.status == "declined"
        assert updated.joined_at == collab.joined_at

    def test_unknown_id(self, store: ThingHerderStore):
        assert store.collaborations.update("missing", {"status": "accepted"}) is None

    def test_rejects_bad_patch(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(project.id, bob.id)
        with pytest.raises(ValidationError):
            store.collaborations.update(collab.id, {"status": "maybe"})
        with pytest.raises(ValidationError):
            store.collaborations.update(collab.id, {"project_id": "elsewhere"})


class TestCapacity:
    @pytest.fixture
    def small_project(self, store: ThingHerderStore, ada):
        return store.projects.create("Two Seater", ada.id, max_collaborators=2)

    def test_count_accepted(self, store: ThingHerderStore, project, bob):
        collab = store.collaborations.create(project.id, bob.id)
        assert store.collaborations.count_accepted(project.id) == 1
        store.collaborations.accept(collab.id)
        assert store.collaborations.count_accepted(project.id) == 2
        store.collaborations.decline(collab.id)
        assert store.collaborations.count_accepted(project.id) == 1

    def test_accept_enforces_limit(self, store: ThingHerderStore, small_project, bob):
        carol = store.agents.create("carol", "Carol")
        first = store.collaborations.create(small_project.id, bob.id)
        second = store.collaborations.create(small_project.id, carol.id)

        assert store.collaborations.accept(first.id).status == "accepted"
        with pytest.raises(CapacityError):
            store.collaborations.accept(second.id)
        assert store.collaborations.find_by_id(second.id).status == "pending"

    def test_creator_counts_toward_limit(self, store: ThingHerderStore, ada, bob):
        solo = store.projects.create("Solo", ada.id, max_collaborators=1)
        collab = store.collaborations.create(solo.id, bob.id)
        with pytest.raises(CapacityError):
            store.collaborations.accept(collab.id)

    def test_accept_is_idempotent_at_limit(self, store: ThingHerderStore, small_project, bob):
        collab = store.collaborations.create(small_project.id, bob.id)
        store.collaborations.accept(collab.id)
        assert store.collaborations.accept(collab.id).status == "accepted"

    def test_no_limit_means_unbounded(self, store: ThingHerderStore, project):
        for i in range(5):
            agent = store.agents.create(f"helper{i}", f"Helper {i}")
            collab = store.collaborations.create(project.id, agent.id)
            store.collaborations.accept(collab.id)
        assert store.collaborations.count_accepted(project.id) == 6

    def test_raw_update_bypasses_limit(self, store: ThingHerderStore, small_project, bob):
        carol = store.agents.create("carol", "Carol")
        for agent in (bob, carol):
            collab = store.collaborations.create(small_project.id, agent.id)
            store.collaborations.update(collab.id, {"status": "accepted"})
        assert store.collaborations.count_accepted(small_project.id) == 3

    def test_accept_unknown_id(self, store: ThingHerderStore):
        assert store.collaborations.accept("missing") is None


class TestDelete:
    def test_leave(self, store: ThingHerderStore, project, bob):
        store.collaborations.create(project.id, bob.id)
        assert store.collaborations.delete(project.id, bob.id) is True
        assert store.collaborations.find_by_project_and_agent(project.id, bob.id) is None

    def test_leave_when_absent_is_noop(self, store: ThingHerderStore, project, bob):
        assert store.collaborations.delete(project.id, bob.id) is False
        assert len(store.collaborations.find_by_project(project.id)) == 1

    def test_creator_row_is_kept(self, store: ThingHerderStore, project, ada):
        assert store.collaborations.delete(project.id, ada.id) is False
        collab = store.collaborations.find_by_project_and_agent(project.id, ada.id)
        assert collab.role == "creator"

    def test_role_cannot_be_patched(self, store: ThingHerderStore, project, ada):
        creator_row = store.collaborations.find_by_project_and_agent(project.id, ada.id)
        with pytest.raises(ValidationError):
            store.collaborations.update(creator_row.id, {"role": "collaborator"})
        assert store.collaborations.delete(project.id, ada.id) is False
        assert store.collaborations.find_by_project(project.id) == [creator_row]

    def test_creator_kept_even_without_creator_role(self, db_path, project, ada):
        # A row written by hand with a plain role still belongs to the creator.
        raw = json.loads(db_path.read_text(encoding="utf-8"))
        for row in raw["collaborations"].values():
            row["role"] = "collaborator"
        db_path.write_text(json.dumps(raw), encoding="utf-8")

        reloaded = ThingHerderStore(db_path)
        assert reloaded.collaborations.delete(project.id, ada.id) is False
        assert len(reloaded.collaborations.find_by_project(project.id)) == 1
