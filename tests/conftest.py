"""Shared fixtures for the store tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from thingherder.store import Agent, ThingHerderStore


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self) -> None:
        self.start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        moment = self.start + timedelta(seconds=self.ticks)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.json"


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(db_path: Path, clock: TickingClock) -> ThingHerderStore:
    return ThingHerderStore(db_path, clock=clock)


@pytest.fixture
def ada(store: ThingHerderStore) -> Agent:
    return store.agents.create("ada", "Ada Lovelace", skills=["math", "engines"])


@pytest.fixture
def bob(store: ThingHerderStore) -> Agent:
    return store.agents.create("bob", "Bob Builder", skills=["welding"])
