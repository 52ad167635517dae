"""Shared plumbing for the collection accessors."""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from thingherder.store.document import JsonDocument

T = TypeVar("T")

Clock = Callable[[], str]


class Collection(Generic[T]):
    """CRUD accessor over one key of the shared document.

    All collections of a store share its document, lock and clock. Public
    methods hold the lock for their whole body, save included, and return
    copies so callers cannot change stored records behind ``update``.
    """

    name: str = ""

    def __init__(self, document: JsonDocument, lock: threading.RLock, clock: Clock) -> None:
        self._document = document
        self._lock = lock
        self._clock = clock

    @property
    def _rows(self) -> dict[str, T]:
        return self._document[self.name]

    def _save(self) -> None:
        self._document.save()

    @staticmethod
    def _copy(record: T | None) -> T | None:
        return copy.deepcopy(record)

    @staticmethod
    def _copy_all(records: list[T]) -> list[T]:
        return copy.deepcopy(records)

    def find_by_id(self, record_id: str) -> T | None:
        with self._lock:
            return self._copy(self._rows.get(record_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
