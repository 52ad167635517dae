"""Storage substrate: one JSON document held in memory, rewritten on every save.

The file is overwritten in place with a single write. A crash in the middle
of that write can leave a truncated file; the next ``load`` then logs the
parse failure and starts from an empty document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from thingherder.store.errors import PersistenceError
from thingherder.store.records import RECORD_TYPES

logger = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = tuple(RECORD_TYPES)


def empty_document() -> dict[str, dict[str, Any]]:
    return {name: {} for name in COLLECTIONS}


class JsonDocument:
    """In-memory mapping of collection name -> {record id -> record}."""

    def __init__(self, path: Path, indent: int = 2) -> None:
        self.path = path
        self.indent = indent
        self.data: dict[str, dict[str, Any]] = empty_document()

    def __getitem__(self, collection: str) -> dict[str, Any]:
        return self.data[collection]

    # ── Load ─────────────────────────────────────────────────

    def load(self) -> None:
        """Read the persisted document. Never raises; failures start an empty store."""
        if not self.path.exists():
            logger.info("No database at %s, starting fresh", self.path)
            self.data = empty_document()
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            self.data = self._decode(raw)
        except (OSError, ValueError, TypeError) as e:
            logger.error("Failed to load database %s, starting fresh: %s", self.path, e)
            self.data = empty_document()
            return
        logger.info(
            "Loaded database %s (%s)",
            self.path,
            ", ".join(f"{name}={len(self.data[name])}" for name in COLLECTIONS),
        )

    def _decode(self, raw: Any) -> dict[str, dict[str, Any]]:
        if not isinstance(raw, dict):
            raise ValueError("top-level JSON value must be an object")
        data = empty_document()
        for name, record_type in RECORD_TYPES.items():
            rows = raw.get(name, {})
            if not isinstance(rows, dict):
                raise ValueError(f"collection {name!r} must be an object")
            for record_id, row in rows.items():
                if not isinstance(row, dict):
                    raise ValueError(f"{name}/{record_id} must be an object")
                data[name][record_id] = record_type.from_dict(row)
        return data

    # ── Save ─────────────────────────────────────────────────

    def save(self) -> None:
        """Serialize the whole document and overwrite the file.

        Raises:
            PersistenceError: the document could not be serialized or written.
        """
        payload = {
            name: {record_id: record.to_dict() for record_id, record in rows.items()}
            for name, rows in self.data.items()
        }
        try:
            text = json.dumps(payload, indent=self.indent, ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to write database {self.path}: {e}") from e
