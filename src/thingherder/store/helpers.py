"""Pure helpers: slugs, API keys, ids and timestamps."""

from __future__ import annotations

import re
import secrets
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

API_KEY_PREFIX = "th_"
SLUG_MAX_LENGTH = 50

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim dashes, cap at 50 chars.

    A title with no usable characters falls back to "project" rather than an
    empty slug, which would not be addressable in a URL.
    """
    slug = _NON_ALNUM.sub("-", text.lower())
    slug = slug.strip("-")
    return slug[:SLUG_MAX_LENGTH] or "project"


def unique_slug(base: str, taken: Iterable[str]) -> str:
    """Return base, or the first of base-1, base-2, ... not in taken."""
    existing = set(taken)
    slug = base
    counter = 1
    while slug in existing:
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def generate_api_key() -> str:
    return API_KEY_PREFIX + secrets.token_hex(32)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-01-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
