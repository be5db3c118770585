"""Record identifiers."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Return a fresh version-4 UUID string (36 chars, lowercase hex)."""
    return str(uuid.uuid4())
