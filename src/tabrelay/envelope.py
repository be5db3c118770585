"""Export envelope builder and JSON codec.

The JSON form is compact (no whitespace) and keeps non-ASCII characters, so
its length matches what the receiving app sees after URL decoding.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from tabrelay.errors import EnvelopeError
from tabrelay.models import (
    SCHEMA_VERSION,
    Category,
    Clock,
    ExportEnvelope,
    UrlRecord,
    iso_timestamp,
    utc_now,
)


def build_envelope(
    records: Sequence[UrlRecord],
    categories: Sequence[Category],
    *,
    clock: Clock = utc_now,
) -> ExportEnvelope:
    """Assemble a versioned envelope from *records* and *categories*.

    Category references are not checked against *categories*.
    """
    now = iso_timestamp(clock())
    return ExportEnvelope(
        urls=list(records),
        categories=[c.snapshot(now) for c in categories],
        version=SCHEMA_VERSION,
        exported_at=now,
    )


def envelope_to_json(envelope: ExportEnvelope) -> str:
    return json.dumps(envelope.to_dict(), separators=(",", ":"), ensure_ascii=False)


def envelope_from_json(text: str) -> ExportEnvelope:
    """Parse an envelope previously produced by :func:`envelope_to_json`.

    Raises:
        EnvelopeError: If *text* is not JSON or lacks required fields.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EnvelopeError(f"Envelope is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise EnvelopeError("Envelope must be a JSON object.")
    try:
        return ExportEnvelope.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise EnvelopeError(f"Envelope is malformed: {exc!r}") from exc
