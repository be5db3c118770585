"""Tab snapshot builder: tab handles → URL records."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from tabrelay.errors import NoTargetError
from tabrelay.ids import new_id
from tabrelay.models import Clock, TabHandle, UrlRecord, iso_timestamp, utc_now


def build_records(
    tabs: Sequence[TabHandle],
    category_id: str,
    *,
    clock: Clock = utc_now,
    id_factory: Callable[[], str] = new_id,
) -> list[UrlRecord]:
    """Return one URL record per tab, in input order.

    Args:
        tabs: Captured tabs in enumeration order.
        category_id: Destination category for every record.
        clock: Source of the capture instant.
        id_factory: Source of record ids.

    Returns:
        Records with ``description`` empty and ``created_at == updated_at``.
        Empty or missing titles fall back to the tab's url.

    Raises:
        NoTargetError: If *tabs* is empty.
    """
    if not tabs:
        raise NoTargetError("No tabs to capture")

    records: list[UrlRecord] = []
    for tab in tabs:
        stamp = iso_timestamp(clock())
        records.append(
            UrlRecord(
                id=id_factory(),
                url=tab.url,
                title=tab.title or tab.url,
                description="",
                category_id=category_id,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return records
