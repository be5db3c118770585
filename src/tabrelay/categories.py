"""Category store adapter (load, bootstrap, create).

The only component that touches the ``"categories"`` storage key. The list is
read-modify-written without any transactional guarantee: two callers that
both see an empty store each bootstrap their own default category.
"""

from __future__ import annotations

import logging
from typing import Any

from tabrelay.bridge.base import HostBridge
from tabrelay.errors import StorageError
from tabrelay.ids import new_id
from tabrelay.models import Category, Clock, iso_timestamp, utc_now

logger = logging.getLogger(__name__)

STORAGE_KEY = "categories"
DEFAULT_CATEGORY_NAME = "Bookmarks"


class CategoryStore:
    """Reads and lazily bootstraps the category list through a host bridge."""

    def __init__(self, bridge: HostBridge, *, clock: Clock = utc_now) -> None:
        self._bridge = bridge
        self._clock = clock

    async def load_categories(self) -> list[Category]:
        """Return the stored categories, bootstrapping ``Bookmarks`` when none exist.

        Only a missing or empty stored list is bootstrapped. A stored value
        with no usable entries is left in place and an in-memory default is
        returned instead, as it is on storage failures.
        """
        try:
            raw = await self._bridge.get_storage(STORAGE_KEY)
        except StorageError as exc:
            logger.warning("Category load failed, using in-memory default: %s", exc)
            return [self._new_category(DEFAULT_CATEGORY_NAME)]

        if raw is not None and raw != []:
            categories = _parse(raw)
            if categories:
                return categories
            logger.warning("No usable stored categories, using in-memory default")
            return [self._new_category(DEFAULT_CATEGORY_NAME)]

        default = self._new_category(DEFAULT_CATEGORY_NAME)
        try:
            await self._bridge.set_storage(STORAGE_KEY, [default.to_dict()])
        except StorageError as exc:
            logger.warning("Could not persist default category: %s", exc)
        else:
            logger.info("Bootstrapped default category %r (%s)", default.name, default.id)
        return [default]

    async def create_category(self, name: str) -> Category | None:
        """Append a new category named *name* (trimmed).

        The new entry is appended to the stored list as-is, so fields and
        entries written by the receiving app survive.

        Returns None, leaving storage untouched, when the trimmed name is empty.

        Raises:
            StorageError: If the category list cannot be read or written, or
                the stored value is not a list.
        """
        name = name.strip()
        if not name:
            return None

        raw = await self._bridge.get_storage(STORAGE_KEY)
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise StorageError(
                f"Stored categories are a {type(raw).__name__}, not a list; refusing to overwrite."
            )
        category = self._new_category(name)
        await self._bridge.set_storage(STORAGE_KEY, [*raw, category.to_dict()])
        return category

    def _new_category(self, name: str) -> Category:
        now = iso_timestamp(self._clock())
        return Category(id=new_id(), name=name, created_at=now, updated_at=now)


def resolve_category(categories: list[Category], ref: str) -> Category | None:
    """Return the category whose id equals *ref*, else the first with that name."""
    ref = ref.strip()
    if not ref:
        return None
    for category in categories:
        if category.id == ref:
            return category
    for category in categories:
        if category.name == ref:
            return category
    return None


def _parse(raw: Any) -> list[Category]:
    if not raw:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring stored categories of type %s", type(raw).__name__)
        return []
    categories: list[Category] = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("id") or not entry.get("name"):
            logger.warning("Skipping malformed stored category: %r", entry)
            continue
        categories.append(Category.from_dict(entry))
    return categories
