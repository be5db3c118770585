"""Domain models: categories, URL records, tab handles, export envelopes.

Field names on the wire are camelCase (the receiving app's contract); the
dataclasses use snake_case and convert in ``to_dict()`` / ``from_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

SCHEMA_VERSION = "1.0.0"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format *moment* as ``YYYY-MM-DDTHH:MM:SS.sssZ`` (millisecond precision, UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class TabScope(str, Enum):
    """Which tabs a trigger captures."""

    ACTIVE = "active"  # the current tab of the current window
    WINDOW = "window"  # every tab of the current window


@dataclass
class TabHandle:
    url: str
    title: str | None = None
    active: bool = False


@dataclass
class Category:
    id: str
    name: str
    created_at: str | None = None  # optional on stored categories
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    def snapshot(self, now: str) -> dict[str, Any]:
        """Export form: timestamps always present, defaulted to *now*."""
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at or now,
            "updatedAt": self.updated_at or now,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class UrlRecord:
    id: str
    url: str
    title: str
    category_id: str
    created_at: str
    updated_at: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "categoryId": self.category_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UrlRecord:
        return cls(
            id=str(data["id"]),
            url=str(data["url"]),
            title=str(data["title"]),
            description=str(data.get("description", "")),
            category_id=str(data["categoryId"]),
            created_at=str(data["createdAt"]),
            updated_at=str(data["updatedAt"]),
        )


@dataclass
class ExportEnvelope:
    """Versioned payload handed to the receiving application."""

    urls: list[UrlRecord]
    exported_at: str
    categories: list[dict[str, Any]] = field(default_factory=list)
    version: str = SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "urls": [u.to_dict() for u in self.urls],
            "categories": [dict(c) for c in self.categories],
            "version": self.version,
            "exportedAt": self.exported_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportEnvelope:
        categories = data.get("categories", [])
        if not isinstance(categories, list) or not all(isinstance(c, dict) for c in categories):
            raise TypeError("categories must be a list of objects")
        return cls(
            urls=[UrlRecord.from_dict(u) for u in data["urls"]],
            categories=[dict(c) for c in categories],
            version=str(data["version"]),
            exported_at=str(data["exportedAt"]),
        )
