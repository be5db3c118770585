"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
import copy
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from rich.console import Console

from tabrelay.bridge.base import HostBridge
from tabrelay.db.connection import Database
from tabrelay.db.migrations import run_migrations
from tabrelay.errors import ClipboardError, DirectHandoffError, StorageError
from tabrelay.models import TabHandle, TabScope


class FakeBridge(HostBridge):
    """In-memory host bridge recording every boundary call.

    open_mode: "ok" returns at once, "fail" raises DirectHandoffError,
    "hang" never returns (the caller's bounded wait decides).
    """

    def __init__(
        self,
        tabs: list[TabHandle] | None = None,
        storage: dict[str, Any] | None = None,
        *,
        open_mode: str = "ok",
        can_open_uri: bool = True,
        fail_storage_get: bool = False,
        fail_storage_set: bool = False,
        fail_clipboard: bool = False,
    ) -> None:
        self.tabs = list(tabs or [])
        self.storage: dict[str, Any] = storage if storage is not None else {}
        self.open_mode = open_mode
        self.can_open_uri = can_open_uri
        self.fail_storage_get = fail_storage_get
        self.fail_storage_set = fail_storage_set
        self.fail_clipboard = fail_clipboard
        self.opened: list[str] = []
        self.clipboard: list[str] = []
        self.storage_writes = 0

    async def query_tabs(self, scope: TabScope) -> list[TabHandle]:
        if scope is TabScope.WINDOW:
            return list(self.tabs)
        active = [t for t in self.tabs if t.active]
        return active[:1] or self.tabs[:1]

    async def get_storage(self, key: str) -> Any:
        if self.fail_storage_get:
            raise StorageError("storage offline")
        return copy.deepcopy(self.storage.get(key))

    async def set_storage(self, key: str, value: Any) -> None:
        if self.fail_storage_set:
            raise StorageError("quota exceeded")
        self.storage_writes += 1
        self.storage[key] = copy.deepcopy(value)

    async def write_clipboard(self, text: str) -> None:
        if self.fail_clipboard:
            raise ClipboardError("clipboard denied")
        self.clipboard.append(text)

    async def open_uri(self, uri: str) -> None:
        self.opened.append(uri)
        if self.open_mode == "fail":
            raise DirectHandoffError("no handler for scheme")
        if self.open_mode == "hang":
            await asyncio.Event().wait()


class FixedClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def fake_bridge():
    return FakeBridge(tabs=[TabHandle(url="https://example.com", title="Example", active=True)])


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with migrations applied, closed after test."""
    db = Database(tmp_path / "tabrelay.db")
    conn = db.connect()
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run CLI commands in *tmp_path* with no global config and a throwaway store.

    Returns the store path the commands will use.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("tabrelay.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    for var in ("TABRELAY_SCHEME", "TABRELAY_STRATEGY"):
        monkeypatch.delenv(var, raising=False)
    store = tmp_path / "store.db"
    monkeypatch.setenv("TABRELAY_STORE", str(store))
    # Wide consoles keep rich from wrapping table cells and messages.
    for module in ("save", "categories", "init"):
        monkeypatch.setattr(f"tabrelay.cli.{module}.console", Console(width=200))
    return store


@pytest.fixture
def no_opener(monkeypatch):
    monkeypatch.setattr("tabrelay.bridge.desktop.opener_command", lambda platform=None: None)
