"""Desktop host bridge.

- Tabs: supplied up front (command-line arguments or a tabs file).
- Storage: SQLite key-value table (tabrelay.db).
- Clipboard: pyperclip.
- External URIs: the platform opener (``open`` on macOS, ``xdg-open``
  elsewhere, ``rundll32 url.dll`` on Windows) run as a detached subprocess
  polled from the event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import sqlite3
import subprocess
import sys
from pathlib import Path
from typing import Any

import pyperclip

from tabrelay.bridge.base import HostBridge
from tabrelay.db.connection import Database
from tabrelay.db.migrations import run_migrations
from tabrelay.db.repository import KeyValueRepository
from tabrelay.errors import ClipboardError, DirectHandoffError, EnvelopeError, StorageError
from tabrelay.models import TabHandle, TabScope

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.02


def opener_command(platform: str | None = None) -> list[str] | None:
    """Return the argv prefix that opens a URI on *platform*, or None if unavailable."""
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open"]
    if platform.startswith("win"):
        return ["rundll32", "url.dll,FileProtocolHandler"]
    if shutil.which("xdg-open"):
        return ["xdg-open"]
    return None


def load_tabs(text: str) -> list[TabHandle]:
    """Parse a tabs file: a JSON list of tab objects, or ``{"tabs": [...]}``.

    Raises:
        EnvelopeError: If *text* is not valid JSON or an entry has no url.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EnvelopeError(f"Tabs file is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("tabs", [])
    if not isinstance(data, list):
        raise EnvelopeError("Tabs file must contain a JSON list of tabs.")

    tabs: list[TabHandle] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or not entry.get("url"):
            raise EnvelopeError(f"Tab #{i} has no 'url'.")
        tabs.append(
            TabHandle(
                url=str(entry["url"]),
                title=entry.get("title"),
                active=bool(entry.get("active", False)),
            )
        )
    return tabs


class DesktopBridge(HostBridge):
    """Host bridge for running tabrelay from a desktop shell."""

    def __init__(
        self,
        db_path: Path | str,
        tabs: list[TabHandle] | None = None,
        *,
        opener: list[str] | None = None,
    ) -> None:
        """Open (or create) the storage database and remember the tab set.

        Args:
            db_path: SQLite file backing persistent storage.
            tabs: The current window's tabs, in order.
            opener: Override the URI opener argv prefix. None selects the
                platform opener; an empty list disables direct handoff.
        """
        self._tabs = list(tabs or [])
        self._opener = opener_command() if opener is None else (opener or None)
        self.can_open_uri = self._opener is not None
        try:
            self._conn = Database(db_path).connect()
            run_migrations(self._conn)
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Cannot open storage at '{db_path}': {exc}") from exc
        self._repo = KeyValueRepository(self._conn)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> DesktopBridge:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tabs
    # ------------------------------------------------------------------

    async def query_tabs(self, scope: TabScope) -> list[TabHandle]:
        if scope is TabScope.WINDOW:
            return list(self._tabs)
        active = [t for t in self._tabs if t.active]
        if active:
            return active[:1]
        return self._tabs[:1]

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    async def get_storage(self, key: str) -> Any:
        try:
            return await asyncio.to_thread(self._repo.get, key)
        except (sqlite3.Error, ValueError) as exc:
            raise StorageError(f"Failed to read '{key}': {exc}") from exc

    async def set_storage(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._repo.set, key, value)
        except (sqlite3.Error, TypeError) as exc:
            raise StorageError(f"Failed to write '{key}': {exc}") from exc

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    async def write_clipboard(self, text: str) -> None:
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Clipboard unavailable: {exc}") from exc

    # ------------------------------------------------------------------
    # External URIs
    # ------------------------------------------------------------------

    async def open_uri(self, uri: str) -> None:
        if self._opener is None:
            raise DirectHandoffError("No URI opener available on this platform.")
        try:
            proc = subprocess.Popen(
                [*self._opener, uri],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
                shell=False,
            )
        except OSError as exc:
            raise DirectHandoffError(f"Failed to launch {self._opener[0]}: {exc}") from exc

        try:
            while (returncode := proc.poll()) is None:
                await asyncio.sleep(_POLL_INTERVAL)
        finally:
            if proc.returncode is None:
                # Caller stopped waiting; the opener keeps running in its own session.
                logger.debug("URI opener pid %s still running; detached", proc.pid)
        if returncode != 0:
            raise DirectHandoffError(
                f"{self._opener[0]} exited with status {returncode} for {uri[:80]}"
            )
