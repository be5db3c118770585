"""Host bridge interface.

The capture pipeline talks to its host (browser runtime, desktop shell, a test
double) only through this capability set: query tabs, get/set storage, write
the clipboard, open an external URI.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tabrelay.models import TabHandle, TabScope


class HostBridge(ABC):
    """Abstract capability set every host adapter implements.

    All operations are coroutines. Implementations raise
    :class:`~tabrelay.errors.StorageError`,
    :class:`~tabrelay.errors.ClipboardError` and
    :class:`~tabrelay.errors.DirectHandoffError` for failures of the
    respective boundary; anything else is a bug.
    """

    #: False when the host cannot invoke external URIs at all; the
    #: dispatcher then goes straight to the clipboard.
    can_open_uri: bool = True

    @abstractmethod
    async def query_tabs(self, scope: TabScope) -> list[TabHandle]:
        """Return the tabs selected by *scope*, in enumeration order."""

    @abstractmethod
    async def get_storage(self, key: str) -> Any:
        """Return the stored value for *key*, or None when absent."""

    @abstractmethod
    async def set_storage(self, key: str, value: Any) -> None:
        """Persist *value* under *key*."""

    @abstractmethod
    async def write_clipboard(self, text: str) -> None:
        """Place *text* on the system clipboard."""

    @abstractmethod
    async def open_uri(self, uri: str) -> None:
        """Invoke *uri* with the host's external handler.

        Returns once the host reports the hand-off done. May never return for
        slow or silent handlers; callers bound the wait themselves.
        """
