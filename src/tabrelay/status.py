"""Transient status feedback for the user-facing surface."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

from rich.console import Console

DEFAULT_CLEAR_AFTER = 3.0


class StatusKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Status:
    message: str
    kind: StatusKind


class StatusReporter:
    """Holds the current status message and clears it after *clear_after* seconds.

    The auto-clear is scheduled on the running asyncio loop; outside a loop the
    status stays until the next report or an explicit :meth:`clear`.
    """

    def __init__(self, clear_after: float = DEFAULT_CLEAR_AFTER) -> None:
        self.clear_after = clear_after
        self.current: Status | None = None
        self.history: list[Status] = []
        self._pending: asyncio.TimerHandle | None = None

    def report(self, message: str, kind: StatusKind = StatusKind.SUCCESS) -> Status:
        status = Status(message=message, kind=StatusKind(kind))
        self.current = status
        self.history.append(status)
        self._render(status)
        self._schedule_clear()
        return status

    def clear(self) -> None:
        self.current = None
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_clear(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._pending = loop.call_later(self.clear_after, self.clear)

    def _render(self, status: Status) -> None:
        """Hook for subclasses that display the status somewhere."""


class ConsoleStatusReporter(StatusReporter):
    """Prints each status line to a rich console."""

    def __init__(
        self,
        console: Console | None = None,
        clear_after: float = DEFAULT_CLEAR_AFTER,
    ) -> None:
        super().__init__(clear_after=clear_after)
        self.console = console or Console()

    def _render(self, status: Status) -> None:
        if status.kind is StatusKind.SUCCESS:
            self.console.print(f"[green]✓[/] {status.message}")
        else:
            self.console.print(f"[red]✗[/] {status.message}")
