"""Handoff dispatcher — deliver an export envelope to the receiving app.

Two strategies, chosen once per dispatcher from ``handoff.strategy``:

direct (default)
  1 record   → {scheme}:///add deep link
  2+ records → {scheme}:///import deep link, unless it is longer than
               ``max_url_length``
  any failure, oversized link, or a host without URI support → clipboard

clipboard-first
  clipboard write, then a {scheme}:///clipboard-import signal
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from tabrelay.bridge.base import HostBridge
from tabrelay.config import STRATEGY_CLIPBOARD_FIRST, HandoffCfg
from tabrelay.envelope import envelope_to_json
from tabrelay.errors import ClipboardError, DirectHandoffError
from tabrelay.handoff.invoke import InvokeOutcome, invoke_uri
from tabrelay.handoff.links import add_link, clipboard_import_link, import_link
from tabrelay.models import ExportEnvelope
from tabrelay.status import StatusKind

logger = logging.getLogger(__name__)


class Channel(str, Enum):
    DIRECT = "direct"
    CLIPBOARD = "clipboard"
    NONE = "none"


@dataclass
class HandoffResult:
    """Terminal state of one dispatch."""

    delivered: bool
    channel: Channel
    count: int
    message: str
    kind: StatusKind
    outcome: InvokeOutcome | None = None
    uri: str | None = None
    error: str | None = None


class HandoffDispatcher:
    """Delivers envelopes through a host bridge."""

    def __init__(self, bridge: HostBridge, settings: HandoffCfg | None = None) -> None:
        self._bridge = bridge
        self.settings = settings or HandoffCfg()

    async def dispatch(self, envelope: ExportEnvelope, category_name: str = "") -> HandoffResult:
        """Deliver *envelope*; *category_name* feeds the single-record ``add`` link."""
        if self.settings.strategy == STRATEGY_CLIPBOARD_FIRST:
            return await self._clipboard_then_signal(envelope)
        return await self._direct_then_clipboard(envelope, category_name)

    # ------------------------------------------------------------------
    # Strategy: direct, then clipboard
    # ------------------------------------------------------------------

    async def _direct_then_clipboard(
        self, envelope: ExportEnvelope, category_name: str
    ) -> HandoffResult:
        count = len(envelope.urls)
        uri: str | None = None
        try:
            uri = self._direct_link(envelope, category_name)
            outcome = await self._invoke(uri)
        except DirectHandoffError as exc:
            logger.info("Skipping direct handoff: %s", exc)
            return await self._clipboard(envelope, uri=uri)

        if not outcome.succeeded:
            return await self._clipboard(envelope, uri=uri, outcome=outcome)

        return HandoffResult(
            delivered=True,
            channel=Channel.DIRECT,
            count=count,
            message=self._sent_message(count),
            kind=StatusKind.SUCCESS,
            outcome=outcome,
            uri=uri,
        )

    def _direct_link(self, envelope: ExportEnvelope, category_name: str) -> str:
        if not self._bridge.can_open_uri:
            raise DirectHandoffError("host cannot open external URIs")

        scheme = self.settings.scheme
        if len(envelope.urls) == 1:
            return add_link(scheme, envelope.urls[0], category_name)

        uri = import_link(scheme, envelope)
        if len(uri) > self.settings.max_url_length:
            raise DirectHandoffError(
                f"import link is {len(uri)} chars (limit {self.settings.max_url_length})"
            )
        return uri

    async def _clipboard(
        self,
        envelope: ExportEnvelope,
        *,
        uri: str | None = None,
        outcome: InvokeOutcome | None = None,
    ) -> HandoffResult:
        count = len(envelope.urls)
        try:
            await self._bridge.write_clipboard(envelope_to_json(envelope))
        except ClipboardError as exc:
            logger.error("Could not copy text: %s", exc)
            return self._clipboard_failed(count, exc, uri=uri, outcome=outcome)
        return HandoffResult(
            delivered=True,
            channel=Channel.CLIPBOARD,
            count=count,
            message=self._copied_message(count),
            kind=StatusKind.SUCCESS,
            outcome=outcome,
            uri=uri,
        )

    # ------------------------------------------------------------------
    # Strategy: clipboard, then signal
    # ------------------------------------------------------------------

    async def _clipboard_then_signal(self, envelope: ExportEnvelope) -> HandoffResult:
        count = len(envelope.urls)
        try:
            await self._bridge.write_clipboard(envelope_to_json(envelope))
        except ClipboardError as exc:
            logger.error("Could not copy text: %s", exc)
            return self._clipboard_failed(count, exc)

        if not self._bridge.can_open_uri:
            return HandoffResult(
                delivered=True,
                channel=Channel.CLIPBOARD,
                count=count,
                message=self._copied_message(count),
                kind=StatusKind.SUCCESS,
            )

        uri = clipboard_import_link(self.settings.scheme)
        if self.settings.signal_delay:
            await asyncio.sleep(self.settings.signal_delay)
        outcome = await self._invoke(uri)
        if outcome.succeeded:
            return HandoffResult(
                delivered=True,
                channel=Channel.DIRECT,
                count=count,
                message=self._sent_message(count),
                kind=StatusKind.SUCCESS,
                outcome=outcome,
                uri=uri,
            )
        # The envelope is already on the clipboard; the user pastes it.
        return HandoffResult(
            delivered=True,
            channel=Channel.CLIPBOARD,
            count=count,
            message=self._copied_message(count),
            kind=StatusKind.SUCCESS,
            outcome=outcome,
            uri=uri,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _invoke(self, uri: str) -> InvokeOutcome:
        logger.debug("Opening %s (%d chars)", uri[:60], len(uri))
        return await invoke_uri(self._bridge, uri, self.settings.invoke_timeout)

    def _clipboard_failed(
        self,
        count: int,
        exc: ClipboardError,
        *,
        uri: str | None = None,
        outcome: InvokeOutcome | None = None,
    ) -> HandoffResult:
        return HandoffResult(
            delivered=False,
            channel=Channel.NONE,
            count=count,
            message="Failed to copy to clipboard",
            kind=StatusKind.ERROR,
            outcome=outcome,
            uri=uri,
            error=str(exc),
        )

    def _sent_message(self, count: int) -> str:
        return f"{count} tab(s) sent to {self.settings.app_name} app."

    def _copied_message(self, count: int) -> str:
        app = self.settings.app_name
        return f"{count} tab(s) copied to clipboard. Paste into {app} app to import."
