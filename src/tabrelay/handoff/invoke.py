"""Bounded invocation of a custom-scheme URI.

Opening an external handler is fire-and-forget: the OS rarely reports an
unregistered or slow handler, so silence past the deadline counts as success.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from tabrelay.bridge.base import HostBridge
from tabrelay.errors import DirectHandoffError

logger = logging.getLogger(__name__)


class InvokeOutcome(str, Enum):
    CONFIRMED = "confirmed"  # the host reported the hand-off done
    FAILED = "failed"  # the host reported an error
    TIMED_OUT = "timed_out"  # no signal within the bounded wait; assume success

    @property
    def succeeded(self) -> bool:
        return self is not InvokeOutcome.FAILED


async def invoke_uri(bridge: HostBridge, uri: str, timeout: float) -> InvokeOutcome:
    """Open *uri* through *bridge*, waiting at most *timeout* seconds."""
    try:
        await asyncio.wait_for(bridge.open_uri(uri), timeout)
    except asyncio.TimeoutError:
        logger.debug("No response from URI handler within %.2fs; assuming success", timeout)
        return InvokeOutcome.TIMED_OUT
    except DirectHandoffError as exc:
        logger.info("Direct handoff failed: %s", exc)
        return InvokeOutcome.FAILED
    return InvokeOutcome.CONFIRMED
