"""Tests for bounded custom-scheme invocation."""

from __future__ import annotations

import asyncio

from conftest import FakeBridge
from tabrelay.handoff.invoke import InvokeOutcome, invoke_uri


def test_confirmed_when_host_returns():
    bridge = FakeBridge(open_mode="ok")
    assert asyncio.run(invoke_uri(bridge, "later:///x", 0.5)) is InvokeOutcome.CONFIRMED
    assert bridge.opened == ["later:///x"]


def test_failed_on_explicit_error():
    bridge = FakeBridge(open_mode="fail")
    outcome = asyncio.run(invoke_uri(bridge, "later:///x", 0.5))
    assert outcome is InvokeOutcome.FAILED
    assert not outcome.succeeded


def test_timed_out_counts_as_success():
    bridge = FakeBridge(open_mode="hang")
    outcome = asyncio.run(invoke_uri(bridge, "later:///x", 0.05))
    assert outcome is InvokeOutcome.TIMED_OUT
    assert outcome.succeeded
