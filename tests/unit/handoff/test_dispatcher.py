"""Tests for the handoff dispatcher (both strategies)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

from conftest import FakeBridge
from tabrelay.config import HandoffCfg
from tabrelay.envelope import build_envelope, envelope_from_json
from tabrelay.handoff.dispatcher import Channel, HandoffDispatcher
from tabrelay.handoff.invoke import InvokeOutcome
from tabrelay.models import Category, TabHandle
from tabrelay.snapshot import build_records
from tabrelay.status import StatusKind

_FAST = dict(invoke_timeout=0.05, signal_delay=0)


def _envelope(clock, n=1, url_len=20):
    tabs = [
        TabHandle(url=f"https://site{i}.test/" + "p" * url_len, title=f"Tab {i}")
        for i in range(n)
    ]
    cats = [Category(id="c1", name="Bookmarks")]
    return build_envelope(build_records(tabs, "c1", clock=clock), cats, clock=clock)


def _dispatch(bridge, envelope, category="Bookmarks", **cfg):
    settings = HandoffCfg(**{**_FAST, **cfg})
    return asyncio.run(HandoffDispatcher(bridge, settings).dispatch(envelope, category))


# ---------------------------------------------------------------------------
# direct strategy: single record
# ---------------------------------------------------------------------------


def test_single_record_uses_add_endpoint(clock):
    bridge = FakeBridge()
    result = _dispatch(bridge, _envelope(clock, n=1))
    assert len(bridge.opened) == 1
    assert bridge.opened[0].startswith("later:///add?")
    assert "import" not in bridge.opened[0]
    assert result.delivered
    assert result.channel is Channel.DIRECT
    assert result.outcome is InvokeOutcome.CONFIRMED
    assert result.message == "1 tab(s) sent to Later app."
    assert bridge.clipboard == []


def test_single_record_long_url_still_uses_add(clock):
    bridge = FakeBridge()
    _dispatch(bridge, _envelope(clock, n=1, url_len=5_000))
    assert bridge.opened[0].startswith("later:///add?")


def test_single_record_failure_falls_back_to_clipboard(clock):
    bridge = FakeBridge(open_mode="fail")
    env = _envelope(clock, n=1)
    result = _dispatch(bridge, env)
    assert result.channel is Channel.CLIPBOARD
    assert result.outcome is InvokeOutcome.FAILED
    assert result.delivered
    assert envelope_from_json(bridge.clipboard[0]) == env
    assert result.message == "1 tab(s) copied to clipboard. Paste into Later app to import."


def test_single_record_timeout_is_optimistic_success(clock):
    bridge = FakeBridge(open_mode="hang")
    result = _dispatch(bridge, _envelope(clock, n=1))
    assert result.channel is Channel.DIRECT
    assert result.outcome is InvokeOutcome.TIMED_OUT
    assert bridge.clipboard == []


# ---------------------------------------------------------------------------
# direct strategy: bulk
# ---------------------------------------------------------------------------


def test_bulk_under_ceiling_uses_import_endpoint(clock):
    bridge = FakeBridge()
    result = _dispatch(bridge, _envelope(clock, n=2))
    assert bridge.opened[0].startswith("later:///import?data=")
    assert len(bridge.opened[0]) <= 2_000
    assert result.channel is Channel.DIRECT
    assert result.message == "2 tab(s) sent to Later app."


def test_bulk_over_ceiling_skips_direct(clock):
    bridge = FakeBridge()
    env = _envelope(clock, n=5, url_len=400)
    result = _dispatch(bridge, env)
    assert bridge.opened == []
    assert result.channel is Channel.CLIPBOARD
    assert result.outcome is None
    assert envelope_from_json(bridge.clipboard[0]) == env


def test_bulk_ceiling_is_configurable(clock):
    bridge = FakeBridge()
    _dispatch(bridge, _envelope(clock, n=2), max_url_length=50)
    assert bridge.opened == []
    assert len(bridge.clipboard) == 1


def test_bulk_failure_falls_back(clock):
    bridge = FakeBridge(open_mode="fail")
    result = _dispatch(bridge, _envelope(clock, n=3))
    assert len(bridge.opened) == 1
    assert result.channel is Channel.CLIPBOARD


def test_host_without_uri_support_goes_to_clipboard(clock):
    bridge = FakeBridge(can_open_uri=False)
    result = _dispatch(bridge, _envelope(clock, n=1))
    assert bridge.opened == []
    assert result.channel is Channel.CLIPBOARD


def test_clipboard_failure_is_terminal_error(clock):
    bridge = FakeBridge(open_mode="fail", fail_clipboard=True)
    result = _dispatch(bridge, _envelope(clock, n=1))
    assert not result.delivered
    assert result.kind is StatusKind.ERROR
    assert result.message == "Failed to copy to clipboard"
    assert result.error == "clipboard denied"
    assert len(bridge.opened) == 1  # no retry


def test_custom_scheme_and_app_name(clock):
    bridge = FakeBridge()
    result = _dispatch(bridge, _envelope(clock, n=1), scheme="stash", app_name="Stash")
    assert bridge.opened[0].startswith("stash:///add?")
    assert result.message == "1 tab(s) sent to Stash app."


# ---------------------------------------------------------------------------
# clipboard-first strategy
# ---------------------------------------------------------------------------


def test_clipboard_first_writes_then_signals(clock):
    bridge = FakeBridge()
    env = _envelope(clock, n=5, url_len=400)
    result = _dispatch(bridge, env, strategy="clipboard-first")
    assert envelope_from_json(bridge.clipboard[0]) == env
    assert bridge.opened == ["later:///clipboard-import"]
    assert result.channel is Channel.DIRECT
    assert result.message == "5 tab(s) sent to Later app."


def test_clipboard_first_single_record_never_uses_add(clock):
    bridge = FakeBridge()
    _dispatch(bridge, _envelope(clock, n=1), strategy="clipboard-first")
    assert bridge.opened == ["later:///clipboard-import"]


def test_clipboard_first_signal_failure_leaves_clipboard_copy(clock):
    bridge = FakeBridge(open_mode="fail")
    result = _dispatch(bridge, _envelope(clock, n=2), strategy="clipboard-first")
    assert result.delivered
    assert result.channel is Channel.CLIPBOARD
    assert len(bridge.clipboard) == 1


def test_clipboard_first_clipboard_failure_skips_signal(clock):
    bridge = FakeBridge(fail_clipboard=True)
    result = _dispatch(bridge, _envelope(clock, n=2), strategy="clipboard-first")
    assert not result.delivered
    assert bridge.opened == []


def test_clipboard_first_waits_signal_delay(clock):
    bridge = FakeBridge()
    with patch("tabrelay.handoff.dispatcher.asyncio.sleep", new_callable=AsyncMock) as sleep:
        _dispatch(bridge, _envelope(clock, n=1), strategy="clipboard-first", signal_delay=0.3)
    sleep.assert_called_once_with(0.3)
