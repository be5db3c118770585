"""Tests for tabrelay rich error messages."""

from __future__ import annotations

import pytest

from tabrelay.cli.errors import (
    err_category_not_found,
    err_config,
    err_empty_category_name,
    err_handoff_failed,
    err_no_tabs,
    err_storage,
    err_tabs_file,
)


@pytest.mark.parametrize(
    "msg",
    [
        err_config(ValueError("bad")),
        err_storage("/tmp/x.db", OSError("denied")),
        err_tabs_file("tabs.json", ValueError("bad json")),
        err_no_tabs(),
        err_category_not_found("Nope", ["Bookmarks"]),
        err_empty_category_name(),
        err_handoff_failed("no xclip"),
    ],
)
def test_every_error_has_cause_and_action(msg: str) -> None:
    assert msg.startswith("[red]Error:[/]")
    assert len(msg.splitlines()) >= 2


def test_category_not_found_lists_names_and_fix() -> None:
    msg = err_category_not_found("Nope", ["Bookmarks", "Work"])
    assert "Bookmarks, Work" in msg
    assert 'tabrelay categories add "Nope"' in msg


def test_category_not_found_without_names() -> None:
    assert "(none)" in err_category_not_found("Nope", [])


def test_storage_names_path_and_flag() -> None:
    msg = err_storage("/tmp/x.db", OSError("denied"))
    assert "/tmp/x.db" in msg
    assert "--store" in msg


def test_handoff_failed_detail_optional() -> None:
    assert "no xclip" in err_handoff_failed("no xclip")
    assert err_handoff_failed(None).count("\n") == 1
