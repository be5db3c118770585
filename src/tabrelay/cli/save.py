"""tabrelay save / save-all — capture tabs and hand them to the receiving app.

Usage:
  tabrelay save --url https://example.com --title Example
  tabrelay save --url https://example.com --category "Reading list"
  tabrelay save-all --tabs-file tabs.json
  some-tab-exporter | tabrelay save-all --tabs-file -
  tabrelay save-all --tabs-file tabs.json --dry-run
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tabrelay.bridge.desktop import DesktopBridge, load_tabs
from tabrelay.capture import build_capture, capture
from tabrelay.categories import CategoryStore
from tabrelay.cli.errors import (
    err_category_not_found,
    err_config,
    err_handoff_failed,
    err_no_tabs,
    err_storage,
    err_tabs_file,
)
from tabrelay.config import ConfigError, TabRelayConfig, load_config
from tabrelay.envelope import envelope_to_json
from tabrelay.errors import EnvelopeError, NoCategoryError, NoTargetError, StorageError
from tabrelay.handoff.dispatcher import HandoffDispatcher
from tabrelay.models import TabHandle, TabScope
from tabrelay.status import ConsoleStatusReporter

console = Console()

_CategoryOpt = Annotated[
    str | None,
    typer.Option("--category", "-c", help="Destination category (id or name). Default: first category."),
]
_StoreOpt = Annotated[
    Path | None,
    typer.Option("--store", help="Category storage database (overrides config)."),
]
_DryRunOpt = Annotated[
    bool,
    typer.Option("--dry-run", help="Print the export envelope instead of sending it."),
]


def save_cmd(
    url: Annotated[str, typer.Option("--url", "-u", help="Address of the tab to save.")],
    title: Annotated[str, typer.Option("--title", "-t", help="Tab title (defaults to the url).")] = "",
    category: _CategoryOpt = None,
    store: _StoreOpt = None,
    dry_run: _DryRunOpt = False,
) -> None:
    """Save the current tab."""
    tabs = [TabHandle(url=url, title=title, active=True)] if url.strip() else []
    _run(tabs, TabScope.ACTIVE, category, store, dry_run)


def save_all_cmd(
    tabs_file: Annotated[
        str,
        typer.Option("--tabs-file", "-f", help="JSON file listing the window's tabs ('-' for stdin)."),
    ],
    category: _CategoryOpt = None,
    store: _StoreOpt = None,
    dry_run: _DryRunOpt = False,
) -> None:
    """Save every tab of the current window."""
    try:
        if tabs_file == "-":
            text = sys.stdin.read()
        else:
            text = Path(tabs_file).read_text(encoding="utf-8")
        tabs = load_tabs(text)
    except (OSError, EnvelopeError) as exc:
        console.print(err_tabs_file(tabs_file, exc))
        raise typer.Exit(1)
    _run(tabs, TabScope.WINDOW, category, store, dry_run)


# ------------------------------------------------------------------
# Shared pipeline
# ------------------------------------------------------------------


def _run(
    tabs: list[TabHandle],
    scope: TabScope,
    category: str | None,
    store: Path | None,
    dry_run: bool,
) -> None:
    cfg = _load_cfg()
    if not tabs:
        console.print(err_no_tabs())
        raise typer.Exit(1)

    db_path = store if store is not None else Path(cfg.store.path).expanduser()
    try:
        bridge = DesktopBridge(db_path, tabs)
    except StorageError as exc:
        console.print(err_storage(str(db_path), exc))
        raise typer.Exit(1)

    with bridge:
        if dry_run:
            _dry_run(bridge, scope, category)
            return

        dispatcher = HandoffDispatcher(bridge, cfg.handoff)
        reporter = ConsoleStatusReporter(console, clear_after=cfg.status.clear_after)
        try:
            result = asyncio.run(capture(bridge, dispatcher, reporter, scope, category))
        except NoCategoryError:
            _explain_missing_category(bridge, category or "")
            raise typer.Exit(1)
        except NoTargetError:
            raise typer.Exit(1)

    handoff = result.handoff
    if handoff is None or not handoff.delivered:
        console.print(err_handoff_failed(handoff.error if handoff else None))
        raise typer.Exit(1)


def _dry_run(bridge: DesktopBridge, scope: TabScope, category: str | None) -> None:
    try:
        result = asyncio.run(build_capture(bridge, scope, category))
    except NoCategoryError:
        _explain_missing_category(bridge, category or "")
        raise typer.Exit(1)
    typer.echo(envelope_to_json(result.envelope))


def _explain_missing_category(bridge: DesktopBridge, ref: str) -> None:
    names = [c.name for c in asyncio.run(CategoryStore(bridge).load_categories())]
    console.print(err_category_not_found(ref, names))


def _load_cfg() -> TabRelayConfig:
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(exc))
        raise typer.Exit(1)
