"""tabrelay init — write the global config and create category storage.

Usage:
  tabrelay init
  tabrelay init --store ~/Sync/tabrelay.db
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tabrelay.bridge.desktop import DesktopBridge
from tabrelay.categories import CategoryStore
from tabrelay.cli.errors import err_config, err_storage
from tabrelay.config import ConfigError, ensure_global_config, load_config
from tabrelay.errors import StorageError

console = Console()


def init_cmd(
    store: Annotated[
        Path | None,
        typer.Option("--store", help="Category storage database (overrides config)."),
    ] = None,
) -> None:
    """Create ~/.tabrelay/config.yaml and the category store."""
    cfg_path = ensure_global_config()
    console.print(f"  [green]✓[/] {cfg_path} (global config)")

    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(exc))
        raise typer.Exit(1)

    db_path = store if store is not None else Path(cfg.store.path).expanduser()
    try:
        bridge = DesktopBridge(db_path, opener=[])
    except StorageError as exc:
        console.print(err_storage(str(db_path), exc))
        raise typer.Exit(1)
    with bridge:
        categories = asyncio.run(CategoryStore(bridge).load_categories())
    console.print(f"  [green]✓[/] {db_path} ({len(categories)} categories)")

    console.print("\nNext steps:")
    console.print("  1. tabrelay categories add \"Reading list\"   (optional)")
    console.print("  2. tabrelay save --url <url>                (save a tab)")
