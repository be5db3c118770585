"""tabrelay categories CLI commands.

Commands:
  tabrelay categories list         — show stored categories (bootstraps "Bookmarks")
  tabrelay categories add <name>   — create a category
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from tabrelay.bridge.desktop import DesktopBridge
from tabrelay.categories import CategoryStore
from tabrelay.cli.errors import err_config, err_empty_category_name, err_storage
from tabrelay.config import ConfigError, load_config
from tabrelay.errors import StorageError
from tabrelay.models import Category

console = Console()

categories_app = typer.Typer(
    name="categories",
    help="Manage destination categories (list, add).",
    add_completion=False,
)

_StoreOpt = Annotated[
    Path | None,
    typer.Option("--store", help="Category storage database (overrides config)."),
]


@categories_app.command("list")
def categories_list_cmd(store: _StoreOpt = None) -> None:
    """List categories in insertion order."""
    bridge = _open_bridge(store)
    with bridge:
        categories = asyncio.run(CategoryStore(bridge).load_categories())

    table = Table(title="Categories", show_header=True, header_style="bold")
    table.add_column("Name", style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Created")
    for category in categories:
        table.add_row(category.name, category.id, category.created_at or "")
    console.print(table)


@categories_app.command("add")
def categories_add_cmd(
    name: Annotated[str, typer.Argument(help="Display name of the new category.")],
    store: _StoreOpt = None,
) -> None:
    """Create a category."""
    bridge = _open_bridge(store)
    with bridge:
        try:
            category = asyncio.run(_add_category(bridge, name))
        except StorageError as exc:
            console.print(err_storage(str(store or ""), exc))
            raise typer.Exit(1)

    if category is None:
        console.print(err_empty_category_name())
        raise typer.Exit(1)

    console.print(f"[green]✓[/] Created category: [bold]{category.name}[/]")
    console.print(f"  id: {category.id}")


async def _add_category(bridge: DesktopBridge, name: str) -> Category | None:
    store = CategoryStore(bridge)
    # Same order as opening the picker: bootstrap first, then append.
    await store.load_categories()
    return await store.create_category(name)


def _open_bridge(store: Path | None) -> DesktopBridge:
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(exc))
        raise typer.Exit(1)
    db_path = store if store is not None else Path(cfg.store.path).expanduser()
    try:
        return DesktopBridge(db_path)
    except StorageError as exc:
        console.print(err_storage(str(db_path), exc))
        raise typer.Exit(1)
