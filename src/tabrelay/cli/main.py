"""tabrelay CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from tabrelay.cli.categories import categories_app
from tabrelay.cli.init import init_cmd
from tabrelay.cli.save import save_all_cmd, save_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("tabrelay")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tabrelay {_installed_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=False)],
        force=True,
    )


app = typer.Typer(
    name="tabrelay",
    help=(
        "tabrelay — hand browser tabs to the Later desktop app.\n\n"
        "  tabrelay save       Save the current tab.\n"
        "  tabrelay save-all   Save every tab of the window."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log handoff details."),
    ] = False,
) -> None:
    """tabrelay — hand browser tabs to the Later desktop app."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.command("save")(save_cmd)
app.command("save-all")(save_all_cmd)
app.add_typer(categories_app, name="categories")


@app.command("version")
def version_cmd() -> None:
    """Show the installed tabrelay version."""
    typer.echo(f"tabrelay {_installed_version()}")


if __name__ == "__main__":
    app()
