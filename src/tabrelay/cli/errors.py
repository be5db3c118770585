"""tabrelay rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from tabrelay.cli.errors import err_storage
    console.print(err_storage(path, exc))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_config(exc: Exception) -> str:
    """Configuration file rejected."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {exc}\n"
        "  Fix tabrelay.yaml or ~/.tabrelay/config.yaml and retry."
    )


def err_storage(path: str, exc: Exception) -> str:
    """Category storage could not be opened."""
    return (
        f"[red]Error:[/] Cannot open category storage at '{path}'.\n"
        f"  {exc}\n"
        "  Check the path is writable, or pass:  --store PATH"
    )


def err_tabs_file(path: str, exc: Exception) -> str:
    """Tabs file missing or malformed."""
    return (
        f"[red]Error:[/] Cannot read tabs from '{path}'.\n"
        f"  {exc}\n"
        '  Expected a JSON list like:  [{"url": "https://example.com", "title": "Example"}]'
    )


def err_no_tabs() -> str:
    """Nothing to capture."""
    return (
        "[red]Error:[/] No tabs to capture.\n"
        "  Pass --url URL, or --tabs-file FILE with at least one tab."
    )


def err_category_not_found(ref: str, names: list[str]) -> str:
    """--category did not match any stored category."""
    known = ", ".join(names) if names else "(none)"
    return (
        f"[red]Error:[/] Category '{ref}' not found.\n"
        f"  Categories: {known}\n"
        f"  Create it:  tabrelay categories add \"{ref}\""
    )


def err_empty_category_name() -> str:
    return (
        "[red]Error:[/] Category name is empty.\n"
        "  Run:  tabrelay categories add \"Reading list\""
    )


def err_handoff_failed(error: str | None) -> str:
    """Clipboard fallback failed — nothing was delivered."""
    detail = f"  {error}\n" if error else ""
    return (
        "[red]Error:[/] Tabs were not delivered.\n"
        f"{detail}"
        "  On Linux install xclip or xsel (pyperclip needs one of them), then retry."
    )
