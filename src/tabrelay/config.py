"""tabrelay configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (TABRELAY_SCHEME, TABRELAY_STRATEGY, TABRELAY_STORE)
  3. Per-project tabrelay.yaml  (current working directory)
  4. Global ~/.tabrelay/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".tabrelay"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "tabrelay.yaml"

STRATEGY_DIRECT = "direct"
STRATEGY_CLIPBOARD_FIRST = "clipboard-first"
STRATEGIES: frozenset[str] = frozenset([STRATEGY_DIRECT, STRATEGY_CLIPBOARD_FIRST])

# RFC 3986 scheme, lowercased
_SCHEME_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9+.\-]*$")

# Known top-level sections: unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["handoff", "store", "status"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class HandoffCfg:
    """Delivery to the receiving application (tabrelay.yaml: handoff:).

    Attributes:
        scheme: Custom URL scheme registered by the receiving app.
        app_name: Display name used in status messages.
        strategy: 'direct' (deep link first, clipboard fallback) or
            'clipboard-first' (clipboard always, then a clipboard-import signal).
        max_url_length: Bulk deep links longer than this go to the clipboard.
        invoke_timeout: Seconds to wait for the URI handler before assuming success.
        signal_delay: Seconds between the clipboard write and the
            clipboard-import signal (clipboard-first only).
    """

    scheme: str = "later"
    app_name: str = "Later"
    strategy: str = STRATEGY_DIRECT
    max_url_length: int = 2_000
    invoke_timeout: float = 1.0
    signal_delay: float = 0.3


@dataclass
class StoreCfg:
    """Local category storage (tabrelay.yaml: store:)."""

    path: str = str(_GLOBAL_CONFIG_DIR / "tabrelay.db")


@dataclass
class StatusCfg:
    """Status feedback (tabrelay.yaml: status:)."""

    clear_after: float = 3.0


@dataclass
class TabRelayConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    handoff: HandoffCfg = field(default_factory=HandoffCfg)
    store: StoreCfg = field(default_factory=StoreCfg)
    status: StatusCfg = field(default_factory=StatusCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: TabRelayConfig) -> None:
    h = cfg.handoff
    if h.strategy not in STRATEGIES:
        raise ConfigError(
            f"handoff.strategy must be one of {sorted(STRATEGIES)}, got '{h.strategy}'."
        )
    if not _SCHEME_RE.match(h.scheme):
        raise ConfigError(
            f"handoff.scheme is not a valid URL scheme: '{h.scheme}'\n"
            "  Example:  handoff.scheme: later"
        )
    for name in ("max_url_length", "invoke_timeout"):
        if getattr(h, name) <= 0:
            raise ConfigError(f"handoff.{name} must be > 0.")
    if h.signal_delay < 0:
        raise ConfigError("handoff.signal_delay must be >= 0.")
    if cfg.status.clear_after <= 0:
        raise ConfigError("status.clear_after must be > 0.")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> TabRelayConfig:
    """Build a *TabRelayConfig* from a merged raw YAML dict."""
    cfg = TabRelayConfig()

    try:
        if "handoff" in data:
            h = data["handoff"] or {}
            cfg.handoff = HandoffCfg(
                scheme=str(h.get("scheme", cfg.handoff.scheme)).lower(),
                app_name=str(h.get("app_name", cfg.handoff.app_name)),
                strategy=str(h.get("strategy", cfg.handoff.strategy)),
                max_url_length=int(h.get("max_url_length", cfg.handoff.max_url_length)),
                invoke_timeout=float(h.get("invoke_timeout", cfg.handoff.invoke_timeout)),
                signal_delay=float(h.get("signal_delay", cfg.handoff.signal_delay)),
            )

        if "store" in data:
            s = data["store"] or {}
            cfg.store = StoreCfg(path=str(s.get("path", cfg.store.path)))

        if "status" in data:
            st = data["status"] or {}
            cfg.status = StatusCfg(
                clear_after=float(st.get("clear_after", cfg.status.clear_after)),
            )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: TabRelayConfig) -> TabRelayConfig:
    """Apply TABRELAY_* environment variable overrides (layer 2)."""
    if scheme := os.environ.get("TABRELAY_SCHEME"):
        cfg.handoff.scheme = scheme.lower()
    if strategy := os.environ.get("TABRELAY_STRATEGY"):
        cfg.handoff.strategy = strategy
    if store := os.environ.get("TABRELAY_STORE"):
        cfg.store.path = store
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> TabRelayConfig:
    """Load and return a merged *TabRelayConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *tabrelay.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged and validated *TabRelayConfig*.

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.tabrelay/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Args:
        global_config_path: Override path (for testing).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# tabrelay global configuration.\n"
            "\n"
            "handoff:\n"
            "  scheme: later\n"
            "  app_name: Later\n"
            "  strategy: direct   # or clipboard-first\n"
            "  max_url_length: 2000\n"
            "  invoke_timeout: 1.0\n"
            "\n"
            "status:\n"
            "  clear_after: 3.0\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
