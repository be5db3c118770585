"""Host bridges: the capability set the capture pipeline runs against."""

from tabrelay.bridge.base import HostBridge
from tabrelay.bridge.desktop import DesktopBridge, load_tabs, opener_command

__all__ = [
    "DesktopBridge",
    "HostBridge",
    "load_tabs",
    "opener_command",
]
