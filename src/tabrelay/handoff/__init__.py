"""Delivery of export envelopes to the receiving application."""

from tabrelay.handoff.dispatcher import Channel, HandoffDispatcher, HandoffResult
from tabrelay.handoff.invoke import InvokeOutcome, invoke_uri
from tabrelay.handoff.links import add_link, clipboard_import_link, import_link

__all__ = [
    "Channel",
    "HandoffDispatcher",
    "HandoffResult",
    "InvokeOutcome",
    "add_link",
    "clipboard_import_link",
    "import_link",
    "invoke_uri",
]
