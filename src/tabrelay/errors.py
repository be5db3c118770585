"""Exception taxonomy for the capture-and-handoff pipeline.

Direct-handoff failures are recovered inside the dispatcher; everything else
propagates to the capture flow, which reports it and re-raises.
"""

from __future__ import annotations


class TabRelayError(Exception):
    """Base class for all tabrelay errors."""


class NoTargetError(TabRelayError):
    """No tab(s) available to capture."""


class NoCategoryError(TabRelayError):
    """No destination category selected (interactive flows only)."""


class StorageError(TabRelayError):
    """Category storage could not be read or written."""


class DirectHandoffError(TabRelayError):
    """Custom-scheme invocation failed or the payload exceeded the size ceiling."""


class ClipboardError(TabRelayError):
    """The clipboard write failed. Terminal for a capture."""


class EnvelopeError(TabRelayError, ValueError):
    """Malformed envelope or tab-list JSON."""
