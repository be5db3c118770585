"""Capture flow: trigger → category → records → envelope → handoff → status.

Two triggers per tab scope:
  - shortcut (no category given): the first stored category is the target,
    bootstrapping ``Bookmarks`` when none exists
  - interactive (category given by id or name): must resolve, otherwise
    NoCategoryError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tabrelay.bridge.base import HostBridge
from tabrelay.categories import CategoryStore, resolve_category
from tabrelay.envelope import build_envelope
from tabrelay.errors import NoCategoryError, NoTargetError, TabRelayError
from tabrelay.handoff.dispatcher import HandoffDispatcher, HandoffResult
from tabrelay.models import Category, Clock, ExportEnvelope, TabScope, utc_now
from tabrelay.snapshot import build_records
from tabrelay.status import StatusKind, StatusReporter

logger = logging.getLogger(__name__)

_NO_TARGET_MESSAGES = {
    TabScope.ACTIVE: "No active tab found",
    TabScope.WINDOW: "No tabs found",
}


@dataclass
class CaptureResult:
    envelope: ExportEnvelope
    category: Category
    handoff: HandoffResult | None = None  # None for dry runs


async def build_capture(
    bridge: HostBridge,
    scope: TabScope,
    category_ref: str | None = None,
    *,
    clock: Clock = utc_now,
) -> CaptureResult:
    """Resolve the category, snapshot the tabs and assemble the envelope.

    Raises:
        NoCategoryError: *category_ref* is blank or matches no category.
        NoTargetError: The tab query returned nothing.
    """
    store = CategoryStore(bridge, clock=clock)
    categories = await store.load_categories()

    if category_ref is None:
        category = categories[0]
    else:
        category = resolve_category(categories, category_ref)
        if category is None:
            raise NoCategoryError("Please select a category")

    tabs = await bridge.query_tabs(scope)
    if not tabs:
        raise NoTargetError(_NO_TARGET_MESSAGES[scope])

    records = build_records(tabs, category.id, clock=clock)
    envelope = build_envelope(records, categories, clock=clock)
    return CaptureResult(envelope=envelope, category=category)


async def capture(
    bridge: HostBridge,
    dispatcher: HandoffDispatcher,
    reporter: StatusReporter,
    scope: TabScope,
    category_ref: str | None = None,
    *,
    clock: Clock = utc_now,
) -> CaptureResult:
    """Run one capture to a terminal state and report it.

    Errors raised before dispatch are reported as error statuses and
    re-raised; a failed handoff is reported but returned, not raised.
    """
    try:
        result = await build_capture(bridge, scope, category_ref, clock=clock)
    except TabRelayError as exc:
        reporter.report(str(exc), StatusKind.ERROR)
        raise

    logger.debug(
        "Dispatching %d record(s) to category %r", len(result.envelope.urls), result.category.name
    )
    result.handoff = await dispatcher.dispatch(result.envelope, result.category.name)
    reporter.report(result.handoff.message, result.handoff.kind)
    return result


async def save_current_tab(
    bridge: HostBridge,
    dispatcher: HandoffDispatcher,
    reporter: StatusReporter,
    category_ref: str | None = None,
) -> CaptureResult:
    return await capture(bridge, dispatcher, reporter, TabScope.ACTIVE, category_ref)


async def save_all_tabs(
    bridge: HostBridge,
    dispatcher: HandoffDispatcher,
    reporter: StatusReporter,
    category_ref: str | None = None,
) -> CaptureResult:
    return await capture(bridge, dispatcher, reporter, TabScope.WINDOW, category_ref)
