"""Normalize transaction events from any of the known upstream shapes."""

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from .aliases import (
    EVENT_AMOUNT_PATHS,
    EVENT_ASSET_PATHS,
    EVENT_RECIPIENT_PATHS,
    EVENT_SENDER_PATHS,
    EVENT_TYPE_PATHS,
    is_scalar,
    resolve_first,
)
from .models import NormalizedEvent
from .units import as_text, format_units, shorten_address, to_decimal_string

DEFAULT_EVENT_TYPE = "event"
STX_ASSET = "STX"


def _is_amount(value: Any) -> bool:
    # Print events carry arbitrary `value` payloads; only integers are amounts
    return is_scalar(value) and to_decimal_string(value) is not None


def _is_stx_event(event_type: str) -> bool:
    # stx_asset, stx_transfer_event, STXTransferEvent, stx_lock ...
    return event_type.lower().startswith("stx")


def normalize_event(event: Any) -> NormalizedEvent:
    """Resolve one event into the fixed NormalizedEvent shape.

    Never raises: a non-mapping event becomes a bare ``event`` entry.
    """
    if not isinstance(event, Mapping):
        return NormalizedEvent(type=DEFAULT_EVENT_TYPE)

    event_type = as_text(resolve_first(event, EVENT_TYPE_PATHS, accept=is_scalar))
    event_type = event_type or DEFAULT_EVENT_TYPE

    amount = to_decimal_string(
        resolve_first(event, EVENT_AMOUNT_PATHS, accept=_is_amount)
    )
    sender = as_text(resolve_first(event, EVENT_SENDER_PATHS, accept=is_scalar))
    recipient = as_text(
        resolve_first(event, EVENT_RECIPIENT_PATHS, accept=is_scalar)
    )
    asset = as_text(resolve_first(event, EVENT_ASSET_PATHS, accept=is_scalar))
    if asset is None and _is_stx_event(event_type):
        asset = STX_ASSET

    return NormalizedEvent(
        type=event_type,
        asset=asset,
        amount=amount,
        amount_stx=format_units(amount) if asset == STX_ASSET else None,
        sender=sender,
        recipient=recipient,
        sender_short=shorten_address(sender),
        recipient_short=shorten_address(recipient),
    )


def normalize_events(events: Optional[Iterable[Any]]) -> List[NormalizedEvent]:
    """Normalize every event, one output entry per input entry."""
    if events is None or isinstance(events, (str, bytes, Mapping)):
        return []
    return [normalize_event(event) for event in events]
