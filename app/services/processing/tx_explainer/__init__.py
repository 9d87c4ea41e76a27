"""Transaction explanation layer.

Pure functions that normalize loosely-typed Stacks transaction payloads into
a fixed, JSON-safe shape with a plain-English summary.
"""

from .decoded import explain_decoded_transaction
from .events import normalize_event, normalize_events
from .explainer import build_summary, explain_transaction
from .models import (
    ExplainedTransaction,
    NormalizedEvent,
    WalletStory,
    WalletStorySection,
)
from .units import (
    format_stx,
    format_units,
    shorten_address,
    split_units,
    to_json_safe,
)

__all__ = [
    "ExplainedTransaction",
    "NormalizedEvent",
    "WalletStory",
    "WalletStorySection",
    "build_summary",
    "explain_decoded_transaction",
    "explain_transaction",
    "format_stx",
    "format_units",
    "normalize_event",
    "normalize_events",
    "shorten_address",
    "split_units",
    "to_json_safe",
]
