"""Hiro API integration module.

This module provides the async client used to look up transactions, their
events, address history and the current chain tip on mainnet and testnet.
"""

from .hiro_api import HiroApi, base_url_for
from .models import AddressTransactionsPage, ChainTip, HiroApiInfo
from .utils import (
    HiroApiError,
    HiroApiNotFoundError,
    HiroApiRateLimitError,
    HiroApiServerError,
    HiroApiTimeoutError,
    Network,
)

__all__ = [
    "HiroApi",
    "base_url_for",
    "AddressTransactionsPage",
    "ChainTip",
    "HiroApiInfo",
    "HiroApiError",
    "HiroApiNotFoundError",
    "HiroApiRateLimitError",
    "HiroApiServerError",
    "HiroApiTimeoutError",
    "Network",
]
