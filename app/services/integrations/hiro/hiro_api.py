"""Hiro API client for the transaction queries the explainer needs."""

from typing import Any, Dict, List, Optional

import httpx

from app.config import config
from app.lib.logger import configure_logger

from .base import BaseHiroApi
from .models import AddressTransactionsPage, HiroApiInfo
from .utils import HiroApiError, Network

logger = configure_logger(__name__)


def base_url_for(network: Network) -> str:
    """Configured Hiro API base URL for a network."""
    if Network(network) is Network.TESTNET:
        return config.hiro.testnet_url
    return config.hiro.mainnet_url


class HiroApi(BaseHiroApi):
    """Client for interacting with the Hiro API.

    One instance talks to one network. Use it as an async context manager so
    the underlying httpx client is closed after the request.
    """

    # API endpoint categories
    ENDPOINTS = {
        "status": "/extended",
        "transactions": "/extended/v1/tx",
        "addresses": "/extended/v1/address",
    }

    def __init__(
        self,
        network: Network = Network.MAINNET,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any,
    ):
        """Initialize the Hiro API client.

        Args:
            network: Network whose configured base URL is used
            base_url: Explicit base URL overriding the configured one
            transport: Optional httpx transport, mainly for tests
        """
        self.network = Network(network)
        super().__init__(
            base_url or base_url_for(self.network), transport=transport, **kwargs
        )

    @staticmethod
    def _prefixed(tx_id: str) -> str:
        return tx_id if tx_id.startswith("0x") else f"0x{tx_id}"

    async def get_transaction(self, tx_id: str) -> Dict[str, Any]:
        """Get a transaction by id.

        Args:
            tx_id: 64 hex character transaction id, with or without 0x

        Returns:
            The transaction JSON, events included inline

        Raises:
            HiroApiNotFoundError: When the network has no such transaction
        """
        logger.debug(
            "Retrieving transaction",
            extra={"txid": tx_id, "network": self.network.value},
        )
        data = await self._amake_request(
            "GET", f"{self.ENDPOINTS['transactions']}/{self._prefixed(tx_id)}"
        )
        if not isinstance(data, dict):
            raise HiroApiError("Unexpected transaction response shape")
        return data

    async def get_transaction_events(
        self, tx_id: str, limit: int = 50, offset: int = 0
    ) -> List[Dict[str, Any]]:
        """Get the events emitted by a transaction."""
        logger.debug(
            "Retrieving transaction events",
            extra={"txid": tx_id, "limit": limit, "offset": offset},
        )
        data = await self._amake_request(
            "GET",
            f"{self.ENDPOINTS['transactions']}/events",
            params={"tx_id": self._prefixed(tx_id), "limit": limit, "offset": offset},
        )
        events = data.get("events") if isinstance(data, dict) else None
        return events if isinstance(events, list) else []

    async def get_address_transactions(
        self, address: str, limit: int = 20, offset: int = 0
    ) -> AddressTransactionsPage:
        """Get the most recent transactions sent or received by an address.

        Args:
            address: Stacks principal (standard or contract)
            limit: Maximum number of transactions to return
            offset: Pagination offset

        Returns:
            AddressTransactionsPage: One page of results, newest first
        """
        logger.debug(
            "Retrieving address transactions",
            extra={"address": address, "limit": limit, "offset": offset},
        )
        data = await self._amake_request(
            "GET",
            f"{self.ENDPOINTS['addresses']}/{address}/transactions",
            params={"limit": limit, "offset": offset},
        )
        if not isinstance(data, dict):
            raise HiroApiError("Unexpected address transactions response shape")
        return AddressTransactionsPage.from_dict(data)

    async def get_info(self) -> HiroApiInfo:
        """Get Hiro API server information and chain tip."""
        logger.debug("Retrieving Hiro API server info")
        data = await self._amake_request("GET", self.ENDPOINTS["status"])
        if not isinstance(data, dict):
            raise HiroApiError("Unexpected status response shape")
        return HiroApiInfo.from_dict(data)

    async def get_chain_tip_height(self) -> Optional[int]:
        """Current chain tip block height, or None when the API omits it."""
        info = await self.get_info()
        return info.chain_tip.block_height if info.chain_tip else None
