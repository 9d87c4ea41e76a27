import re
from typing import Any, Callable, List, Optional, Tuple

from app.config import config
from app.lib.logger import configure_logger
from app.services.core.exceptions import (
    InvalidAddressError,
    InvalidNetworkError,
    InvalidTransactionIdError,
    TransactionNotFoundError,
    UpstreamError,
)
from app.services.integrations.decoder import TransactionDecoder
from app.services.integrations.hiro import (
    HiroApi,
    HiroApiError,
    HiroApiNotFoundError,
    Network,
)
from app.services.processing.tx_explainer import (
    ExplainedTransaction,
    WalletStory,
    explain_decoded_transaction,
    explain_transaction,
)
from app.services.processing.wallet_story import build_wallet_story

logger = configure_logger(__name__)

AUTO_NETWORK = "auto"
MAX_WALLET_STORY_LIMIT = 50
# The events endpoint caps a page at this size
MAX_EVENTS_PAGE = 50

_TXID_RE = re.compile(r"^[0-9a-f]{64}$")
# c32 alphabet: digits and upper case letters without I, L, O and U
_ADDRESS_RE = re.compile(
    r"^S[MNPT][0-9A-HJKMNP-TV-Z]{28,40}(\.[a-zA-Z][a-zA-Z0-9_-]{0,127})?$"
)
_TESTNET_VERSIONS = ("ST", "SN")

ClientFactory = Callable[[Network], HiroApi]


def normalize_txid(txid: Any) -> str:
    """Strip an optional 0x prefix and lowercase; require 64 hex characters."""
    if not isinstance(txid, str):
        raise InvalidTransactionIdError()
    value = txid.strip().lower()
    if value.startswith("0x"):
        value = value[2:]
    if not _TXID_RE.match(value):
        raise InvalidTransactionIdError(length=len(value))
    return value


def resolve_networks(network: Optional[str]) -> List[Network]:
    """Networks to search, in order. ``auto`` tries mainnet first."""
    choice = (network or config.explain.default_network).strip().lower()
    if choice == AUTO_NETWORK:
        return [Network.MAINNET, Network.TESTNET]
    try:
        return [Network(choice)]
    except ValueError:
        raise InvalidNetworkError(network) from None


def network_for_address(address: str) -> Network:
    return Network.TESTNET if address.startswith(_TESTNET_VERSIONS) else Network.MAINNET


class ExplainService:
    """Fetch transactions from the Hiro API and explain them."""

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        decoder: Optional[TransactionDecoder] = None,
    ):
        """Initialize the service.

        Args:
            client_factory: Builds a HiroApi for a network; defaults to HiroApi
            decoder: Raw transaction decoder; defaults to the configured one
        """
        self._client_factory = client_factory or HiroApi
        self._decoder = decoder or TransactionDecoder()

    async def _chain_tip_height(self, client: HiroApi) -> Optional[int]:
        if not config.explain.include_confirmations:
            return None
        try:
            return await client.get_chain_tip_height()
        except HiroApiError as e:
            # Confirmations are optional; the explanation goes out without them
            logger.warning(
                "Could not fetch chain tip",
                extra={"network": client.network.value, "error": str(e)},
            )
            return None

    async def _events(self, client: HiroApi, tx: dict) -> Optional[list]:
        """Inline events, refetched when the transaction response truncated them."""
        inline = tx.get("events")
        inline = inline if isinstance(inline, list) else []
        event_count = tx.get("event_count")
        if not isinstance(event_count, int) or event_count <= len(inline):
            return None
        try:
            return await client.get_transaction_events(
                tx["tx_id"], limit=min(event_count, MAX_EVENTS_PAGE)
            )
        except (HiroApiError, KeyError) as e:
            logger.warning(
                "Could not fetch transaction events, using inline events",
                extra={"error": str(e)},
            )
            return None

    async def explain_txid(
        self, txid: str, network: Optional[str] = None
    ) -> Tuple[Network, str, ExplainedTransaction]:
        """Look up a transaction by id and explain it.

        Args:
            txid: Transaction id, with or without 0x, any case
            network: ``auto``, ``mainnet`` or ``testnet``; defaults to config

        Returns:
            Tuple of the network it was found on, the normalized txid and the
            explanation

        Raises:
            InvalidTransactionIdError: When the txid is not 64 hex characters
            InvalidNetworkError: When the network is not recognised
            TransactionNotFoundError: When no searched network has the txid
            UpstreamError: When the API failed and nothing was found
        """
        tx_id = normalize_txid(txid)
        networks = resolve_networks(network)
        upstream_error: Optional[HiroApiError] = None

        for candidate in networks:
            async with self._client_factory(candidate) as client:
                try:
                    tx = await client.get_transaction(tx_id)
                except HiroApiNotFoundError:
                    logger.info(
                        "Transaction not found on network",
                        extra={"txid": tx_id, "network": candidate.value},
                    )
                    continue
                except HiroApiError as e:
                    logger.error(
                        "Transaction lookup failed",
                        extra={
                            "txid": tx_id,
                            "network": candidate.value,
                            "error": str(e),
                        },
                    )
                    upstream_error = e
                    continue

                events = await self._events(client, tx)
                chain_tip = await self._chain_tip_height(client)

            explanation = explain_transaction(
                tx, events=events, chain_tip_height=chain_tip
            )
            logger.info(
                "Transaction explained",
                extra={
                    "txid": tx_id,
                    "network": candidate.value,
                    "tx_type": explanation.tx_type,
                },
            )
            return candidate, tx_id, explanation

        if upstream_error is not None:
            raise UpstreamError(
                upstream_status=upstream_error.status_code
            ) from upstream_error
        raise TransactionNotFoundError(
            txid=tx_id, networks=[candidate.value for candidate in networks]
        )

    async def explain_raw(self, raw_tx: str) -> ExplainedTransaction:
        """Decode a serialized transaction and explain it."""
        decoded = await self._decoder.decode(raw_tx)
        explanation = explain_decoded_transaction(decoded)
        logger.info(
            "Raw transaction explained", extra={"tx_type": explanation.tx_type}
        )
        return explanation

    async def wallet_story(
        self,
        address: str,
        network: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Tuple[Network, WalletStory]:
        """Build a story of an address's most recent transactions.

        With ``auto`` (or no) network, the address version prefix decides:
        ``ST``/``SN`` addresses are testnet, everything else mainnet.
        """
        address = (address or "").strip()
        if not _ADDRESS_RE.match(address):
            raise InvalidAddressError(address=address)

        if network is None or network.strip().lower() == AUTO_NETWORK:
            target = network_for_address(address)
        else:
            target = resolve_networks(network)[0]

        size = limit if limit is not None else config.explain.wallet_story_limit
        size = max(1, min(size, MAX_WALLET_STORY_LIMIT))

        async with self._client_factory(target) as client:
            try:
                page = await client.get_address_transactions(address, limit=size)
                transactions = page.results
            except HiroApiNotFoundError:
                transactions = []
            except HiroApiError as e:
                logger.error(
                    "Address transaction lookup failed",
                    extra={"address": address, "network": target.value, "error": str(e)},
                )
                raise UpstreamError(
                    network=target.value, upstream_status=e.status_code
                ) from e

        story = build_wallet_story(
            address, [explain_transaction(tx) for tx in transactions]
        )
        logger.info(
            "Wallet story built",
            extra={
                "address": address,
                "network": target.value,
                "transactions": len(transactions),
            },
        )
        return target, story
