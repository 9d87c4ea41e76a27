"""Client for the external raw transaction decoder service.

The service accepts a serialized Stacks transaction as hex and answers with
the decoded transaction object::

    POST {"rawTx": "0x80800000..."}
    -> {"success": true, "data": {"decoded": {...}}}
"""

import re
from typing import Any, Dict, Optional

import httpx

from app.config import config
from app.lib.logger import configure_logger
from app.services.core.exceptions import (
    DecoderError,
    DecoderUnavailableError,
    InvalidRawTransactionError,
)

logger = configure_logger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def normalize_raw_hex(raw_hex: Any) -> str:
    """Validate raw transaction hex and return it with a 0x prefix.

    Raises:
        InvalidRawTransactionError: When the input is empty, odd-length or
            contains non-hex characters
    """
    if not isinstance(raw_hex, str):
        raise InvalidRawTransactionError("Raw transaction must be a hex string")
    value = raw_hex.strip()
    if value[:2].lower() == "0x":
        value = value[2:]
    if not value:
        raise InvalidRawTransactionError("Raw transaction is empty")
    if not _HEX_RE.match(value):
        raise InvalidRawTransactionError("Raw transaction contains non-hex characters")
    if len(value) % 2:
        raise InvalidRawTransactionError(
            "Raw transaction hex has an odd length", length=len(value)
        )
    return "0x" + value.lower()


def stringify_integers(value: Any) -> Any:
    """Recursively convert integers to decimal strings.

    Decoded amounts and fees can exceed the 53-bit range that JSON clients
    handle exactly, so every integer leaves the decoder as a string.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        return {key: stringify_integers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_integers(item) for item in value]
    return value


class TransactionDecoder:
    """Decode serialized Stacks transactions through the decoder service."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url if api_url is not None else config.decoder.api_url
        self.timeout = timeout if timeout is not None else config.decoder.timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)

    async def decode(self, raw_hex: str) -> Dict[str, Any]:
        """Decode a raw transaction.

        Args:
            raw_hex: Serialized transaction hex, with or without 0x

        Returns:
            Dict[str, Any]: The decoded transaction with integers as strings

        Raises:
            InvalidRawTransactionError: When the hex is malformed
            DecoderUnavailableError: When no decoder URL is configured
            DecoderError: When the service fails or rejects the transaction
        """
        tx_hex = normalize_raw_hex(raw_hex)

        if not self.enabled:
            logger.warning("Raw transaction decoding requested but not configured")
            raise DecoderUnavailableError()

        logger.debug(
            "Decoding raw transaction",
            extra={"bytes": (len(tx_hex) - 2) // 2},
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.api_url,
                    json={"rawTx": tx_hex},
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP error decoding raw transaction",
                extra={"response": {"status_code": e.response.status_code}},
            )
            raise DecoderError(
                "Decoder service returned an error",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning("Request error decoding raw transaction", extra={"error": str(e)})
            raise DecoderError("Decoder service is unreachable") from e
        except ValueError as e:
            raise DecoderError("Decoder service returned invalid JSON") from e

        if not isinstance(result, dict):
            result = {}
        data = result.get("data")
        decoded = data.get("decoded") if isinstance(data, dict) else None
        if not result.get("success") or not isinstance(decoded, dict):
            error = result.get("error")
            logger.warning(
                "Decoder service returned unsuccessful result",
                extra={"error": error},
            )
            raise DecoderError(
                str(error) if error else "Decoder could not decode the transaction"
            )

        logger.debug("Successfully decoded raw transaction")
        return stringify_integers(decoded)
