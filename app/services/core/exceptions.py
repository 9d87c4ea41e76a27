"""Exceptions raised while explaining transactions.

Each error carries the pipeline step it failed in and the HTTP status the
API reports for it, so the routes can build the error envelope directly.
"""

from typing import Any, Dict, Optional


class ExplainerError(Exception):
    """Base exception for all explainer errors."""

    step: str = "explain"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class InvalidTransactionIdError(ExplainerError):
    """Raised when a txid is not 64 hex characters."""

    step = "validate"
    status_code = 400

    def __init__(self, message: str = "Invalid transaction ID", **kwargs: Any) -> None:
        super().__init__(message, kwargs or None)


class InvalidRawTransactionError(ExplainerError):
    """Raised when raw transaction input is not usable hex."""

    step = "validate"
    status_code = 400

    def __init__(
        self, message: str = "Invalid raw transaction hex", **kwargs: Any
    ) -> None:
        super().__init__(message, kwargs or None)


class InvalidAddressError(ExplainerError):
    """Raised when a wallet address is not a Stacks principal."""

    step = "validate"
    status_code = 400

    def __init__(self, message: str = "Invalid Stacks address", **kwargs: Any) -> None:
        super().__init__(message, kwargs or None)


class InvalidNetworkError(ExplainerError):
    """Raised for a network other than auto, mainnet or testnet."""

    step = "validate"
    status_code = 400

    def __init__(self, network: Any) -> None:
        super().__init__("Invalid network", {"network": network})


class TransactionNotFoundError(ExplainerError):
    """Raised when no searched network knows the transaction."""

    step = "fetch"
    status_code = 404

    def __init__(
        self,
        message: str = "Transaction not found",
        txid: Optional[str] = None,
        networks: Optional[list] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if txid is not None:
            details["txid"] = txid
        if networks:
            details["networks"] = networks
        super().__init__(message, details)
        self.txid = txid
        self.networks = networks or []


class UpstreamError(ExplainerError):
    """Raised when the Hiro API fails for reasons other than not-found."""

    step = "fetch"
    status_code = 502

    def __init__(
        self,
        message: str = "Upstream API request failed",
        network: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if network is not None:
            details["network"] = network
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(message, details)


class DecoderUnavailableError(ExplainerError):
    """Raised when raw decoding is requested but no decoder is configured."""

    step = "decode"
    status_code = 503

    def __init__(
        self, message: str = "Raw transaction decoding is not configured"
    ) -> None:
        super().__init__(message)


class DecoderError(ExplainerError):
    """Raised when the decoder service fails or rejects the transaction."""

    step = "decode"
    status_code = 502

    def __init__(
        self,
        message: str = "Failed to decode raw transaction",
        status_code: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.copy()
        if status_code is not None:
            details["decoder_status"] = status_code
        super().__init__(message, details)
