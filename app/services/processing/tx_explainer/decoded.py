"""Explain transactions decoded from raw wire-format hex.

The decoder service returns the transaction object shape used by the Stacks
JavaScript SDK (``anchorMode``, ``payload.payloadType``,
``auth.spendingCondition``...). Its fields are mapped onto the Stacks API
shape and then explained by the same code path as fetched transactions.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .aliases import (
    DECODED_AMOUNT_PATHS,
    DECODED_ANCHOR_MODE_PATHS,
    DECODED_CONTRACT_ADDRESS_PATHS,
    DECODED_CONTRACT_NAME_PATHS,
    DECODED_FEE_PATHS,
    DECODED_FUNCTION_ARGS_PATHS,
    DECODED_FUNCTION_NAME_PATHS,
    DECODED_MEMO_PATHS,
    DECODED_NONCE_PATHS,
    DECODED_PAYLOAD_TYPE_PATHS,
    DECODED_RECIPIENT_PATHS,
    DECODED_SENDER_PATHS,
    DECODED_TX_ID_PATHS,
    is_scalar,
    resolve_first,
)
from .explainer import (
    CONTRACT_CALL_TYPES,
    CONTRACT_DEPLOY_TYPES,
    UNKNOWN_TX_TYPE,
    VALUE_TRANSFER_TYPES,
    explain_transaction,
)
from .models import ExplainedTransaction
from .units import as_text, to_decimal_string, to_json_safe

# Wire-format payload type ids
PAYLOAD_TYPES = {
    "0": "token_transfer",
    "1": "smart_contract",
    "2": "contract_call",
    "3": "poison_microblock",
    "4": "coinbase",
    "5": "coinbase_to_alt_recipient",
    "6": "versioned_smart_contract",
    "7": "tenure_change",
    "8": "nakamoto_coinbase",
}

ANCHOR_MODES = {
    "1": "on_chain_only",
    "2": "off_chain_only",
    "3": "any",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name.strip()).replace("-", "_").lower()


def _enum_name(value: Any, names: Dict[str, str]) -> Optional[str]:
    """Map a numeric enum id (int or digit string) or enum label to a snake_case name."""
    if value is None:
        return None
    key = to_decimal_string(value)
    if key is not None:
        return names.get(key, key)
    if isinstance(value, str):
        return _to_snake(value)
    return None


def resolve_payload_type(decoded: Any) -> str:
    value = resolve_first(decoded, DECODED_PAYLOAD_TYPE_PATHS, accept=is_scalar)
    return _enum_name(value, PAYLOAD_TYPES) or UNKNOWN_TX_TYPE


def resolve_anchor_mode(decoded: Any) -> Optional[str]:
    value = resolve_first(decoded, DECODED_ANCHOR_MODE_PATHS, accept=is_scalar)
    return _enum_name(value, ANCHOR_MODES)


def decoded_to_api_shape(decoded: Any) -> Dict[str, Any]:
    """Rebuild a Stacks-API-shaped dict from a decoded transaction object."""
    if not isinstance(decoded, Mapping):
        decoded = {}

    tx_type = resolve_payload_type(decoded)
    sender = as_text(resolve_first(decoded, DECODED_SENDER_PATHS, accept=is_scalar))

    tx: Dict[str, Any] = {
        "tx_type": tx_type,
        "tx_id": as_text(resolve_first(decoded, DECODED_TX_ID_PATHS, accept=is_scalar)),
        "sender_address": sender,
        "fee_rate": to_decimal_string(
            resolve_first(decoded, DECODED_FEE_PATHS, accept=is_scalar)
        ),
        "nonce": to_decimal_string(
            resolve_first(decoded, DECODED_NONCE_PATHS, accept=is_scalar)
        ),
    }

    contract_name = as_text(
        resolve_first(decoded, DECODED_CONTRACT_NAME_PATHS, accept=is_scalar)
    )

    if tx_type in VALUE_TRANSFER_TYPES:
        tx["token_transfer"] = {
            "recipient_address": as_text(
                resolve_first(decoded, DECODED_RECIPIENT_PATHS, accept=is_scalar)
            ),
            "amount": to_decimal_string(
                resolve_first(decoded, DECODED_AMOUNT_PATHS, accept=is_scalar)
            ),
            "memo": as_text(
                resolve_first(decoded, DECODED_MEMO_PATHS, accept=is_scalar)
            ),
        }
    elif tx_type in CONTRACT_CALL_TYPES:
        raw_args = resolve_first(decoded, DECODED_FUNCTION_ARGS_PATHS)
        tx["contract_call"] = {
            "contract_address": as_text(
                resolve_first(
                    decoded, DECODED_CONTRACT_ADDRESS_PATHS, accept=is_scalar
                )
            ),
            "contract_name": contract_name,
            "function_name": as_text(
                resolve_first(decoded, DECODED_FUNCTION_NAME_PATHS, accept=is_scalar)
            ),
            "function_args": to_json_safe(raw_args) if raw_args else [],
        }
    elif tx_type in CONTRACT_DEPLOY_TYPES and contract_name:
        contract_id = f"{sender}.{contract_name}" if sender else contract_name
        tx["smart_contract"] = {"contract_id": contract_id}

    return tx


def explain_decoded_transaction(decoded: Any) -> ExplainedTransaction:
    """Explain a transaction object produced by the raw transaction decoder.

    Decoded transactions carry no status, block or events; those fields stay
    empty. The anchor mode is reported in addition to the usual fields.
    """
    explained = explain_transaction(decoded_to_api_shape(decoded), events=[])
    return explained.model_copy(update={"anchor_mode": resolve_anchor_mode(decoded)})
