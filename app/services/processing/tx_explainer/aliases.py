"""Ordered alias rules for reading loosely-typed transaction payloads.

The Hiro API, chainhook payloads and decoded raw transactions all describe the
same logical values under different keys. Every logical field is resolved from
an ordered tuple of key paths; the first path holding a present value wins.
Changing which upstream shape takes priority means reordering a tuple here.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Tuple

Path = Tuple[str, ...]
Predicate = Callable[[Any], bool]


def resolve_path(data: Any, path: Path) -> Any:
    """Walk `path` through nested mappings (or attributes), returning None on any miss."""
    current = data
    for key in path:
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        else:
            current = getattr(current, key, None)
    return current


def is_present(value: Any) -> bool:
    """None and blank strings count as absent."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def resolve_first(
    data: Any,
    paths: Iterable[Path],
    accept: Optional[Predicate] = None,
) -> Any:
    """Return the value at the first path that holds a present (and accepted) value."""
    for path in paths:
        value = resolve_path(data, path)
        if not is_present(value):
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


# -- Transaction fields --------------------------------------------------------

TX_TYPE_PATHS: Tuple[Path, ...] = (("tx_type",), ("type",))
TX_ID_PATHS: Tuple[Path, ...] = (("tx_id",), ("txid",))
SENDER_PATHS: Tuple[Path, ...] = (("sender_address",), ("sender",))
STATUS_PATHS: Tuple[Path, ...] = (("tx_status",), ("status",))
NONCE_PATHS: Tuple[Path, ...] = (("nonce",),)
BLOCK_HEIGHT_PATHS: Tuple[Path, ...] = (("block_height",),)

RECIPIENT_PATHS: Tuple[Path, ...] = (
    ("token_transfer", "recipient_address"),
    ("contract_call", "contract_id"),
    ("smart_contract", "contract_id"),
)

FEE_PATHS: Tuple[Path, ...] = (("fee_rate",), ("fee",))

# Only consulted for value-transfer transactions
AMOUNT_PATHS: Tuple[Path, ...] = (("token_transfer", "amount"),)
MEMO_PATHS: Tuple[Path, ...] = (("token_transfer", "memo"),)

CONTRACT_ID_PATHS: Tuple[Path, ...] = (
    ("contract_call", "contract_id"),
    ("smart_contract", "contract_id"),
)
CONTRACT_ADDRESS_PATHS: Tuple[Path, ...] = (("contract_call", "contract_address"),)
CONTRACT_NAME_PATHS: Tuple[Path, ...] = (("contract_call", "contract_name"),)
FUNCTION_NAME_PATHS: Tuple[Path, ...] = (("contract_call", "function_name"),)
FUNCTION_ARGS_PATHS: Tuple[Path, ...] = (("contract_call", "function_args"),)

BLOCK_TIME_PATHS: Tuple[Path, ...] = (
    ("block_time_iso",),
    ("burn_block_time_iso",),
    ("block_time",),
    ("burn_block_time",),
    ("receipt_time_iso",),
    ("receipt_time",),
)

TX_RESULT_PATHS: Tuple[Path, ...] = (("tx_result", "repr"), ("result",))

# -- Event fields --------------------------------------------------------------

_NESTED_EVENT_OBJECTS = (
    "stx_transfer_event",
    "ft_transfer_event",
    "nft_transfer_event",
    "stx_mint_event",
    "ft_mint_event",
    "nft_mint_event",
    "stx_burn_event",
    "ft_burn_event",
    "nft_burn_event",
    "stx_lock_event",
)

EVENT_TYPE_PATHS: Tuple[Path, ...] = (("event_type",), ("type",), ("name",))

EVENT_AMOUNT_PATHS: Tuple[Path, ...] = (
    ("amount",),
    ("value",),
    ("asset", "amount"),
    ("asset", "value"),
    ("data", "amount"),
) + tuple((name, "amount") for name in _NESTED_EVENT_OBJECTS) + (
    ("stx_lock_event", "locked_amount"),
)

EVENT_SENDER_PATHS: Tuple[Path, ...] = (
    ("sender",),
    ("from",),
    ("asset", "sender"),
    ("data", "sender"),
) + tuple((name, "sender") for name in _NESTED_EVENT_OBJECTS) + (
    ("stx_lock_event", "locked_address"),
)

EVENT_RECIPIENT_PATHS: Tuple[Path, ...] = (
    ("recipient",),
    ("to",),
    ("asset", "recipient"),
    ("data", "recipient"),
) + tuple((name, "recipient") for name in _NESTED_EVENT_OBJECTS)

EVENT_ASSET_PATHS: Tuple[Path, ...] = (
    ("asset_identifier",),
    ("asset_id",),
    ("asset", "asset_id"),
    ("asset", "asset_identifier"),
    ("data", "asset_identifier"),
) + tuple((name, "asset_identifier") for name in _NESTED_EVENT_OBJECTS)

# -- Decoded raw transaction fields -------------------------------------------

DECODED_TX_ID_PATHS: Tuple[Path, ...] = (("txid",), ("tx_id",), ("txId",))
DECODED_SENDER_PATHS: Tuple[Path, ...] = (
    ("sender_address",),
    ("senderAddress",),
    ("sender",),
)
DECODED_ANCHOR_MODE_PATHS: Tuple[Path, ...] = (("anchorMode",), ("anchor_mode",))
DECODED_PAYLOAD_TYPE_PATHS: Tuple[Path, ...] = (
    ("payload", "payloadType"),
    ("payload", "type"),
    ("payload", "payload_type"),
)
DECODED_FEE_PATHS: Tuple[Path, ...] = (
    ("auth", "spendingCondition", "fee"),
    ("auth", "spending_condition", "fee"),
    ("fee",),
)
DECODED_NONCE_PATHS: Tuple[Path, ...] = (
    ("auth", "spendingCondition", "nonce"),
    ("auth", "spending_condition", "nonce"),
    ("nonce",),
)
DECODED_RECIPIENT_PATHS: Tuple[Path, ...] = (
    ("payload", "recipient", "value"),
    ("payload", "recipient", "address"),
    ("payload", "recipient"),
)
DECODED_AMOUNT_PATHS: Tuple[Path, ...] = (("payload", "amount"),)
DECODED_MEMO_PATHS: Tuple[Path, ...] = (
    ("payload", "memo", "content"),
    ("payload", "memo"),
)
DECODED_CONTRACT_ADDRESS_PATHS: Tuple[Path, ...] = (
    ("payload", "contractAddress", "value"),
    ("payload", "contractAddress"),
    ("payload", "contract_address"),
)
DECODED_CONTRACT_NAME_PATHS: Tuple[Path, ...] = (
    ("payload", "contractName", "content"),
    ("payload", "contractName"),
    ("payload", "contract_name"),
)
DECODED_FUNCTION_NAME_PATHS: Tuple[Path, ...] = (
    ("payload", "functionName", "content"),
    ("payload", "functionName"),
    ("payload", "function_name"),
)
DECODED_FUNCTION_ARGS_PATHS: Tuple[Path, ...] = (
    ("payload", "functionArgs"),
    ("payload", "function_args"),
)
