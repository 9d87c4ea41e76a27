"""Turn a raw Stacks API transaction into an ExplainedTransaction.

`explain_transaction` is pure: no I/O, no module state, and it does not raise
for any mapping input. Missing fields are simply omitted from the output.
"""

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from .aliases import (
    AMOUNT_PATHS,
    BLOCK_HEIGHT_PATHS,
    BLOCK_TIME_PATHS,
    CONTRACT_ADDRESS_PATHS,
    CONTRACT_ID_PATHS,
    CONTRACT_NAME_PATHS,
    FEE_PATHS,
    FUNCTION_ARGS_PATHS,
    FUNCTION_NAME_PATHS,
    MEMO_PATHS,
    NONCE_PATHS,
    RECIPIENT_PATHS,
    SENDER_PATHS,
    STATUS_PATHS,
    TX_ID_PATHS,
    TX_RESULT_PATHS,
    TX_TYPE_PATHS,
    is_scalar,
    resolve_first,
)
from .events import normalize_events
from .models import ExplainedTransaction
from .units import (
    as_text,
    format_timestamp,
    format_units,
    shorten_address,
    shorten_contract_id,
    to_decimal_string,
    to_int,
    to_json_safe,
)

UNKNOWN_TX_TYPE = "unknown"

# Both names have been seen for plain STX transfers
VALUE_TRANSFER_TYPES = frozenset({"token_transfer", "stx_transfer"})
CONTRACT_CALL_TYPES = frozenset({"contract_call"})
CONTRACT_DEPLOY_TYPES = frozenset({"smart_contract", "versioned_smart_contract"})
COINBASE_TYPES = frozenset(
    {"coinbase", "coinbase_to_alt_recipient", "nakamoto_coinbase"}
)
KNOWN_TX_TYPES = (
    VALUE_TRANSFER_TYPES | CONTRACT_CALL_TYPES | CONTRACT_DEPLOY_TYPES | COINBASE_TYPES
)

FAILED_STATUS_PREFIXES = ("abort", "failed", "dropped")


def resolve_tx_type(tx: Any) -> str:
    tx_type = as_text(resolve_first(tx, TX_TYPE_PATHS, accept=is_scalar))
    return tx_type.strip() if tx_type else UNKNOWN_TX_TYPE


def resolve_contract_id(tx: Any) -> Optional[str]:
    contract_id = as_text(resolve_first(tx, CONTRACT_ID_PATHS, accept=is_scalar))
    if contract_id:
        return contract_id

    address = as_text(resolve_first(tx, CONTRACT_ADDRESS_PATHS, accept=is_scalar))
    name = as_text(resolve_first(tx, CONTRACT_NAME_PATHS, accept=is_scalar))
    if address and name:
        return f"{address}.{name}"
    return None


def describe_function_arg(arg: Any) -> str:
    """Render a function argument as ``name: repr`` when the API provides both."""
    if isinstance(arg, Mapping):
        text = as_text(resolve_first(arg, (("repr",), ("value",)), accept=is_scalar))
        if text is None:
            text = str(to_json_safe(arg))
        name = arg.get("name")
        return f"{name}: {text}" if isinstance(name, str) and name else text
    text = as_text(arg)
    return text if text is not None else str(to_json_safe(arg))


def _function_args(raw_args: Any) -> List[str]:
    if not isinstance(raw_args, (list, tuple)):
        return []
    return [describe_function_arg(arg) for arg in raw_args]


def is_failed_status(status: Optional[str]) -> bool:
    return bool(status) and status.lower().startswith(FAILED_STATUS_PREFIXES)


def compute_confirmations(
    block_height: Optional[int], chain_tip_height: Optional[int]
) -> Optional[int]:
    """Blocks on top of (and including) the transaction's block."""
    if block_height is None or chain_tip_height is None:
        return None
    if chain_tip_height < block_height:
        return None
    return chain_tip_height - block_height + 1


def _action_sentence(
    tx_type: str,
    sender: Optional[str],
    recipient: Optional[str],
    amount: Optional[str],
    contract_id: Optional[str],
    function_name: Optional[str],
    function_args: List[str],
) -> str:
    if tx_type not in KNOWN_TX_TYPES:
        who = shorten_address(sender) if sender else "An unknown sender"
        return f"{who} submitted a {tx_type} transaction."

    # Without a sender the type name carries the sentence
    who = shorten_address(sender) if sender else f"A {tx_type} transaction"

    if tx_type in VALUE_TRANSFER_TYPES:
        amount_stx = format_units(amount) if amount else None
        what = f"{amount_stx} STX" if amount_stx else "an unknown amount of STX"
        to = shorten_address(recipient) if recipient else "an unknown recipient"
        return f"{who} sent {what} to {to}."

    if tx_type in CONTRACT_CALL_TYPES:
        function = f'"{function_name}"' if function_name else "unknown function"
        contract = shorten_contract_id(contract_id) if contract_id else "unknown contract"
        sentence = f"{who} called {function} on {contract}"
        if function_args:
            sentence += f" with arguments: {', '.join(function_args)}"
        return sentence + "."

    if tx_type in CONTRACT_DEPLOY_TYPES:
        contract = shorten_contract_id(contract_id) if contract_id else "unknown contract"
        return f"{who} deployed the contract {contract}."

    return f"{who} claimed a coinbase block reward."


def _status_sentence(
    status: Optional[str],
    block_height: Optional[int],
    result: Optional[str],
) -> str:
    if not status:
        return ""
    if status.lower() == "pending":
        return f"Status: {status}. It has not been confirmed in a block yet."
    if is_failed_status(status):
        reason = f" with result {result}" if result else ""
        return f"Status: {status}. The transaction failed{reason}."
    if block_height is not None:
        return f"Status: {status}. Confirmed in block {block_height}."
    return f"Status: {status}."


def build_summary(
    tx_type: str,
    sender: Optional[str] = None,
    recipient: Optional[str] = None,
    amount: Optional[str] = None,
    contract_id: Optional[str] = None,
    function_name: Optional[str] = None,
    function_args: Optional[List[str]] = None,
    status: Optional[str] = None,
    block_height: Optional[int] = None,
    result: Optional[str] = None,
) -> str:
    """Fill the per-type template and append the status wording."""
    action = _action_sentence(
        tx_type,
        sender,
        recipient,
        amount,
        contract_id,
        function_name,
        function_args or [],
    )
    status_text = _status_sentence(status, block_height, result)
    return f"{action} {status_text}" if status_text else action


def explain_transaction(
    tx: Any,
    events: Optional[Iterable[Any]] = None,
    chain_tip_height: Optional[int] = None,
) -> ExplainedTransaction:
    """Explain a raw transaction from the Stacks API.

    Args:
        tx: Transaction payload, usually ``/extended/v1/tx/{txid}`` JSON
        events: Event list; defaults to ``tx["events"]`` when omitted
        chain_tip_height: Current chain tip, used for the confirmation count

    Returns:
        ExplainedTransaction: Summary and resolved fields
    """
    if not isinstance(tx, Mapping):
        tx = {}

    tx_type = resolve_tx_type(tx)
    is_transfer = tx_type in VALUE_TRANSFER_TYPES

    sender = as_text(resolve_first(tx, SENDER_PATHS, accept=is_scalar))
    contract_id = resolve_contract_id(tx)
    recipient = as_text(resolve_first(tx, RECIPIENT_PATHS, accept=is_scalar))
    recipient = recipient or contract_id

    amount = (
        to_decimal_string(resolve_first(tx, AMOUNT_PATHS, accept=is_scalar))
        if is_transfer
        else None
    )
    memo = (
        as_text(resolve_first(tx, MEMO_PATHS, accept=is_scalar))
        if is_transfer
        else None
    )
    fee = to_decimal_string(resolve_first(tx, FEE_PATHS, accept=is_scalar))

    function_name = as_text(
        resolve_first(tx, FUNCTION_NAME_PATHS, accept=is_scalar)
    )
    function_args = _function_args(resolve_first(tx, FUNCTION_ARGS_PATHS))

    status = as_text(resolve_first(tx, STATUS_PATHS, accept=is_scalar))
    block_height = to_int(resolve_first(tx, BLOCK_HEIGHT_PATHS, accept=is_scalar))
    result = as_text(resolve_first(tx, TX_RESULT_PATHS, accept=is_scalar))

    if events is None:
        inline_events = tx.get("events")
        events = inline_events if isinstance(inline_events, list) else []

    summary = build_summary(
        tx_type,
        sender=sender,
        recipient=recipient,
        amount=amount,
        contract_id=contract_id,
        function_name=function_name,
        function_args=function_args,
        status=status,
        block_height=block_height,
        result=result,
    )

    return ExplainedTransaction(
        summary=summary,
        tx_type=tx_type,
        tx_id=as_text(resolve_first(tx, TX_ID_PATHS, accept=is_scalar)),
        status=status,
        sender=sender,
        recipient=recipient,
        amount=amount,
        amount_stx=format_units(amount) if amount else None,
        fee=fee,
        fee_stx=format_units(fee) if fee else None,
        nonce=to_int(resolve_first(tx, NONCE_PATHS, accept=is_scalar)),
        contract_id=contract_id,
        function_name=function_name,
        function_args=function_args,
        memo=memo,
        block_height=block_height,
        block_time=format_timestamp(
            resolve_first(tx, BLOCK_TIME_PATHS, accept=is_scalar)
        ),
        confirmations=compute_confirmations(block_height, chain_tip_height),
        events=normalize_events(events),
    )
