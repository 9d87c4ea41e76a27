"""Wallet Story Mode: narrative sections describing an address's recent activity."""

from collections import Counter
from typing import Iterable, List, Optional

from app.services.processing.tx_explainer import (
    ExplainedTransaction,
    WalletStory,
    WalletStorySection,
    format_units,
)
from app.services.processing.tx_explainer.explainer import (
    CONTRACT_CALL_TYPES,
    CONTRACT_DEPLOY_TYPES,
    VALUE_TRANSFER_TYPES,
    is_failed_status,
)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _sum_micro(values: Iterable[Optional[str]]) -> str:
    # Python ints are unbounded, so the total stays exact
    total = sum(int(value) for value in values if value and value.isdigit())
    return format_units(str(total)) or "0"


def _sent_section(address: str, txs: List[ExplainedTransaction]) -> Optional[WalletStorySection]:
    sent = [
        tx
        for tx in txs
        if tx.tx_type in VALUE_TRANSFER_TYPES and tx.sender == address
    ]
    if not sent:
        return None
    recipients = {tx.recipient for tx in sent if tx.recipient}
    return WalletStorySection(
        title="Sent STX",
        description=(
            f"Sent {_sum_micro(tx.amount for tx in sent)} STX in "
            f"{_plural(len(sent), 'transfer')} to "
            f"{_plural(len(recipients), 'recipient')}."
        ),
    )


def _received_section(
    address: str, txs: List[ExplainedTransaction]
) -> Optional[WalletStorySection]:
    received = [
        tx
        for tx in txs
        if tx.tx_type in VALUE_TRANSFER_TYPES and tx.recipient == address
    ]
    if not received:
        return None
    senders = {tx.sender for tx in received if tx.sender}
    return WalletStorySection(
        title="Received STX",
        description=(
            f"Received {_sum_micro(tx.amount for tx in received)} STX in "
            f"{_plural(len(received), 'transfer')} from "
            f"{_plural(len(senders), 'sender')}."
        ),
    )


def _contract_call_section(
    txs: List[ExplainedTransaction],
) -> Optional[WalletStorySection]:
    calls = [tx for tx in txs if tx.tx_type in CONTRACT_CALL_TYPES]
    if not calls:
        return None
    contracts = {tx.contract_id for tx in calls if tx.contract_id}
    description = (
        f"Made {_plural(len(calls), 'contract call')} across "
        f"{_plural(len(contracts), 'contract')}."
    )
    functions = Counter(tx.function_name for tx in calls if tx.function_name)
    if functions:
        top = ", ".join(name for name, _ in functions.most_common(3))
        description += f" Most used functions: {top}."
    return WalletStorySection(title="Contract calls", description=description)


def _deployment_section(
    txs: List[ExplainedTransaction],
) -> Optional[WalletStorySection]:
    deploys = [tx for tx in txs if tx.tx_type in CONTRACT_DEPLOY_TYPES]
    if not deploys:
        return None
    names = [tx.contract_id.split(".")[-1] for tx in deploys if tx.contract_id]
    description = f"Deployed {_plural(len(deploys), 'contract')}"
    description += f": {', '.join(names)}." if names else "."
    return WalletStorySection(title="Contract deployments", description=description)


def _fee_section(
    address: str, txs: List[ExplainedTransaction]
) -> Optional[WalletStorySection]:
    paid = [tx for tx in txs if tx.sender == address and tx.fee]
    if not paid:
        return None
    return WalletStorySection(
        title="Fees",
        description=(
            f"Paid {_sum_micro(tx.fee for tx in paid)} STX in fees across "
            f"{_plural(len(paid), 'transaction')}."
        ),
    )


def _failure_section(txs: List[ExplainedTransaction]) -> Optional[WalletStorySection]:
    failed = [tx for tx in txs if is_failed_status(tx.status)]
    if not failed:
        return None
    return WalletStorySection(
        title="Failed transactions",
        description=f"{_plural(len(failed), 'transaction')} did not succeed.",
    )


def _other_section(txs: List[ExplainedTransaction]) -> Optional[WalletStorySection]:
    known = VALUE_TRANSFER_TYPES | CONTRACT_CALL_TYPES | CONTRACT_DEPLOY_TYPES
    others = Counter(tx.tx_type for tx in txs if tx.tx_type not in known)
    if not others:
        return None
    breakdown = ", ".join(f"{count} {tx_type}" for tx_type, count in others.most_common())
    return WalletStorySection(
        title="Other activity",
        description=f"Other transactions: {breakdown}.",
    )


def build_wallet_story(
    address: str, transactions: Iterable[ExplainedTransaction]
) -> WalletStory:
    """Group explained transactions into narrative sections for `address`.

    Sections with nothing to say are left out. An address with no
    transactions gets a single "No recent activity" section.
    """
    txs = list(transactions)
    if not txs:
        return WalletStory(
            address=address,
            sections=[
                WalletStorySection(
                    title="No recent activity",
                    description="No recent transactions were found for this address.",
                )
            ],
        )

    candidates = [
        WalletStorySection(
            title="Overview",
            description=f"Looked at the {_plural(len(txs), 'most recent transaction')}.",
        ),
        _sent_section(address, txs),
        _received_section(address, txs),
        _contract_call_section(txs),
        _deployment_section(txs),
        _fee_section(address, txs),
        _failure_section(txs),
        _other_section(txs),
    ]
    return WalletStory(
        address=address,
        sections=[section for section in candidates if section is not None],
        transactions=txs,
    )
