"""Tests for explaining transactions decoded from raw hex."""

import pytest

from app.services.processing.tx_explainer import explain_decoded_transaction
from app.services.processing.tx_explainer.decoded import (
    decoded_to_api_shape,
    resolve_anchor_mode,
    resolve_payload_type,
)


def test_decoded_token_transfer(sender: str, recipient: str) -> None:
    result = explain_decoded_transaction(
        {
            "txid": "c" * 64,
            "senderAddress": sender,
            "anchorMode": "3",
            "auth": {
                "authType": "4",
                "spendingCondition": {"fee": "180", "nonce": "5"},
            },
            "payload": {
                "payloadType": "0",
                "recipient": {"type": "5", "value": recipient},
                "amount": "2000000",
                "memo": {"type": "2", "content": "rent"},
            },
        }
    )
    assert result.tx_type == "token_transfer"
    assert result.tx_id == "c" * 64
    assert result.sender == sender
    assert result.recipient == recipient
    assert result.amount == "2000000"
    assert result.amount_stx == "2"
    assert result.memo == "rent"
    assert result.fee == "180"
    assert result.nonce == 5
    assert result.anchor_mode == "any"
    assert result.status is None
    assert result.events == []
    assert result.summary == "SP2J6Z…9EJ7 sent 2 STX to SP3FBR…SVTE."


def test_decoded_amount_beyond_double_precision(recipient: str) -> None:
    result = explain_decoded_transaction(
        {
            "payload": {
                "payloadType": 0,
                "recipient": recipient,
                "amount": 2**70,
            }
        }
    )
    assert result.amount == str(2**70)
    assert result.amount_stx == "1180591620717411.303424"


def test_decoded_contract_call(sender: str, recipient: str) -> None:
    result = explain_decoded_transaction(
        {
            "senderAddress": sender,
            "anchorMode": 1,
            "payload": {
                "payloadType": "2",
                "contractAddress": {"type": "0", "value": recipient},
                "contractName": {"type": "2", "content": "amm-swap-pool"},
                "functionName": {"type": "2", "content": "swap-helper"},
                "functionArgs": [{"type": "1", "value": "100"}],
            },
        }
    )
    assert result.tx_type == "contract_call"
    assert result.contract_id == f"{recipient}.amm-swap-pool"
    assert result.function_name == "swap-helper"
    assert result.function_args == ["100"]
    assert result.anchor_mode == "on_chain_only"
    assert 'called "swap-helper" on SP3FBR…SVTE.amm-swap-pool' in result.summary


def test_decoded_versioned_contract_deploy(sender: str) -> None:
    result = explain_decoded_transaction(
        {
            "senderAddress": sender,
            "payload": {
                "payloadType": 6,
                "contractName": {"type": "2", "content": "my-token"},
            },
        }
    )
    assert result.tx_type == "versioned_smart_contract"
    assert result.contract_id == f"{sender}.my-token"
    assert "deployed the contract SP2J6Z…9EJ7.my-token" in result.summary


@pytest.mark.parametrize(
    "payload_type,expected",
    [
        (0, "token_transfer"),
        ("1", "smart_contract"),
        (2, "contract_call"),
        (4, "coinbase"),
        (8, "nakamoto_coinbase"),
        ("ContractCall", "contract_call"),
        ("TokenTransfer", "token_transfer"),
        (42, "42"),
    ],
)
def test_resolve_payload_type(payload_type, expected: str) -> None:
    assert resolve_payload_type({"payload": {"payloadType": payload_type}}) == expected


def test_payload_type_alias_key() -> None:
    assert resolve_payload_type({"payload": {"type": "2"}}) == "contract_call"


def test_missing_payload() -> None:
    result = explain_decoded_transaction({"anchorMode": "2"})
    assert result.tx_type == "unknown"
    assert result.anchor_mode == "off_chain_only"
    assert result.summary


def test_non_mapping_decoded_value() -> None:
    assert decoded_to_api_shape(None)["tx_type"] == "unknown"
    assert resolve_anchor_mode({}) is None
    assert resolve_anchor_mode({"anchorMode": "OnChainOnly"}) == "on_chain_only"
