"""Shared fixtures: realistic Stacks API payloads."""

from typing import Any, Dict

import pytest

SENDER = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
RECIPIENT = "SP3FBR2AGK5H9QBDH3EEN6DF8EK8JY7RX8QJ5SVTE"
TESTNET_SENDER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
TXID = "a" * 62 + "0f"


@pytest.fixture
def sender() -> str:
    return SENDER


@pytest.fixture
def recipient() -> str:
    return RECIPIENT


@pytest.fixture
def testnet_sender() -> str:
    return TESTNET_SENDER


@pytest.fixture
def txid() -> str:
    return TXID


@pytest.fixture
def token_transfer_tx() -> Dict[str, Any]:
    """A confirmed STX transfer as returned by /extended/v1/tx/{txid}."""
    return {
        "tx_id": f"0x{TXID}",
        "nonce": 12,
        "fee_rate": "180",
        "sender_address": SENDER,
        "anchor_mode": "any",
        "tx_status": "success",
        "tx_type": "token_transfer",
        "block_height": 150000,
        "block_time_iso": "2024-05-01T12:00:00.000Z",
        "tx_result": {"hex": "0x0703", "repr": "(ok true)"},
        "event_count": 1,
        "events": [
            {
                "event_index": 0,
                "event_type": "stx_asset",
                "tx_id": f"0x{TXID}",
                "asset": {
                    "asset_event_type": "transfer",
                    "sender": SENDER,
                    "recipient": RECIPIENT,
                    "amount": "1000000",
                },
            }
        ],
        "token_transfer": {
            "recipient_address": RECIPIENT,
            "amount": "1000000",
            "memo": "0x00000000",
        },
    }


@pytest.fixture
def contract_call_tx() -> Dict[str, Any]:
    """A contract call with decoded function arguments and a token event."""
    contract_id = f"{RECIPIENT}.amm-swap-pool"
    return {
        "tx_id": f"0x{'b' * 64}",
        "nonce": 3,
        "fee_rate": "3000",
        "sender_address": SENDER,
        "tx_status": "success",
        "tx_type": "contract_call",
        "block_height": 150010,
        "tx_result": {"hex": "0x0703", "repr": "(ok true)"},
        "event_count": 1,
        "events": [
            {
                "event_index": 0,
                "event_type": "fungible_token_asset",
                "asset": {
                    "asset_event_type": "transfer",
                    "asset_id": f"{RECIPIENT}.token-alex::alex",
                    "sender": SENDER,
                    "recipient": contract_id,
                    "amount": "250",
                },
            }
        ],
        "contract_call": {
            "contract_id": contract_id,
            "function_name": "swap-helper",
            "function_signature": "(define-public (swap-helper (dx uint)))",
            "function_args": [
                {"hex": "0x0100", "repr": "u100", "name": "dx", "type": "uint"}
            ],
        },
    }
