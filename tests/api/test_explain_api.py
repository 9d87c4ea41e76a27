"""Tests for the explain API routes and error envelope."""

from typing import Any, Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_explain_service
from app.main import app
from app.services.core.explain_service import ExplainService
from app.services.integrations.decoder import TransactionDecoder
from app.services.integrations.hiro import HiroApi, Network


def hiro_factory(routes: Dict[str, httpx.Response]):
    """Build HiroApi clients whose every network answers from `routes`."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )

    def factory(network: Network) -> HiroApi:
        return HiroApi(
            network,
            base_url="https://hiro.test",
            transport=httpx.MockTransport(handler),
            api_key="",
            max_retries=1,
            retry_delay=0,
        )

    return factory


class BrokenService(ExplainService):
    async def explain_txid(self, txid, network=None):
        raise RuntimeError("boom")


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_service(service: ExplainService) -> None:
    app.dependency_overrides[get_explain_service] = lambda: service


def test_health_check(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_explain_success(
    client: TestClient, txid: str, token_transfer_tx: Dict[str, Any]
) -> None:
    use_service(
        ExplainService(
            client_factory=hiro_factory(
                {
                    f"/extended/v1/tx/0x{txid}": httpx.Response(200, json=token_transfer_tx),
                    "/extended": httpx.Response(
                        200, json={"chain_tip": {"block_height": 150000}}
                    ),
                }
            )
        )
    )

    response = client.post("/api/explain", json={"txid": txid.upper(), "network": "auto"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["network"] == "mainnet"
    assert body["txid"] == f"0x{txid}"
    explanation = body["explanation"]
    assert explanation["txType"] == "token_transfer"
    assert explanation["amountStx"] == "1"
    assert explanation["confirmations"] == 1
    assert "SP2J6Z…9EJ7" in explanation["summary"]
    assert "X-Process-Time-Ms" in response.headers


@pytest.mark.parametrize("payload", [{"txid": "0x1234"}, {}, {"txid": "z" * 64}])
def test_explain_invalid_txid(client: TestClient, payload: Dict[str, Any]) -> None:
    use_service(ExplainService(client_factory=hiro_factory({})))

    response = client.post("/api/explain", json=payload)

    assert response.status_code == 400
    assert response.json() == {
        "ok": False,
        "error": "Invalid transaction ID",
        "step": "validate",
        "status": 400,
    }


def test_explain_invalid_network(client: TestClient, txid: str) -> None:
    use_service(ExplainService(client_factory=hiro_factory({})))

    response = client.post("/api/explain", json={"txid": txid, "network": "devnet"})

    assert response.status_code == 400
    assert response.json()["step"] == "validate"


def test_explain_not_found(client: TestClient, txid: str) -> None:
    use_service(ExplainService(client_factory=hiro_factory({})))

    response = client.post("/api/explain", json={"txid": txid})

    assert response.status_code == 404
    assert response.json() == {
        "ok": False,
        "error": "Transaction not found",
        "step": "fetch",
        "status": 404,
    }


def test_explain_upstream_error(client: TestClient, txid: str) -> None:
    use_service(
        ExplainService(
            client_factory=hiro_factory(
                {f"/extended/v1/tx/0x{txid}": httpx.Response(500, text="boom")}
            )
        )
    )

    response = client.post("/api/explain", json={"txid": txid, "network": "mainnet"})

    assert response.status_code == 502
    body = response.json()
    assert body["ok"] is False
    assert body["step"] == "fetch"
    assert body["status"] == 502
    assert "500" in body["message"]


def test_explain_unexpected_error(client: TestClient, txid: str) -> None:
    use_service(BrokenService(client_factory=hiro_factory({})))

    response = client.post("/api/explain", json={"txid": txid})

    assert response.status_code == 500
    assert response.json() == {
        "ok": False,
        "error": "Server error while explaining transaction.",
        "step": "explain",
        "status": 500,
        "message": "boom",
    }


def test_malformed_body(client: TestClient) -> None:
    response = client.post(
        "/api/explain",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["ok"] is False
    assert body["step"] == "validate"


def test_explain_raw_decoder_not_configured(client: TestClient) -> None:
    use_service(
        ExplainService(
            client_factory=hiro_factory({}), decoder=TransactionDecoder(api_url="")
        )
    )

    response = client.post("/api/explain/raw", json={"raw_tx": "0x0000"})

    assert response.status_code == 503
    assert response.json()["step"] == "decode"


def test_explain_raw_invalid_hex(client: TestClient) -> None:
    use_service(
        ExplainService(
            client_factory=hiro_factory({}), decoder=TransactionDecoder(api_url="")
        )
    )

    response = client.post("/api/explain/raw", json={"raw_tx": "xyz"})

    assert response.status_code == 400
    assert response.json()["step"] == "validate"


def test_explain_raw_success(client: TestClient, recipient: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "decoded": {
                        "payload": {
                            "payloadType": 0,
                            "recipient": {"value": recipient},
                            "amount": 2500000,
                        }
                    }
                },
            },
        )

    use_service(
        ExplainService(
            client_factory=hiro_factory({}),
            decoder=TransactionDecoder(
                api_url="https://decoder.test", transport=httpx.MockTransport(handler)
            ),
        )
    )

    response = client.post("/api/explain/raw", json={"raw_tx": "0x0000"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["explanation"]["amountStx"] == "2.5"
    assert body["explanation"]["recipient"] == recipient


def test_wallet_story(client: TestClient, sender: str, token_transfer_tx: Dict[str, Any]) -> None:
    use_service(
        ExplainService(
            client_factory=hiro_factory(
                {
                    f"/extended/v1/address/{sender}/transactions": httpx.Response(
                        200,
                        json={"limit": 5, "offset": 0, "total": 1, "results": [token_transfer_tx]},
                    )
                }
            )
        )
    )

    response = client.get(f"/api/wallet/{sender}/story", params={"limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["network"] == "mainnet"
    assert body["story"]["address"] == sender
    assert body["story"]["sections"][0]["title"] == "Overview"
    assert len(body["story"]["transactions"]) == 1


def test_wallet_story_invalid_address(client: TestClient) -> None:
    use_service(ExplainService(client_factory=hiro_factory({})))

    response = client.get("/api/wallet/not-an-address/story")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid Stacks address"


def test_wallet_story_invalid_limit(client: TestClient, sender: str) -> None:
    use_service(ExplainService(client_factory=hiro_factory({})))

    response = client.get(f"/api/wallet/{sender}/story", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["step"] == "validate"
