"""Tests for the raw transaction decoder client."""

import json

import httpx
import pytest

from app.services.core.exceptions import (
    DecoderError,
    DecoderUnavailableError,
    InvalidRawTransactionError,
)
from app.services.integrations.decoder import (
    TransactionDecoder,
    normalize_raw_hex,
    stringify_integers,
)

DECODER_URL = "https://decoder.test/decode"
RAW_TX = "0x" + "80800000000400" + "ab" * 20


def make_decoder(handler) -> TransactionDecoder:
    return TransactionDecoder(
        api_url=DECODER_URL, timeout=5, transport=httpx.MockTransport(handler)
    )


class TestNormalizeRawHex:
    def test_prefix_and_case(self) -> None:
        assert normalize_raw_hex("0xABCD") == "0xabcd"
        assert normalize_raw_hex("  abcd\n") == "0xabcd"
        assert normalize_raw_hex("0XAbCd") == "0xabcd"

    @pytest.mark.parametrize("value", ["", "0x", "   ", "abc", "zz", "0xabcg", None, 123])
    def test_rejects_bad_input(self, value) -> None:
        with pytest.raises(InvalidRawTransactionError):
            normalize_raw_hex(value)


def test_stringify_integers() -> None:
    assert stringify_integers(
        {"amount": 2**70, "ok": True, "items": [1, {"fee": 180}], "memo": "x"}
    ) == {"amount": str(2**70), "ok": True, "items": ["1", {"fee": "180"}], "memo": "x"}


@pytest.mark.asyncio
async def test_decode_success() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "decoded": {
                        "anchorMode": 3,
                        "payload": {"payloadType": 0, "amount": 2**70},
                    }
                },
            },
        )

    decoded = await make_decoder(handler).decode(RAW_TX.upper().replace("0X", "0x"))

    assert decoded == {
        "anchorMode": "3",
        "payload": {"payloadType": "0", "amount": str(2**70)},
    }
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == DECODER_URL
    assert json.loads(request.content) == {"rawTx": RAW_TX}


@pytest.mark.asyncio
async def test_decode_disabled() -> None:
    decoder = TransactionDecoder(api_url="")
    assert not decoder.enabled
    with pytest.raises(DecoderUnavailableError):
        await decoder.decode(RAW_TX)


@pytest.mark.asyncio
async def test_invalid_hex_checked_before_configuration() -> None:
    with pytest.raises(InvalidRawTransactionError):
        await TransactionDecoder(api_url="").decode("not hex")


@pytest.mark.asyncio
async def test_decoder_http_error() -> None:
    decoder = make_decoder(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(DecoderError) as exc_info:
        await decoder.decode(RAW_TX)
    assert exc_info.value.details["decoder_status"] == 500
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_decoder_unsuccessful_result() -> None:
    decoder = make_decoder(
        lambda request: httpx.Response(200, json={"success": False, "error": "bad tx"})
    )
    with pytest.raises(DecoderError) as exc_info:
        await decoder.decode(RAW_TX)
    assert exc_info.value.message == "bad tx"


@pytest.mark.asyncio
async def test_decoder_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(DecoderError) as exc_info:
        await make_decoder(handler).decode(RAW_TX)
    assert exc_info.value.message == "Decoder service is unreachable"


@pytest.mark.asyncio
async def test_decoder_invalid_json() -> None:
    decoder = make_decoder(lambda request: httpx.Response(200, text="nope"))
    with pytest.raises(DecoderError):
        await decoder.decode(RAW_TX)


@pytest.mark.asyncio
async def test_decoder_non_object_response() -> None:
    decoder = make_decoder(lambda request: httpx.Response(200, json=[1, 2]))
    with pytest.raises(DecoderError):
        await decoder.decode(RAW_TX)
