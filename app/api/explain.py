from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from app.api.dependencies import get_explain_service
from app.lib.logger import configure_logger
from app.services.core.exceptions import ExplainerError
from app.services.core.explain_service import ExplainService

# Configure logger
logger = configure_logger(__name__)

# Create the router
router = APIRouter(prefix="/api")


class ExplainRequest(BaseModel):
    """Request body for explaining a transaction by id."""

    # Optional here so a missing txid gets the regular validate error
    txid: Optional[str] = Field(None, description="Transaction id, 0x optional")
    network: Optional[str] = Field(
        None, description="auto, mainnet or testnet; defaults to the server setting"
    )


class ExplainRawRequest(BaseModel):
    """Request body for explaining a serialized transaction."""

    raw_tx: Optional[str] = Field(None, description="Serialized transaction hex")


def error_response(
    error: str, step: str, status: int, message: Optional[str] = None
) -> JSONResponse:
    """Build the ``{ok: false, error, step, status, message?}`` envelope."""
    content = {"ok": False, "error": error, "step": step, "status": status}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status, content=content)


def explainer_error_response(e: ExplainerError) -> JSONResponse:
    # Upstream causes are only surfaced for server-side failures
    message = str(e.__cause__) if e.status_code >= 500 and e.__cause__ else None
    return error_response(e.message, e.step, e.status_code, message)


def unexpected_error_response(e: Exception) -> JSONResponse:
    return error_response(
        "Server error while explaining transaction.", "explain", 500, str(e)
    )


@router.post("/explain")
async def explain_transaction_by_id(
    payload: ExplainRequest,
    service: ExplainService = Depends(get_explain_service),
) -> JSONResponse:
    """Explain a transaction fetched from the Hiro API.

    Args:
        payload: The txid and the network to search.
        service: The explain service.

    Returns:
        JSONResponse: ``{ok, network, txid, explanation}`` or the error envelope.
    """
    try:
        network, tx_id, explanation = await service.explain_txid(
            payload.txid, payload.network
        )
    except ExplainerError as e:
        logger.info(
            "Explain request rejected",
            extra={"step": e.step, "status": e.status_code, "error": e.message},
        )
        return explainer_error_response(e)
    except Exception as e:
        logger.error("Unexpected error explaining transaction", exc_info=True)
        return unexpected_error_response(e)

    return JSONResponse(
        content={
            "ok": True,
            "network": network.value,
            "txid": f"0x{tx_id}",
            "explanation": explanation.to_response(),
        }
    )


@router.post("/explain/raw")
async def explain_raw_transaction(
    payload: ExplainRawRequest,
    service: ExplainService = Depends(get_explain_service),
) -> JSONResponse:
    """Explain a serialized transaction without looking it up on chain."""
    try:
        explanation = await service.explain_raw(payload.raw_tx)
    except ExplainerError as e:
        logger.info(
            "Raw explain request rejected",
            extra={"step": e.step, "status": e.status_code, "error": e.message},
        )
        return explainer_error_response(e)
    except Exception as e:
        logger.error("Unexpected error explaining raw transaction", exc_info=True)
        return unexpected_error_response(e)

    return JSONResponse(content={"ok": True, "explanation": explanation.to_response()})


@router.get("/wallet/{address}/story")
async def get_wallet_story(
    address: str,
    network: Optional[str] = Query(None, description="auto, mainnet or testnet"),
    limit: Optional[int] = Query(None, ge=1, description="Transactions to include"),
    service: ExplainService = Depends(get_explain_service),
) -> JSONResponse:
    """Describe the recent activity of an address in plain English."""
    try:
        resolved_network, story = await service.wallet_story(address, network, limit)
    except ExplainerError as e:
        logger.info(
            "Wallet story request rejected",
            extra={"step": e.step, "status": e.status_code, "error": e.message},
        )
        return explainer_error_response(e)
    except Exception as e:
        logger.error("Unexpected error building wallet story", exc_info=True)
        return unexpected_error_response(e)

    return JSONResponse(
        content={
            "ok": True,
            "network": resolved_network.value,
            "story": story.to_response(),
        }
    )
