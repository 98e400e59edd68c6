"""API endpoints for the swap router encoder."""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from encoder.config import Chain, EncoderSettings
from encoder.errors import EncodingError
from encoder.models.solution import Solution, Transaction
from encoder.router import RouterEncoder
from encoder.strategies.registry import StrategyRegistry

logger = structlog.get_logger()

router = APIRouter()

# Chains served by this instance, from ENCODER_SUPPORTED_CHAINS (comma-separated)
SUPPORTED_CHAINS = EncoderSettings.from_env().supported_chains

# HTTP status per error kind
ERROR_STATUS = {
    "invalid_input": 400,
    "not_implemented": 501,
    "recoverable": 503,
    "fatal": 500,
}


class EncodeRequest(BaseModel):
    """Body of an encode request."""

    solutions: list[Solution] = Field(default_factory=list)


class EncodeResponse(BaseModel):
    """Transactions aligned with the request's solutions and their orders."""

    transactions: list[list[Transaction]] = Field(default_factory=list)


def error_response(error: EncodingError) -> JSONResponse:
    """JSON error body carrying the error kind and message."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(error.kind, 500),
        content={"kind": error.kind, "detail": error.message, "retryable": error.retryable},
    )


@lru_cache(maxsize=None)
def _default_router_encoder(chain: Chain) -> RouterEncoder:
    return RouterEncoder(StrategyRegistry.from_files(chain))


def get_router_encoder(chain: str) -> RouterEncoder:
    """Dependency provider for the chain's router encoder.

    Override this in tests to inject an encoder built on mocks:
        app.dependency_overrides[get_router_encoder] = lambda: encoder

    Raises:
        HTTPException: 404 if the chain is not served
    """
    name = chain.lower()
    if name in SUPPORTED_CHAINS and name in {c.value for c in Chain}:
        return _default_router_encoder(Chain(name))
    logger.warning(
        "unsupported_chain",
        chain=chain,
        supported_chains=sorted(SUPPORTED_CHAINS),
    )
    raise HTTPException(status_code=404, detail=f"Unsupported chain: {chain}")


@router.post("/{chain}/encode", response_model=EncodeResponse)
async def encode(
    chain: str,
    request: EncodeRequest,
    router_encoder: RouterEncoder = Depends(get_router_encoder),
) -> EncodeResponse | JSONResponse:
    """Encode solutions into router transactions.

    Args:
        chain: Chain name (e.g., "ethereum", "base")
        request: Solutions to encode
        router_encoder: Injected encoder (via FastAPI Depends)

    Error Handling:
        - Invalid request schema: 400
        - Unsupported chain: 404
        - Encoding errors: status by kind (400, 500, 501, 503)
    """
    order_count = sum(len(solution.orders) for solution in request.solutions)
    logger.info(
        "received_encode_request",
        chain=chain,
        solution_count=len(request.solutions),
        order_count=order_count,
    )

    try:
        transactions = await router_encoder.encode_router_calldata(request.solutions)
    except EncodingError as error:
        logger.warning(
            "encode_failed",
            chain=chain,
            kind=error.kind,
            error=error.message,
            retryable=error.retryable,
        )
        return error_response(error)
    except Exception:
        logger.exception("encode_error", chain=chain, order_count=order_count)
        return JSONResponse(
            status_code=500,
            content={"kind": "fatal", "detail": "Internal error", "retryable": False},
        )

    logger.info(
        "returning_transactions",
        chain=chain,
        transaction_count=sum(len(txs) for txs in transactions),
    )
    return EncodeResponse(transactions=transactions)
