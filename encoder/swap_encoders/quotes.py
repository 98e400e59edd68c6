"""Signed-quote sources for off-chain (RFQ) priced protocols.

RFQ market makers price swaps off-chain. The only capability an RFQ
encoder needs from them is ``request_signed_quote``; nothing here
simulates pools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from encoder.constants import DEFAULT_REQUEST_TIMEOUT
from encoder.errors import FatalEncodingError, RecoverableEncodingError
from encoder.models.types import HexBytes, Uint256, normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class QuoteRequest:
    """Parameters of a signed-quote request."""

    token_in: str
    token_out: str
    amount_in: int
    sender: str
    receiver: str


@dataclass(frozen=True)
class SignedQuote:
    """A firm quote: guaranteed output plus provider-specific signed attributes."""

    amount_out: int
    quote_attributes: dict[str, bytes] = field(default_factory=dict)


class IndicativelyPriced(Protocol):
    """Protocol for off-chain priced liquidity."""

    async def request_signed_quote(self, request: QuoteRequest) -> SignedQuote:
        """Request a firm, signed quote.

        Raises:
            RecoverableEncodingError: On transport faults or timeouts
            FatalEncodingError: On malformed responses
        """
        ...


class QuoteResponse(BaseModel):
    """Wire format of a quote service response."""

    amount_out: Uint256
    attributes: dict[str, HexBytes] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class HttpQuoteProvider:
    """Requests signed quotes from an HTTP quote service."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize provider.

        Args:
            url: Quote endpoint
            api_key: Sent as the ``x-api-key`` header when set
            timeout: Per-request timeout in seconds
            client: Shared client (a new one is opened per request otherwise)
        """
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.client = client

    async def request_signed_quote(self, request: QuoteRequest) -> SignedQuote:
        payload = {
            "sell_token": normalize_address(request.token_in),
            "buy_token": normalize_address(request.token_out),
            "sell_amount": str(request.amount_in),
            "taker_address": normalize_address(request.sender),
            "receiver_address": normalize_address(request.receiver),
        }
        headers = {"x-api-key": self.api_key} if self.api_key else {}

        try:
            if self.client is not None:
                response = await self.client.post(
                    self.url, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 or status >= 500:
                logger.warning("rfq_quote_failed", url=self.url, status=status)
                raise RecoverableEncodingError(f"Quote service returned {status}") from e
            raise FatalEncodingError(f"Quote request rejected with {status}") from e
        except httpx.HTTPError as e:
            logger.warning("rfq_quote_failed", url=self.url, error=str(e))
            raise RecoverableEncodingError(f"Quote request failed: {e}") from e

        try:
            parsed = QuoteResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FatalEncodingError(f"Malformed quote response from {self.url}") from e

        logger.debug(
            "rfq_quote_received",
            url=self.url,
            amount_in=request.amount_in,
            amount_out=parsed.amount_out,
        )
        return SignedQuote(amount_out=parsed.amount_out, quote_attributes=dict(parsed.attributes))


class MockQuoteProvider:
    """Mock provider for testing without a quote service.

    Configure quotes per (token_in, token_out, amount_in), and track calls
    for assertions.
    """

    def __init__(
        self,
        quotes: dict[tuple[str, str, int], SignedQuote] | None = None,
        default: SignedQuote | None = None,
        error: Exception | None = None,
    ):
        self.quotes = {
            (normalize_address(t_in), normalize_address(t_out), amount): quote
            for (t_in, t_out, amount), quote in (quotes or {}).items()
        }
        self.default = default
        self.error = error
        self.calls: list[QuoteRequest] = []

    async def request_signed_quote(self, request: QuoteRequest) -> SignedQuote:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        key = (
            normalize_address(request.token_in),
            normalize_address(request.token_out),
            request.amount_in,
        )
        quote = self.quotes.get(key, self.default)
        if quote is None:
            raise FatalEncodingError(f"No mock quote for {key}")
        return quote


__all__ = [
    "QuoteRequest",
    "SignedQuote",
    "IndicativelyPriced",
    "QuoteResponse",
    "HttpQuoteProvider",
    "MockQuoteProvider",
]
