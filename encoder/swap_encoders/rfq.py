"""Encoder for RFQ (off-chain priced) protocols such as Bebop and Hashflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from encoder.constants import NATIVE_TOKEN
from encoder.errors import FatalEncodingError, InvalidInputError, NotImplementedEncodingError
from encoder.swap_encoders.base import SwapEncoder
from encoder.swap_encoders.quotes import QuoteRequest
from encoder.utils import address_bytes

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap

logger = structlog.get_logger()

CALLDATA_ATTRIBUTE = "calldata"


class RfqSwapEncoder(SwapEncoder):
    """Embeds a market maker's signed quote for the settlement contract.

    Layout (packed):
        token_in(20) | token_out(20) | transfer_type(1) | approval_needed(1) |
        receiver(20) | amount_out(32) | signed calldata
    """

    required_config = ("settlement_address",)

    @property
    def settlement_address(self) -> str:
        return "0x" + self._config_address("settlement_address").hex()

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        if context.exact_out:
            raise NotImplementedEncodingError("Exact out is not supported for RFQ swaps")
        if self.quote_provider is None:
            raise FatalEncodingError(f"No quote provider configured for {swap.protocol_system}")
        if context.router_address is None:
            raise FatalEncodingError(f"A router address is needed for {swap.protocol_system} swaps")
        if swap.estimated_amount_in is None:
            raise InvalidInputError(
                f"estimated_amount_in is required for {swap.protocol_system} swap "
                f"on {swap.component.id}"
            )

        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        receiver = address_bytes(context.receiver, "receiver")

        quote = await self.quote_provider.request_signed_quote(
            QuoteRequest(
                token_in=swap.token_in,
                token_out=swap.token_out,
                amount_in=swap.estimated_amount_in,
                sender=context.router_address,
                receiver=context.receiver,
            )
        )
        calldata = quote.quote_attributes.get(CALLDATA_ATTRIBUTE)
        if calldata is None:
            raise FatalEncodingError(
                f"{swap.protocol_system} quote must have a {CALLDATA_ATTRIBUTE} attribute"
            )
        logger.debug(
            "rfq_quote_embedded",
            protocol=swap.protocol_system,
            amount_in=swap.estimated_amount_in,
            amount_out=quote.amount_out,
        )

        approval_needed = await self._approval_needed(swap, context)

        return b"".join(
            [
                token_in,
                token_out,
                bytes([context.transfer_type]),
                bytes([approval_needed]),
                receiver,
                quote.amount_out.to_bytes(32, "big"),
                calldata,
            ]
        )

    async def _approval_needed(self, swap: Swap, context: EncodingContext) -> bool:
        if swap.token_in == NATIVE_TOKEN:
            return False
        resolver = self._approval_resolver(context)
        if resolver is None:
            return True
        return await resolver.approval_needed(
            swap.token_in,
            context.address_for_approvals,
            self.settlement_address,
        )
