"""Encoder for UniswapV2-style constant-product pools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.swap_encoders.base import SwapEncoder, pool_address, zero_to_one
from encoder.utils import address_bytes

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap


class UniswapV2SwapEncoder(SwapEncoder):
    """UniswapV2 and its forks (SushiSwap, PancakeSwap V2).

    Layout (packed):
        token_in(20) | pool(20) | receiver(20) | zero_to_one(1) | transfer_type(1)
    """

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        return b"".join(
            [
                token_in,
                pool_address(swap),
                address_bytes(context.receiver, "receiver"),
                bytes([zero_to_one(token_in, token_out)]),
                bytes([context.transfer_type]),
            ]
        )
