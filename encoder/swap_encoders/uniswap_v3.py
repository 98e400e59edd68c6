"""Encoder for UniswapV3-style concentrated-liquidity pools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.swap_encoders.base import SwapEncoder, pool_address, zero_to_one
from encoder.utils import address_bytes, get_static_attribute, pad_or_truncate_to_size

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap

# Static attribute holding the pool fee tier (big-endian, e.g. 0x0bb8 = 3000)
FEE_ATTRIBUTE = "fee"


class UniswapV3SwapEncoder(SwapEncoder):
    """UniswapV3 and PancakeSwap V3.

    Layout (packed):
        token_in(20) | token_out(20) | fee(3) | receiver(20) | pool(20) |
        zero_to_one(1) | transfer_type(1)
    """

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        fee = pad_or_truncate_to_size(get_static_attribute(swap, FEE_ATTRIBUTE), 3)
        return b"".join(
            [
                token_in,
                token_out,
                fee,
                address_bytes(context.receiver, "receiver"),
                pool_address(swap),
                bytes([zero_to_one(token_in, token_out)]),
                bytes([context.transfer_type]),
            ]
        )
