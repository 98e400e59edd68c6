"""Encoder for tick-spaced concentrated-liquidity pools (Aerodrome/Velodrome Slipstreams).

Slipstreams pools are keyed by tick spacing instead of fee tier. The
executor expects the spacing as an exact 3-byte big-endian field.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from encoder.swap_encoders.base import SwapEncoder, pool_address, zero_to_one
from encoder.utils import address_bytes, get_static_attribute, pad_or_truncate_to_size

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap

logger = structlog.get_logger()

TICK_SPACING_ATTRIBUTE = "tick_spacing"
TICK_SPACING_SIZE = 3


class SlipstreamsSwapEncoder(SwapEncoder):
    """Layout (packed):
        token_in(20) | token_out(20) | tick_spacing(3) | transfer_type(1) |
        receiver(20) | pool(20) | zero_to_one(1)
    """

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        pool = pool_address(swap)

        raw_spacing = get_static_attribute(swap, TICK_SPACING_ATTRIBUTE)
        tick_spacing = pad_or_truncate_to_size(raw_spacing, TICK_SPACING_SIZE)
        if len(raw_spacing) != TICK_SPACING_SIZE:
            logger.debug(
                "tick_spacing_resized",
                pool=swap.component.id,
                original_size=len(raw_spacing),
            )

        return b"".join(
            [
                token_in,
                token_out,
                tick_spacing,
                bytes([context.transfer_type]),
                address_bytes(context.receiver, "receiver"),
                pool,
                bytes([zero_to_one(token_in, token_out)]),
            ]
        )
