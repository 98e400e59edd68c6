"""Encoder for UniswapV4 pools.

V4 settles through a singleton pool manager with flash accounting, so
consecutive V4 swaps are grouped into one executor call. The first swap
of a group carries the group header; every following swap contributes
only its pool parameters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.errors import FatalEncodingError
from encoder.swap_encoders.base import SwapEncoder, zero_to_one
from encoder.utils import address_bytes, get_static_attribute, pad_or_truncate_to_size

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap

FEE_ATTRIBUTE = "key_lp_fee"
TICK_SPACING_ATTRIBUTE = "tick_spacing"
HOOKS_ATTRIBUTE = "hooks"

MAX_HOOK_DATA = 2**16 - 1
ZERO_ADDRESS = bytes(20)


class UniswapV4SwapEncoder(SwapEncoder):
    """Layout (packed).

    First swap of a group:
        group_token_in(20) | group_token_out(20) | zero_to_one(1) |
        transfer_type(1) | receiver(20) | pool_params
    Later swaps of the group:
        pool_params

    pool_params = token_out(20) | fee(3) | tick_spacing(3) | hooks(20) |
                  hook_data_len(2) | hook_data
    """

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        params = self._pool_params(swap)
        if swap.token_in != context.group_token_in:
            return params

        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        return b"".join(
            [
                address_bytes(context.group_token_in, "group_token_in"),
                address_bytes(context.group_token_out, "group_token_out"),
                bytes([zero_to_one(token_in, token_out)]),
                bytes([context.transfer_type]),
                address_bytes(context.receiver, "receiver"),
                params,
            ]
        )

    def _pool_params(self, swap: Swap) -> bytes:
        fee = pad_or_truncate_to_size(get_static_attribute(swap, FEE_ATTRIBUTE), 3)
        tick_spacing = pad_or_truncate_to_size(
            get_static_attribute(swap, TICK_SPACING_ATTRIBUTE), 3
        )

        # No hooks attribute means a hookless pool
        raw_hooks = swap.component.static_attributes.get(HOOKS_ATTRIBUTE, ZERO_ADDRESS)
        hooks = pad_or_truncate_to_size(raw_hooks, 20)

        hook_data = swap.user_data or b""
        if len(hook_data) > MAX_HOOK_DATA:
            raise FatalEncodingError(
                f"Hook data too long for {swap.component.id}: {len(hook_data)} bytes"
            )

        return b"".join(
            [
                address_bytes(swap.token_out, "token_out"),
                fee,
                tick_spacing,
                hooks,
                len(hook_data).to_bytes(2, "big"),
                hook_data,
            ]
        )
