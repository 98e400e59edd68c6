"""Encoder for Balancer V2 vault pools.

Balancer V2 keeps custody of every pool's tokens in a single vault. The
executor swaps through the vault from whatever address holds the input,
so that address must have approved the vault; whether it already has is
resolved on-chain and embedded as a flag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from eth_abi import encode

from encoder.errors import InvalidInputError
from encoder.models.types import parse_hex_bytes
from encoder.swap_encoders.base import SwapEncoder
from encoder.utils import address_bytes

if TYPE_CHECKING:
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap

logger = structlog.get_logger()

BALANCER_V2_SWAP_TYPES = ["address", "address", "bytes", "address", "bool", "bool"]

# Pool address (20) | specialization (2) | nonce (10)
POOL_ID_SIZE = 32


def balancer_pool_id(component_id: str) -> bytes:
    """Raw 32-byte pool id from a 0x-prefixed hex component id.

    Raises:
        InvalidInputError: If the id is not 0x-prefixed hex of exactly 32 bytes
    """
    if not component_id.lower().startswith("0x") or len(component_id) != 2 + 2 * POOL_ID_SIZE:
        raise InvalidInputError(
            f"Invalid Balancer pool id: {component_id} (expected 0x and {POOL_ID_SIZE} bytes)"
        )
    try:
        return parse_hex_bytes(component_id)
    except ValueError as e:
        raise InvalidInputError(f"Invalid Balancer pool id: {component_id}") from e


class BalancerV2SwapEncoder(SwapEncoder):
    """ABI-encodes (token_in, token_out, pool_id, receiver, exact_out, approval_needed)."""

    required_config = ("vault_address",)

    @property
    def vault_address(self) -> str:
        return "0x" + self._config_address("vault_address").hex()

    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        token_in = address_bytes(swap.token_in, "token_in")
        token_out = address_bytes(swap.token_out, "token_out")
        receiver = address_bytes(context.receiver, "receiver")
        pool_id = balancer_pool_id(swap.component.id)

        approval_needed = await self._approval_needed(swap, context)

        return encode(
            BALANCER_V2_SWAP_TYPES,
            [token_in, token_out, pool_id, receiver, context.exact_out, approval_needed],
        )

    async def _approval_needed(self, swap: Swap, context: EncodingContext) -> bool:
        resolver = self._approval_resolver(context)
        if resolver is None:
            # Without on-chain data always approve
            logger.debug("approval_check_skipped", token=swap.token_in, pool=swap.component.id)
            return True
        return await resolver.approval_needed(
            swap.token_in,
            context.address_for_approvals,
            self.vault_address,
        )
