"""Base class for strategy encoders.

A strategy turns the swaps of one order into the ``swaps`` argument of a
router entry point. Every strategy groups swaps, asks the protocol
encoders for each group's data and prepends a strategy-specific header.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from encoder.models.context import (
    ActionType,
    EncodedSolution,
    EncodingContext,
    SwapGroup,
    UserTransferType,
)
from encoder.models.solution import NativeAction
from encoder.strategies.transfers import HopTransfer, TransferOptimization
from encoder.utils import address_bytes, ple_encode, run_concurrently

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.approvals.permit2 import Permit2
    from encoder.config import EncoderConfig
    from encoder.models.solution import Order
    from encoder.swap_encoders.registry import SwapEncoderRegistry

logger = structlog.get_logger()

PERMIT_TUPLE = "((address,uint160,uint48,uint48),address,uint256)"


def router_signature(name: str, permit2: bool, with_n_tokens: bool = False) -> str:
    """Router entry point signature.

    Args:
        name: Base function name (``singleSwap``, ``sequentialSwap``, ``splitSwap``)
        permit2: Use the Permit2 variant, which takes a permit and its
            signature instead of the ``transferFromNeeded`` flag
        with_n_tokens: Include the token count (split swaps)
    """
    args = ["uint256", "address", "address", "uint256", "bool", "bool"]
    if with_n_tokens:
        args.append("uint256")
    args.append("address")
    if permit2:
        args += [PERMIT_TUPLE, "bytes"]
    else:
        args.append("bool")
    args.append("bytes")
    suffix = "Permit2" if permit2 else ""
    return f"{name}{suffix}({','.join(args)})"


class StrategyEncoder(ABC):
    """Encodes an order's swaps for one router entry point.

    Attributes:
        action_types: Shapes this strategy handles
        function_name: Base name of the router function it targets
    """

    action_types: tuple[ActionType, ...] = ()
    function_name: str = ""
    with_n_tokens: bool = False

    def __init__(
        self,
        config: EncoderConfig,
        swap_encoders: SwapEncoderRegistry,
        permit2: Permit2 | None = None,
    ):
        self.config = config
        self.chain = config.chain
        self.capabilities = config.capabilities
        self.swap_encoders = swap_encoders
        self.permit2 = permit2

    @abstractmethod
    async def encode_strategy(
        self,
        order: Order,
        router_address: str,
        approvals: ApprovalResolver | None = None,
    ) -> EncodedSolution:
        """Encode an order's swaps.

        Args:
            order: The order to encode
            router_address: Router that executes the swaps
            approvals: Call-scoped approval resolver

        Returns:
            EncodedSolution with the swaps argument and router function
        """
        ...

    def uses_permit2(self, order: Order) -> bool:
        """Permit2 applies when a signer is configured and the input is an ERC-20."""
        return self.permit2 is not None and order.native_action != NativeAction.WRAP

    def function_signature(self, order: Order) -> str:
        return router_signature(self.function_name, self.uses_permit2(order), self.with_n_tokens)

    def transfer_optimization(self, order: Order, router_address: str) -> TransferOptimization:
        user_transfer_type = (
            UserTransferType.TRANSFER_FROM_PERMIT2
            if self.uses_permit2(order)
            else UserTransferType.TRANSFER_FROM
        )
        return TransferOptimization(
            self.chain, self.capabilities, user_transfer_type, router_address
        )

    async def encode_group(self, group: SwapGroup, context: EncodingContext) -> tuple[bytes, bytes]:
        """Encode every swap of a group with its protocol encoder.

        The group's first swap supplies the initial data; the data of the
        following swaps is appended prefix-length-encoded.

        Returns:
            (executor address bytes, protocol data)
        """
        encoder = self.swap_encoders.get(group.protocol_system)
        encoded = await run_concurrently(
            encoder.encode_swap(swap, context) for swap in group.swaps
        )

        initial, *chained = encoded
        if chained:
            initial += ple_encode(chained)

        return address_bytes(encoder.executor_address, "executor address"), initial

    def build_context(
        self,
        order: Order,
        group: SwapGroup,
        router_address: str,
        hop: HopTransfer,
        approvals: ApprovalResolver | None,
    ) -> EncodingContext:
        return EncodingContext(
            receiver=hop.receiver,
            exact_out=order.exact_out,
            router_address=router_address,
            transfer_type=hop.transfer_type,
            address_for_approvals=hop.address_for_approvals,
            group_token_in=group.token_in,
            group_token_out=group.token_out,
            approvals=approvals,
        )

    async def finish(
        self,
        order: Order,
        router_address: str,
        swaps: bytes,
        n_tokens: int = 0,
    ) -> EncodedSolution:
        """Wrap encoded swaps into an EncodedSolution, signing a permit if needed."""
        permit = None
        signature = None
        permit2 = self.permit2
        if permit2 is not None and self.uses_permit2(order):
            permit = await permit2.get_permit(
                router_address, order.sender, order.given_token, order.given_amount
            )
            signature = permit2.sign_permit(permit)

        logger.debug(
            "strategy_encoded",
            strategy=type(self).__name__,
            swap_count=len(order.swaps),
            encoded_size=len(swaps),
            permit2=permit is not None,
        )
        return EncodedSolution(
            swaps=swaps,
            interacting_with=router_address,
            function_signature=self.function_signature(order),
            n_tokens=n_tokens,
            permit=permit,
            signature=signature,
        )


__all__ = ["StrategyEncoder", "router_signature", "PERMIT_TUPLE"]
