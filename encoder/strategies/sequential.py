"""Sequential swap strategy: a linear path of groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.models.context import ActionType, EncodedSolution
from encoder.models.solution import NativeAction
from encoder.strategies.base import StrategyEncoder
from encoder.strategies.grouping import group_swaps
from encoder.strategies.validators import validate_swap_path
from encoder.utils import ple_encode, run_concurrently

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.solution import Order


class SequentialSwapStrategy(StrategyEncoder):
    """Encodes a chain of groups, each paying the next one when allowed.

    The swaps argument is the prefix-length-encoded list of
    ``executor(20) | protocol_data`` hops.
    """

    action_types = (ActionType.SEQUENTIAL_EXACT_IN,)
    function_name = "sequentialSwap"

    async def encode_strategy(
        self,
        order: Order,
        router_address: str,
        approvals: ApprovalResolver | None = None,
    ) -> EncodedSolution:
        validate_swap_path(
            order.swaps, order.given_token, order.checked_token, order.native_action, self.chain
        )
        groups = group_swaps(order.swaps, self.capabilities)

        wrap = order.native_action == NativeAction.WRAP
        unwrap = order.native_action == NativeAction.UNWRAP
        hops = self.transfer_optimization(order, router_address).plan_sequence(
            groups, order.given_token, order.receiver, wrap, unwrap
        )

        contexts = [
            self.build_context(order, group, router_address, hop, approvals)
            for group, hop in zip(groups, hops, strict=True)
        ]
        encoded = await run_concurrently(
            self.encode_group(group, context) for group, context in zip(groups, contexts)
        )
        swaps = ple_encode(executor + protocol_data for executor, protocol_data in encoded)
        return await self.finish(order, router_address, swaps)
