"""Single swap strategy: one group, one executor call."""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.errors import InvalidInputError
from encoder.models.context import ActionType, EncodedSolution
from encoder.models.solution import NativeAction
from encoder.strategies.base import StrategyEncoder
from encoder.strategies.grouping import group_swaps
from encoder.strategies.validators import validate_swap_path

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.solution import Order


class SingleSwapStrategy(StrategyEncoder):
    """Encodes orders whose swaps collapse into exactly one group.

    The swaps argument is ``executor(20) | protocol_data``.
    """

    action_types = (ActionType.SINGLE_EXACT_IN,)
    function_name = "singleSwap"

    async def encode_strategy(
        self,
        order: Order,
        router_address: str,
        approvals: ApprovalResolver | None = None,
    ) -> EncodedSolution:
        groups = group_swaps(order.swaps, self.capabilities)
        if len(groups) != 1:
            raise InvalidInputError(
                "Single strategy only supports exactly one swap for non-groupable "
                f"protocols. Found {len(groups)}"
            )
        group = groups[0]
        if group.split != 0.0:
            raise InvalidInputError("Splits not supported for single swaps")

        validate_swap_path(
            order.swaps, order.given_token, order.checked_token, order.native_action, self.chain
        )

        wrap = order.native_action == NativeAction.WRAP
        unwrap = order.native_action == NativeAction.UNWRAP
        (hop,) = self.transfer_optimization(order, router_address).plan_sequence(
            groups, order.given_token, order.receiver, wrap, unwrap
        )

        context = self.build_context(order, group, router_address, hop, approvals)
        executor, protocol_data = await self.encode_group(group, context)
        return await self.finish(order, router_address, executor + protocol_data)
