"""Split swap strategy: forked paths over an indexed token table.

Tokens are referenced by their index in a table built from the order:
the input token first, the output token last and every intermediary
token in between, sorted. Each hop names its input and output index and
the fraction of the input token's balance it consumes; the last hop out
of a token consumes whatever is left (split 0).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from encoder.models.context import ActionType, EncodedSolution, EncodingContext, SwapGroup
from encoder.models.solution import NativeAction
from encoder.models.types import normalize_address
from encoder.strategies.base import StrategyEncoder
from encoder.strategies.grouping import group_swaps
from encoder.strategies.transfers import HopTransfer
from encoder.strategies.validators import (
    remainder_swaps,
    validate_split_percentages,
    validate_swap_path,
)
from encoder.utils import get_token_position, percentage_to_uint24, ple_encode, run_concurrently

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.solution import Order


def build_token_table(order: Order, groups: list[SwapGroup], wrapped_token: str) -> list[str]:
    """Token index table: [input, sorted intermediaries..., output]."""
    first = wrapped_token if order.native_action == NativeAction.WRAP else order.given_token
    last = wrapped_token if order.native_action == NativeAction.UNWRAP else order.checked_token
    intermediaries = {token for group in groups for token in (group.token_in, group.token_out)}
    intermediaries -= {first, last}
    return [first, *sorted(intermediaries), last]


class SplitSwapStrategy(StrategyEncoder):
    """Encodes forked swap graphs.

    Each hop is ``token_in_index(1) | token_out_index(1) | split(3) |
    executor(20) | protocol_data`` and the swaps argument is the
    prefix-length-encoded list of hops.
    """

    action_types = (ActionType.SPLIT_IN,)
    function_name = "splitSwap"
    with_n_tokens = True

    async def encode_strategy(
        self,
        order: Order,
        router_address: str,
        approvals: ApprovalResolver | None = None,
    ) -> EncodedSolution:
        validate_split_percentages(order.swaps)
        validate_swap_path(
            order.swaps, order.given_token, order.checked_token, order.native_action, self.chain
        )

        groups = group_swaps(order.swaps, self.capabilities)
        tokens = build_token_table(order, groups, self.chain.wrapped_token)
        remainders = {id(order.swaps[i]) for i in remainder_swaps(order.swaps)}

        wrap = order.native_action == NativeAction.WRAP
        unwrap = order.native_action == NativeAction.UNWRAP
        transfers = self.transfer_optimization(order, router_address)
        router = normalize_address(router_address)

        headers: list[bytes] = []
        contexts: list[EncodingContext] = []
        for group in groups:
            # Split hops never pay each other directly
            if not unwrap and group.token_out == order.checked_token:
                receiver = normalize_address(order.receiver)
            else:
                receiver = router
            hop = HopTransfer(
                transfer_type=transfers.get_transfer_type(group, order.given_token, wrap, False),
                receiver=receiver,
                address_for_approvals=router,
                pays_next_pool=False,
            )
            contexts.append(self.build_context(order, group, router_address, hop, approvals))

            split = 0 if id(group.swaps[0]) in remainders else percentage_to_uint24(group.split)
            headers.append(
                bytes(
                    [
                        get_token_position(tokens, group.token_in),
                        get_token_position(tokens, group.token_out),
                    ]
                )
                + split.to_bytes(3, "big")
            )

        encoded = await run_concurrently(
            self.encode_group(group, context) for group, context in zip(groups, contexts)
        )
        swaps = ple_encode(
            header + executor + protocol_data
            for header, (executor, protocol_data) in zip(headers, encoded, strict=True)
        )

        n_tokens = len(tokens) - 1 if order.given_token == order.checked_token else len(tokens)
        return await self.finish(order, router_address, swaps, n_tokens=n_tokens)


__all__ = ["SplitSwapStrategy", "build_token_table"]
