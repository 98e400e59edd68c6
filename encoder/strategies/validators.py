"""Structural checks on an order's swap graph, run before any encoder."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Sequence

from encoder.config import Chain
from encoder.constants import SPLIT_TOLERANCE
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.solution import NativeAction, Order, Swap


def outgoing_swaps(swaps: Sequence[Swap]) -> dict[str, list[Swap]]:
    """Swaps leaving each token, in input order."""
    outgoing: dict[str, list[Swap]] = {}
    for swap in swaps:
        outgoing.setdefault(swap.token_in, []).append(swap)
    return outgoing


def remainder_swaps(swaps: Sequence[Swap]) -> set[int]:
    """Indices of the last outgoing swap of every token.

    These take whatever is left of their token and are always encoded
    with split 0.
    """
    last: dict[str, int] = {}
    for i, swap in enumerate(swaps):
        last[swap.token_in] = i
    return set(last.values())


def validate_split_percentages(swaps: Sequence[Swap]) -> None:
    """Check split fractions of every fork.

    Every outgoing swap of a fork except the last must carry a fraction in
    (0, 1). The last one is either 0 (the remainder), in which case the
    others must leave something over, or explicit, in which case all of
    them must sum to 1.

    Raises:
        InvalidInputError: If any fork's fractions are inconsistent
    """
    for token, outs in outgoing_swaps(swaps).items():
        for swap in outs:
            if math.isnan(swap.split) or not 0.0 <= swap.split <= 1.0:
                raise InvalidInputError(
                    f"Split {swap.split} out of range for swap from {token} "
                    f"through {swap.component.id}"
                )

        if len(outs) == 1:
            if outs[0].split != 0.0:
                raise InvalidInputError(
                    f"Single swap from {token} must have split 0, got {outs[0].split}"
                )
            continue

        explicit = outs[:-1]
        for swap in explicit:
            if swap.split == 0.0 or swap.split >= 1.0:
                raise InvalidInputError(
                    f"Only the last swap from {token} may be a remainder; "
                    f"swap through {swap.component.id} has split {swap.split}"
                )
        total = sum(swap.split for swap in explicit)
        last = outs[-1].split

        if last == 0.0:
            if total >= 1.0 - SPLIT_TOLERANCE:
                raise InvalidInputError(
                    f"Splits from {token} sum to {total} and leave no remainder"
                )
        elif abs(total + last - 1.0) > SPLIT_TOLERANCE:
            raise InvalidInputError(f"Splits from {token} must sum to 1, got {total + last}")


def validate_swap_path(
    swaps: Sequence[Swap],
    given_token: str,
    checked_token: str,
    native_action: NativeAction | None,
    chain: Chain,
) -> None:
    """Check that the swaps form a connected path from the input to the output token.

    When wrapping, the path starts at the wrapped token; when unwrapping, it
    ends there.

    Raises:
        InvalidInputError: If a token is unreachable or a branch dead-ends
    """
    start = chain.wrapped_token if native_action == NativeAction.WRAP else given_token
    end = chain.wrapped_token if native_action == NativeAction.UNWRAP else checked_token

    graph: dict[str, set[str]] = {}
    for swap in swaps:
        graph.setdefault(swap.token_in, set()).add(swap.token_out)

    if start not in graph:
        raise InvalidInputError(f"No swap starts from the input token {start}")

    reachable = {start}
    queue = deque([start])
    while queue:
        token = queue.popleft()
        for nxt in graph.get(token, ()):
            if nxt not in reachable:
                reachable.add(nxt)
                queue.append(nxt)

    for token in graph:
        if token not in reachable:
            raise InvalidInputError(f"Token {token} is not reachable from {start}")
    if end not in reachable:
        raise InvalidInputError(f"Output token {end} is not reachable from {start}")
    for token in reachable:
        if token != end and token not in graph:
            raise InvalidInputError(f"Path dead-ends at token {token}")


def validate_native_action(order: Order, chain: Chain) -> None:
    """Check wrap/unwrap consistency with the order's tokens.

    Raises:
        FatalEncodingError: If the native action does not match the tokens
    """
    if order.native_action == NativeAction.WRAP:
        if order.given_token != chain.native_token:
            raise FatalEncodingError("Native token must be the input token in order to wrap")
        if order.swaps and order.swaps[0].token_in != chain.wrapped_token:
            raise FatalEncodingError(
                "Wrapped token must be the first swap's input in order to wrap"
            )
    elif order.native_action == NativeAction.UNWRAP:
        if order.checked_token != chain.native_token:
            raise FatalEncodingError("Native token must be the output token in order to unwrap")
        if order.swaps and order.swaps[-1].token_out != chain.wrapped_token:
            raise FatalEncodingError(
                "Wrapped token must be the last swap's output in order to unwrap"
            )


def validate_cyclic_swaps(order: Order) -> None:
    """A token may repeat only as both the first and the last token.

    Raises:
        InvalidInputError: If a token repeats anywhere else
        FatalEncodingError: If a cyclic order also wraps or unwraps
    """
    swaps = order.swaps
    tokens: list[str] = []
    split_tokens: set[str] = set()
    for swap in swaps:
        if swap.token_in not in split_tokens:
            tokens.append(swap.token_in)
            if swap.split != 0.0:
                split_tokens.add(swap.token_in)
    tokens.append(swaps[-1].token_out)

    if len(tokens) == len(set(tokens)):
        return
    if swaps[0].token_in != swaps[-1].token_out:
        raise InvalidInputError(
            "Cyclical swaps are only allowed if they are the first and last token of an order"
        )
    if order.native_action is not None:
        raise FatalEncodingError("Wrapping/Unwrapping is not available in cyclical swaps")


def validate_order(order: Order, chain: Chain) -> None:
    """Checks shared by every strategy."""
    if not order.swaps:
        raise InvalidInputError("Order has no swaps")
    validate_native_action(order, chain)
    validate_cyclic_swaps(order)


__all__ = [
    "outgoing_swaps",
    "remainder_swaps",
    "validate_split_percentages",
    "validate_swap_path",
    "validate_native_action",
    "validate_cyclic_swaps",
    "validate_order",
]
