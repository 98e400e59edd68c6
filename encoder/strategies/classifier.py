"""Classification of an order's swap graph into an action type."""

from __future__ import annotations

from encoder.config import ProtocolCapabilities
from encoder.errors import InvalidInputError
from encoder.models.context import ActionType
from encoder.models.solution import Order
from encoder.strategies.grouping import group_swaps
from encoder.strategies.validators import outgoing_swaps


def has_fork(order: Order) -> bool:
    """Whether any token feeds more than one swap, or any swap carries a split."""
    if any(swap.split != 0.0 for swap in order.swaps):
        return True
    return any(len(outs) > 1 for outs in outgoing_swaps(order.swaps).values())


def classify(order: Order, capabilities: ProtocolCapabilities) -> ActionType:
    """Classify an order's swap graph.

    Exact-out orders map to the exact-out variants; otherwise a fork makes
    the order a split swap, a single group after grouping makes it a single
    swap, and anything else is sequential.

    Raises:
        InvalidInputError: If the order has no swaps
    """
    if not order.swaps:
        raise InvalidInputError("Order has no swaps")

    if not order.exact_out and has_fork(order):
        return ActionType.SPLIT_IN

    single = len(group_swaps(order.swaps, capabilities)) == 1
    if order.exact_out:
        return ActionType.SINGLE_EXACT_OUT if single else ActionType.SEQUENTIAL_EXACT_OUT
    return ActionType.SINGLE_EXACT_IN if single else ActionType.SEQUENTIAL_EXACT_IN


__all__ = ["classify", "has_fork"]
