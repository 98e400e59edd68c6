"""Swap grouping.

Consecutive swaps on a flash-accounting protocol are merged into a single
executor call, so tokens move between their pools without touching the
router.
"""

from __future__ import annotations

from collections.abc import Sequence

from encoder.config import ProtocolCapabilities
from encoder.models.context import SwapGroup
from encoder.models.solution import Swap
from encoder.strategies.validators import outgoing_swaps


def _can_extend(
    group: SwapGroup,
    swap: Swap,
    capabilities: ProtocolCapabilities,
    forks: set[str],
) -> bool:
    return (
        swap.protocol_system == group.protocol_system
        and capabilities.is_groupable(swap.protocol_system)
        and swap.split == 0.0
        and swap.token_in == group.token_out
        and swap.token_in not in forks
    )


def group_swaps(swaps: Sequence[Swap], capabilities: ProtocolCapabilities) -> list[SwapGroup]:
    """Merge consecutive groupable swaps.

    A swap joins the current group when it uses the same groupable
    protocol, carries no split and continues the group's path, unless its
    input token feeds more than one swap: a fork's remainder hop stays its
    own group so it takes what is left of that token. Protocols
    unsupported for chained swaps are never groupable, so they always
    end up alone in their group.

    Args:
        swaps: Swaps of one order, in execution order
        capabilities: Protocol classification

    Returns:
        Groups in execution order
    """
    groups: list[SwapGroup] = []
    current: SwapGroup | None = None
    forks = {token for token, outs in outgoing_swaps(swaps).items() if len(outs) > 1}

    for swap in swaps:
        if current is not None and _can_extend(current, swap, capabilities, forks):
            current.swaps.append(swap)
            current.token_out = swap.token_out
            continue
        current = SwapGroup(
            protocol_system=swap.protocol_system,
            token_in=swap.token_in,
            token_out=swap.token_out,
            split=swap.split,
            swaps=[swap],
        )
        groups.append(current)

    return groups


__all__ = ["group_swaps"]
