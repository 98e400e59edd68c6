"""Transfer optimization: how tokens reach each pool and where outputs go.

Every hop either receives its input from the router (pulled from the
user on the first hop, pushed from the router's balance later) or is paid
directly by the previous pool, which saves one token transfer.
"""

from __future__ import annotations

from dataclasses import dataclass

from encoder.config import Chain, ProtocolCapabilities
from encoder.models.context import SwapGroup, TransferType, UserTransferType
from encoder.models.types import is_valid_address, normalize_address


@dataclass(frozen=True)
class HopTransfer:
    """Transfer decisions for one group.

    Attributes:
        transfer_type: How the group's input reaches its pool
        receiver: Where the group's output is sent
        address_for_approvals: Address holding the input when the group swaps
        pays_next_pool: Whether the receiver is the next group's pool
    """

    transfer_type: TransferType
    receiver: str
    address_for_approvals: str
    pays_next_pool: bool


class TransferOptimization:
    """Decides transfer types and receivers for the groups of one order."""

    def __init__(
        self,
        chain: Chain,
        capabilities: ProtocolCapabilities,
        user_transfer_type: UserTransferType,
        router_address: str,
    ):
        self.native_token = chain.native_token
        self.wrapped_token = chain.wrapped_token
        self.capabilities = capabilities
        self.user_transfer_type = user_transfer_type
        self.router_address = normalize_address(router_address)

    def get_transfer_type(
        self,
        group: SwapGroup,
        given_token: str,
        wrap: bool,
        paid_by_previous: bool,
    ) -> TransferType:
        """Transfer type for a group's input.

        Args:
            group: The group being encoded
            given_token: The order's input token
            wrap: Whether the router wraps the native token first
            paid_by_previous: Whether the previous pool sent its output here
        """
        needs_in_transfer = self.capabilities.needs_in_transfer(group.protocol_system)
        user_pays = self.user_transfer_type != UserTransferType.NONE

        if group.token_in == self.native_token:
            # Executors handle native transfers themselves
            return TransferType.NONE
        if wrap and group.token_in == self.wrapped_token:
            return TransferType.TRANSFER
        if group.token_in == given_token:
            if needs_in_transfer:
                return TransferType.TRANSFER_FROM if user_pays else TransferType.TRANSFER
            # The pool pulls from the router; only move the user's funds there
            return TransferType.TRANSFER_FROM if user_pays else TransferType.NONE
        if not needs_in_transfer or paid_by_previous:
            return TransferType.NONE
        return TransferType.TRANSFER

    def get_receiver(
        self,
        group: SwapGroup,
        next_group: SwapGroup | None,
        order_receiver: str,
        unwrap: bool,
    ) -> tuple[str, bool]:
        """Receiver of a group's output.

        Returns:
            (receiver, pays_next_pool)
        """
        if next_group is None:
            if unwrap:
                return self.router_address, False
            return normalize_address(order_receiver), False

        if self.capabilities.allows_direct_transfer(
            group.protocol_system, next_group.protocol_system
        ) and is_valid_address(next_group.pool_id):
            return normalize_address(next_group.pool_id), True
        return self.router_address, False

    def address_for_approvals(self, group: SwapGroup, paid_by_previous: bool) -> str:
        if paid_by_previous and is_valid_address(group.pool_id):
            return normalize_address(group.pool_id)
        return self.router_address

    def plan_sequence(
        self,
        groups: list[SwapGroup],
        given_token: str,
        order_receiver: str,
        wrap: bool,
        unwrap: bool,
    ) -> list[HopTransfer]:
        """Transfer decisions for a linear path of groups."""
        hops: list[HopTransfer] = []
        paid_by_previous = False
        for i, group in enumerate(groups):
            next_group = groups[i + 1] if i + 1 < len(groups) else None
            receiver, pays_next = self.get_receiver(group, next_group, order_receiver, unwrap)
            transfer_type = self.get_transfer_type(group, given_token, wrap, paid_by_previous)
            hops.append(
                HopTransfer(
                    transfer_type=transfer_type,
                    receiver=receiver,
                    address_for_approvals=self.address_for_approvals(group, paid_by_previous),
                    pays_next_pool=pays_next,
                )
            )
            paid_by_previous = pays_next
        return hops


__all__ = ["HopTransfer", "TransferOptimization"]
