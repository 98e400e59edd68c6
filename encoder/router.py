"""Router encoder: turns solutions into ready-to-send router transactions.

This is the public entry point. Each order is classified, its swaps are
encoded by the matching strategy and the result is wrapped into a call to
the router's ``singleSwap``, ``sequentialSwap`` or ``splitSwap`` function
(or their Permit2 variants).
"""

from __future__ import annotations

import asyncio
from decimal import ROUND_FLOOR, Decimal
from typing import TYPE_CHECKING

import structlog

from encoder.approvals.allowance import CachedApprovalResolver
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.solution import NativeAction, Order, Solution, Transaction
from encoder.models.types import normalize_address
from encoder.utils import address_bytes, encode_input, run_concurrently, signature_arg_types

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.context import EncodedSolution
    from encoder.strategies.registry import StrategyRegistry

logger = structlog.get_logger()


def min_amount_out(check_amount: int, slippage: float | None) -> int:
    """Minimum output after slippage, rounded down.

    Raises:
        InvalidInputError: If slippage is outside [0, 1)
    """
    if slippage is None:
        return check_amount
    if not 0 <= slippage < 1:
        raise InvalidInputError(f"Slippage must be in [0, 1), got {slippage}")
    factor = Decimal(1) - Decimal(str(slippage))
    return int((Decimal(check_amount) * factor).to_integral_value(rounding=ROUND_FLOOR))


def router_call_args(order: Order, encoded: EncodedSolution) -> list[object]:
    """Arguments of the router call, in the order of its signature.

    Non-permit entry points take ``transferFromNeeded`` where the Permit2
    variants take the permit and its signature.
    """
    wrap = order.native_action == NativeAction.WRAP
    unwrap = order.native_action == NativeAction.UNWRAP

    args: list[object] = [
        order.given_amount,
        address_bytes(order.given_token, "given token"),
        address_bytes(order.checked_token, "checked token"),
        min_amount_out(order.check_amount, order.slippage),
        wrap,
        unwrap,
    ]
    if encoded.n_tokens:
        args.append(encoded.n_tokens)
    args.append(address_bytes(order.receiver, "receiver"))
    if encoded.permit is not None:
        args.append(encoded.permit.as_abi_tuple())
        args.append(encoded.signature or b"")
    else:
        args.append(not wrap)
    args.append(encoded.swaps)
    return args


class RouterEncoder:
    """Encodes solutions into router transactions for one chain.

    Usage:
        registry = StrategyRegistry.from_files("ethereum")
        encoder = RouterEncoder(registry)
        transactions = await encoder.encode_router_calldata([solution])
    """

    def __init__(self, registry: StrategyRegistry, router_address: str | None = None):
        """Create a router encoder.

        Args:
            registry: Strategies and swap encoders of the chain
            router_address: Router used when an order does not name one
                (defaults to the chain's configured router)
        """
        self.registry = registry
        self.chain = registry.chain
        self.router_address = router_address

    def resolve_router_address(self, order: Order) -> str:
        """Order override, else encoder override, else the chain default.

        Raises:
            FatalEncodingError: If no router address is known
        """
        address = order.router_address or self.router_address or self.registry.config.router_address
        if address is None:
            raise FatalEncodingError(f"Router address not set for chain {self.chain.value}")
        return normalize_address(address)

    async def encode_router_calldata(self, solutions: list[Solution]) -> list[list[Transaction]]:
        """Encode every order of every solution.

        The outer list is aligned with ``solutions`` and each inner list
        with that solution's orders. Orders are encoded concurrently and
        the first failure aborts the call.

        Raises:
            EncodingError: The first error raised while encoding an order
        """
        approvals = self._call_approvals()
        jobs = [(order, approvals) for solution in solutions for order in solution.orders]
        transactions = await run_concurrently(self.encode_order(*job) for job in jobs)

        result: list[list[Transaction]] = []
        position = 0
        for solution in solutions:
            count = len(solution.orders)
            result.append(transactions[position : position + count])
            position += count
        return result

    def encode_router_calldata_sync(self, solutions: list[Solution]) -> list[list[Transaction]]:
        """Blocking wrapper around :meth:`encode_router_calldata`."""
        return asyncio.run(self.encode_router_calldata(solutions))

    async def encode_order(
        self, order: Order, approvals: ApprovalResolver | None = None
    ) -> Transaction:
        """Encode one order into a transaction.

        Raises:
            FatalEncodingError: For exact-out orders or a missing router address
            InvalidInputError: For malformed swaps or slippage
        """
        if order.exact_out:
            raise FatalEncodingError("Currently only exact input solutions are supported")

        router_address = self.resolve_router_address(order)
        strategy = self.registry.get_encoder(order)
        encoded = await strategy.encode_strategy(order, router_address, approvals)

        value = order.given_amount if order.native_action == NativeAction.WRAP else 0
        if order.add_router_calldata:
            data = encode_input(
                encoded.function_signature,
                signature_arg_types(encoded.function_signature),
                router_call_args(order, encoded),
            )
        else:
            data = encoded.swaps

        logger.info(
            "order_encoded",
            chain=self.chain.value,
            function=encoded.function_signature.split("(", 1)[0],
            swap_count=len(order.swaps),
            calldata_size=len(data),
            value=value,
        )
        return Transaction(to=encoded.interacting_with, value=value, data=data)

    def _call_approvals(self) -> CachedApprovalResolver | None:
        if self.registry.approvals is None:
            return None
        return CachedApprovalResolver(self.registry.approvals)


__all__ = ["RouterEncoder", "min_amount_out", "router_call_args"]
