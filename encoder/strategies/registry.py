"""Per-chain registry of strategy encoders.

The registry owns the protocol -> swap encoder table and one strategy per
supported action type. ``get_encoder`` classifies an order and returns
the strategy for its shape, which keeps dispatch out of the router.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from encoder.approvals.permit2 import Permit2
from encoder.chain import ChainReader, Web3ChainReader
from encoder.config import Chain, EncoderConfig, EncoderSettings, load_encoder_config
from encoder.errors import FatalEncodingError, InvalidInputError, NotImplementedEncodingError
from encoder.models.context import ActionType
from encoder.strategies.base import StrategyEncoder
from encoder.strategies.classifier import classify
from encoder.strategies.sequential import SequentialSwapStrategy
from encoder.strategies.single import SingleSwapStrategy
from encoder.strategies.split import SplitSwapStrategy
from encoder.strategies.validators import validate_order
from encoder.swap_encoders.registry import SwapEncoderRegistry

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.solution import Order
    from encoder.swap_encoders.quotes import IndicativelyPriced

logger = structlog.get_logger()

STRATEGY_CLASSES: tuple[type[StrategyEncoder], ...] = (
    SingleSwapStrategy,
    SequentialSwapStrategy,
    SplitSwapStrategy,
)

EXACT_OUT_ACTIONS = frozenset({ActionType.SINGLE_EXACT_OUT, ActionType.SEQUENTIAL_EXACT_OUT})


class StrategyRegistry:
    """Strategies and swap encoders for one chain.

    Usage:
        registry = StrategyRegistry.from_files(Chain.ETHEREUM)
        strategy = registry.get_encoder(order)
        encoded = await strategy.encode_strategy(order, router_address, approvals)
    """

    def __init__(
        self,
        chain: Chain,
        config: EncoderConfig,
        approvals: ApprovalResolver | None = None,
        signer: Permit2 | None = None,
        quote_providers: dict[str, IndicativelyPriced] | None = None,
        request_timeout: float | None = None,
    ):
        """Build encoders for a chain.

        Args:
            chain: Target chain (must match the config)
            config: Static configuration of the chain
            approvals: Shared approval resolver (allowance source)
            signer: Permit2 signer; when set, strategies use Permit2 entry points
            quote_providers: Signed-quote sources per RFQ protocol
            request_timeout: Timeout for default HTTP quote providers
        """
        if config.chain != chain:
            raise FatalEncodingError(
                f"Config for {config.chain.value} cannot be used on {chain.value}"
            )
        self.chain = chain
        self.config = config
        self.approvals = approvals
        self.permit2 = signer
        registry_kwargs = {} if request_timeout is None else {"request_timeout": request_timeout}
        self.swap_encoders = SwapEncoderRegistry(
            config, approvals=approvals, quote_providers=quote_providers, **registry_kwargs
        )

        self._strategies: dict[ActionType, StrategyEncoder] = {}
        for strategy_cls in STRATEGY_CLASSES:
            strategy = strategy_cls(config, self.swap_encoders, permit2=signer)
            for action_type in strategy_cls.action_types:
                self._strategies[action_type] = strategy

    @classmethod
    def from_files(
        cls,
        chain: Chain | str,
        executors_path: str | Path | None = None,
        signer_key: str | None = None,
        settings: EncoderSettings | None = None,
        quote_providers: dict[str, IndicativelyPriced] | None = None,
    ) -> StrategyRegistry:
        """Build a registry from the bundled (or given) configuration tables.

        Args:
            chain: Target chain
            executors_path: Optional executor-address table
            signer_key: Swapper private key enabling Permit2
            settings: Runtime settings (defaults to the environment)
            quote_providers: Signed-quote sources per RFQ protocol
        """
        from encoder.approvals.allowance import RpcApprovalResolver

        settings = settings or EncoderSettings.from_env()
        config = load_encoder_config(chain, executors_path=executors_path)

        reader: ChainReader | None = None
        approvals = None
        if settings.rpc_url:
            reader = Web3ChainReader(settings.rpc_url, timeout=settings.request_timeout)
            approvals = RpcApprovalResolver(reader)
        else:
            logger.warning(
                "rpc_url_not_set",
                chain=config.chain.value,
                message="Approval checks are skipped and approvals are always requested",
            )

        signer = Permit2(config.chain, signer_key, reader=reader) if signer_key else None
        return cls(
            config.chain,
            config,
            approvals=approvals,
            signer=signer,
            quote_providers=quote_providers,
            request_timeout=settings.request_timeout,
        )

    def check_protocols(self, order: Order) -> None:
        """Fail early when a swap's protocol has no encoder.

        Raises:
            InvalidInputError: Naming the first unknown protocol
        """
        for swap in order.swaps:
            if swap.protocol_system not in self.swap_encoders:
                logger.warning(
                    "swap_encoder_not_found",
                    protocol=swap.protocol_system,
                    chain=self.chain.value,
                )
                raise InvalidInputError(
                    f"Swap encoder not found for protocol: {swap.protocol_system}"
                )

    def get_encoder(self, order: Order) -> StrategyEncoder:
        """Strategy for an order's shape.

        Raises:
            InvalidInputError: If a protocol is unknown or the swap graph is malformed
            NotImplementedEncodingError: For exact-out shapes
            FatalEncodingError: On a native-action mismatch or an unhandled shape
        """
        self.check_protocols(order)
        validate_order(order, self.chain)
        action_type = classify(order, self.config.capabilities)
        if action_type in EXACT_OUT_ACTIONS:
            raise NotImplementedEncodingError(f"{action_type.value} strategies are not implemented")
        strategy = self._strategies.get(action_type)
        if strategy is None:
            raise FatalEncodingError(f"Unsupported solution shape: {action_type.value}")
        logger.debug(
            "strategy_selected",
            action_type=action_type.value,
            strategy=type(strategy).__name__,
        )
        return strategy

    @property
    def action_types(self) -> list[ActionType]:
        return list(self._strategies)


__all__ = ["StrategyRegistry", "STRATEGY_CLASSES"]
