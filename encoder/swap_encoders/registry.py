"""Protocol system -> swap encoder table.

The table is built once per chain from the executor-address config. A
protocol is encodable only if it has both an executor address on the
chain and an encoder class registered below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from encoder.config import rfq_api_key
from encoder.constants import DEFAULT_REQUEST_TIMEOUT
from encoder.errors import InvalidInputError
from encoder.swap_encoders.balancer_v2 import BalancerV2SwapEncoder
from encoder.swap_encoders.base import SwapEncoder
from encoder.swap_encoders.quotes import HttpQuoteProvider, IndicativelyPriced
from encoder.swap_encoders.rfq import RfqSwapEncoder
from encoder.swap_encoders.slipstreams import SlipstreamsSwapEncoder
from encoder.swap_encoders.uniswap_v2 import UniswapV2SwapEncoder
from encoder.swap_encoders.uniswap_v3 import UniswapV3SwapEncoder
from encoder.swap_encoders.uniswap_v4 import UniswapV4SwapEncoder

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.config import EncoderConfig

logger = structlog.get_logger()

RFQ_PREFIX = "rfq:"

ENCODER_CLASSES: dict[str, type[SwapEncoder]] = {
    "uniswap_v2": UniswapV2SwapEncoder,
    "sushiswap_v2": UniswapV2SwapEncoder,
    "pancakeswap_v2": UniswapV2SwapEncoder,
    "uniswap_v3": UniswapV3SwapEncoder,
    "pancakeswap_v3": UniswapV3SwapEncoder,
    "aerodrome_slipstreams": SlipstreamsSwapEncoder,
    "velodrome_slipstreams": SlipstreamsSwapEncoder,
    "uniswap_v4": UniswapV4SwapEncoder,
    "uniswap_v4_hooks": UniswapV4SwapEncoder,
    "vm:balancer_v2": BalancerV2SwapEncoder,
}


def encoder_class_for(protocol: str) -> type[SwapEncoder] | None:
    """Encoder class for a protocol system; every ``rfq:*`` maps to the RFQ encoder."""
    if protocol in ENCODER_CLASSES:
        return ENCODER_CLASSES[protocol]
    if protocol.startswith(RFQ_PREFIX):
        return RfqSwapEncoder
    return None


class SwapEncoderRegistry:
    """Registry of swap encoders for one chain.

    Usage:
        registry = SwapEncoderRegistry(config, approvals=resolver)
        encoder = registry.get("uniswap_v2")
        data = await encoder.encode_swap(swap, context)
    """

    def __init__(
        self,
        config: EncoderConfig,
        approvals: ApprovalResolver | None = None,
        quote_providers: dict[str, IndicativelyPriced] | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Build encoders for every configured executor.

        Args:
            config: Static configuration of the chain
            approvals: Fallback approval resolver handed to every encoder
            quote_providers: Signed-quote sources per RFQ protocol; protocols
                without one fall back to the ``quote_url`` in their config
            request_timeout: Timeout for default HTTP quote providers
        """
        self.chain = config.chain
        self._encoders: dict[str, SwapEncoder] = {}
        quote_providers = quote_providers or {}

        for protocol, executor in config.executors.items():
            encoder_cls = encoder_class_for(protocol)
            if encoder_cls is None:
                logger.warning("swap_encoder_not_found", protocol=protocol, chain=self.chain.value)
                continue
            protocol_config = config.protocol_config(protocol)
            quote_provider = quote_providers.get(protocol)
            if quote_provider is None and protocol.startswith(RFQ_PREFIX):
                quote_provider = self._http_quote_provider(
                    protocol, protocol_config, request_timeout
                )
            self._encoders[protocol] = encoder_cls(
                executor,
                config.chain,
                protocol_config,
                approvals=approvals,
                quote_provider=quote_provider,
            )

        logger.debug(
            "swap_encoders_built",
            chain=self.chain.value,
            protocols=sorted(self._encoders),
        )

    @staticmethod
    def _http_quote_provider(
        protocol: str, protocol_config: dict[str, str], timeout: float
    ) -> IndicativelyPriced | None:
        url = protocol_config.get("quote_url")
        if url is None:
            return None
        return HttpQuoteProvider(url, api_key=rfq_api_key(protocol), timeout=timeout)

    def register(self, protocol: str, encoder: SwapEncoder) -> None:
        """Add or replace the encoder of a protocol."""
        self._encoders[protocol] = encoder

    def get(self, protocol: str) -> SwapEncoder:
        """Encoder for a protocol system.

        Raises:
            InvalidInputError: If no encoder is registered for the protocol
        """
        encoder = self._encoders.get(protocol)
        if encoder is None:
            raise InvalidInputError(f"Swap encoder not found for protocol: {protocol}")
        return encoder

    def __contains__(self, protocol: object) -> bool:
        return protocol in self._encoders

    @property
    def protocols(self) -> list[str]:
        return sorted(self._encoders)


__all__ = ["SwapEncoderRegistry", "ENCODER_CLASSES", "encoder_class_for"]
