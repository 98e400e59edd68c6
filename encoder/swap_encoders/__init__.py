"""Protocol swap encoders."""

from encoder.swap_encoders.balancer_v2 import BalancerV2SwapEncoder
from encoder.swap_encoders.base import SwapEncoder
from encoder.swap_encoders.quotes import (
    HttpQuoteProvider,
    IndicativelyPriced,
    MockQuoteProvider,
    QuoteRequest,
    SignedQuote,
)
from encoder.swap_encoders.registry import ENCODER_CLASSES, SwapEncoderRegistry
from encoder.swap_encoders.rfq import RfqSwapEncoder
from encoder.swap_encoders.slipstreams import SlipstreamsSwapEncoder
from encoder.swap_encoders.uniswap_v2 import UniswapV2SwapEncoder
from encoder.swap_encoders.uniswap_v3 import UniswapV3SwapEncoder
from encoder.swap_encoders.uniswap_v4 import UniswapV4SwapEncoder

__all__ = [
    "SwapEncoder",
    "SwapEncoderRegistry",
    "ENCODER_CLASSES",
    # Encoders
    "UniswapV2SwapEncoder",
    "UniswapV3SwapEncoder",
    "SlipstreamsSwapEncoder",
    "UniswapV4SwapEncoder",
    "BalancerV2SwapEncoder",
    "RfqSwapEncoder",
    # Quotes
    "IndicativelyPriced",
    "QuoteRequest",
    "SignedQuote",
    "HttpQuoteProvider",
    "MockQuoteProvider",
]
