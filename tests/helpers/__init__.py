"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token, pool, executor and account addresses
- factories: Swap, order, context and encoder factory functions
- decoding: Helpers to take encoded output apart in assertions
"""

from tests.helpers.constants import (
    DAI,
    NATIVE,
    RECEIVER,
    ROUTER,
    SENDER,
    USDC,
    USDT,
    WBTC,
    WETH,
)
from tests.helpers.decoding import decode_call, ple_decode, raw
from tests.helpers.factories import (
    make_context,
    make_order,
    make_registry,
    make_router_encoder,
    make_swap,
    solution_payload,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USDT",
    "WBTC",
    "NATIVE",
    "ROUTER",
    "SENDER",
    "RECEIVER",
    # Factories
    "make_swap",
    "make_order",
    "make_context",
    "make_registry",
    "make_router_encoder",
    "solution_payload",
    # Decoding
    "raw",
    "ple_decode",
    "decode_call",
]
