"""Tests for swap-graph classification."""

import pytest

from encoder.errors import InvalidInputError
from encoder.models.context import ActionType
from encoder.strategies.classifier import classify, has_fork
from tests.helpers import DAI, USDC, WETH, make_order, make_swap
from tests.helpers.constants import (
    DAI_USDC_V2,
    USDC_DAI_V4,
    WETH_DAI_V2,
    WETH_USDC_SUSHI,
    WETH_USDC_V2,
    WETH_USDC_V4,
)

SEQUENTIAL = [make_swap(WETH, DAI, pool=WETH_DAI_V2), make_swap(DAI, USDC, pool=DAI_USDC_V2)]
FORK = [
    make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.5),
    make_swap(WETH, USDC, pool=WETH_USDC_SUSHI, protocol="sushiswap_v2"),
]
GROUPED_V4 = [
    make_swap(WETH, USDC, pool=WETH_USDC_V4, protocol="uniswap_v4"),
    make_swap(USDC, DAI, pool=USDC_DAI_V4, protocol="uniswap_v4"),
]


@pytest.mark.parametrize(
    ("swaps", "checked", "expected"),
    [
        ([make_swap()], USDC, ActionType.SINGLE_EXACT_IN),
        (GROUPED_V4, DAI, ActionType.SINGLE_EXACT_IN),
        (SEQUENTIAL, USDC, ActionType.SEQUENTIAL_EXACT_IN),
        (FORK, USDC, ActionType.SPLIT_IN),
    ],
)
def test_exact_in_shapes(ethereum_config, swaps, checked, expected):
    order = make_order(swaps, checked_token=checked)
    assert classify(order, ethereum_config.capabilities) == expected


def test_lone_split_swap_is_split(ethereum_config):
    """A non-zero split anywhere makes the order a split swap."""
    order = make_order([make_swap(split=0.5)])
    assert classify(order, ethereum_config.capabilities) == ActionType.SPLIT_IN


@pytest.mark.parametrize(
    ("swaps", "expected"),
    [([make_swap()], ActionType.SINGLE_EXACT_OUT), (SEQUENTIAL, ActionType.SEQUENTIAL_EXACT_OUT)],
)
def test_exact_out_shapes(ethereum_config, swaps, expected):
    order = make_order(swaps, exact_out=True)
    assert classify(order, ethereum_config.capabilities) == expected


def test_empty_order(ethereum_config):
    with pytest.raises(InvalidInputError, match="no swaps"):
        classify(make_order([]), ethereum_config.capabilities)


def test_has_fork():
    assert has_fork(make_order(FORK))
    assert not has_fork(make_order(SEQUENTIAL))
