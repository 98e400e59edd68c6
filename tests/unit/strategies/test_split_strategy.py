"""Tests for the split swap strategy."""

import pytest

from encoder.errors import InvalidInputError
from encoder.models.context import TransferType
from encoder.strategies import SplitSwapStrategy
from encoder.strategies.grouping import group_swaps
from encoder.strategies.split import build_token_table
from encoder.utils import percentage_to_uint24
from tests.conftest import run
from tests.helpers import (
    DAI,
    RECEIVER,
    ROUTER,
    USDC,
    WETH,
    make_order,
    make_registry,
    make_swap,
    ple_decode,
    raw,
)
from tests.helpers.constants import (
    DAI_USDC_V2,
    UNISWAP_V2_EXECUTOR,
    USDC_DAI_V4,
    WETH_DAI_V2,
    WETH_USDC_SUSHI,
    WETH_USDC_V2,
    WETH_USDC_V4,
)

SPLIT_SIGNATURE = (
    "splitSwap(uint256,address,address,uint256,bool,bool,uint256,address,bool,bytes)"
)


def header(token_in_index: int, token_out_index: int, split: int) -> bytes:
    return bytes([token_in_index, token_out_index]) + split.to_bytes(3, "big")


@pytest.fixture
def forked_order():
    """Half of the WETH goes straight to USDC, the rest through DAI."""
    return make_order(
        [
            make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.5),
            make_swap(WETH, DAI, pool=WETH_DAI_V2),
            make_swap(DAI, USDC, pool=DAI_USDC_V2),
        ]
    )


def test_token_table(forked_order, ethereum_config):
    groups = group_swaps(forked_order.swaps, ethereum_config.capabilities)
    assert build_token_table(forked_order, groups, WETH) == [WETH, DAI, USDC]


def test_forked_path(forked_order):
    strategy = make_registry().get_encoder(forked_order)
    assert isinstance(strategy, SplitSwapStrategy)

    encoded = run(strategy.encode_strategy(forked_order, ROUTER))

    direct, to_dai, from_dai = ple_decode(encoded.swaps)
    executor = raw(UNISWAP_V2_EXECUTOR)
    assert direct == (
        header(0, 2, percentage_to_uint24(0.5))
        + executor
        + raw(WETH)
        + raw(WETH_USDC_V2)
        + raw(RECEIVER)
        + b"\x00"
        + bytes([TransferType.TRANSFER_FROM])
    )
    assert to_dai == (
        header(0, 1, 0)
        + executor
        + raw(WETH)
        + raw(WETH_DAI_V2)
        + raw(ROUTER)
        + b"\x00"
        + bytes([TransferType.TRANSFER_FROM])
    )
    assert from_dai == (
        header(1, 2, 0)
        + executor
        + raw(DAI)
        + raw(DAI_USDC_V2)
        + raw(RECEIVER)
        + b"\x01"
        + bytes([TransferType.TRANSFER])
    )
    assert encoded.n_tokens == 3
    assert encoded.function_signature == SPLIT_SIGNATURE


def test_explicit_last_split_is_encoded_as_remainder():
    order = make_order(
        [
            make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.4),
            make_swap(WETH, USDC, pool=WETH_USDC_SUSHI, protocol="sushiswap_v2", split=0.6),
        ]
    )
    encoded = run(make_registry().get_encoder(order).encode_strategy(order, ROUTER))

    first, second = ple_decode(encoded.swaps)
    assert first[:5] == header(0, 1, percentage_to_uint24(0.4))
    assert second[:5] == header(0, 1, 0)
    assert encoded.n_tokens == 2


def test_cyclic_split_counts_shared_token_once():
    order = make_order(
        [
            make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.5),
            make_swap(WETH, USDC, pool=WETH_USDC_SUSHI, protocol="sushiswap_v2"),
            make_swap(USDC, WETH, pool="0x" + "11" * 20),
        ],
        checked_token=WETH,
        check_amount=10**18,
    )
    encoded = run(make_registry().get_encoder(order).encode_strategy(order, ROUTER))

    *_, back = ple_decode(encoded.swaps)
    assert encoded.n_tokens == 2
    assert back[:5] == header(1, 0, 0)


def test_invalid_splits():
    order = make_order(
        [
            make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.5),
            make_swap(WETH, USDC, pool=WETH_USDC_SUSHI, protocol="sushiswap_v2", split=0.6),
        ]
    )
    strategy = make_registry().get_encoder(order)
    with pytest.raises(InvalidInputError, match="must sum to 1"):
        run(strategy.encode_strategy(order, ROUTER))


def test_every_forked_token_keeps_a_remainder_hop():
    """Groupable swaps out of a forked token are encoded as separate remainder hops."""
    v4_attributes = {"key_lp_fee": "0x0bb8", "tick_spacing": "0x3c"}
    order = make_order(
        [
            make_swap(WETH, USDC, pool=WETH_USDC_V2, split=0.5),
            make_swap(USDC, DAI, pool=DAI_USDC_V2, split=0.5),
            make_swap(
                WETH,
                USDC,
                pool=WETH_USDC_V4,
                protocol="uniswap_v4",
                static_attributes=v4_attributes,
            ),
            make_swap(
                USDC,
                DAI,
                pool=USDC_DAI_V4,
                protocol="uniswap_v4",
                static_attributes=v4_attributes,
            ),
        ],
        checked_token=DAI,
    )
    encoded = run(make_registry().get_encoder(order).encode_strategy(order, ROUTER))

    headers = [hop[:5] for hop in ple_decode(encoded.swaps)]
    half = percentage_to_uint24(0.5)
    assert headers == [header(0, 1, half), header(1, 2, half), header(0, 1, 0), header(1, 2, 0)]
    assert encoded.n_tokens == 3
