"""Tests for the UniswapV2, UniswapV3 and Slipstreams swap encoders.

Expected layouts are spelled out byte by byte.
"""

import pytest

from encoder.config import Chain
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.context import TransferType
from encoder.swap_encoders import (
    SlipstreamsSwapEncoder,
    UniswapV2SwapEncoder,
    UniswapV3SwapEncoder,
)
from tests.conftest import run
from tests.helpers import RECEIVER, USDC, WETH, make_context, make_swap
from tests.helpers.constants import (
    UNISWAP_V2_EXECUTOR,
    UNISWAP_V3_EXECUTOR,
    WETH_USDC_V2,
    WETH_USDC_V3,
)


def raw(address: str) -> bytes:
    return bytes.fromhex(address[2:])


class TestUniswapV2:
    @pytest.fixture
    def encoder(self) -> UniswapV2SwapEncoder:
        return UniswapV2SwapEncoder(UNISWAP_V2_EXECUTOR, Chain.ETHEREUM)

    def test_layout(self, encoder):
        """token_in | pool | receiver | zero_to_one | transfer_type."""
        swap = make_swap(WETH, USDC, pool=WETH_USDC_V2)
        data = run(encoder.encode_swap(swap, make_context()))

        # WETH (0xc0...) sorts after USDC (0xa0...)
        assert data == raw(WETH) + raw(WETH_USDC_V2) + raw(RECEIVER) + b"\x00" + b"\x00"
        assert len(data) == 62

    def test_zero_to_one_and_transfer_type(self, encoder):
        swap = make_swap(USDC, WETH, pool=WETH_USDC_V2)
        context = make_context(transfer_type=TransferType.TRANSFER)
        data = run(encoder.encode_swap(swap, context))
        assert data[60] == 1
        assert data[61] == TransferType.TRANSFER

    def test_pool_must_be_address(self, encoder):
        swap = make_swap(pool="0x" + "ab" * 32)
        with pytest.raises(InvalidInputError, match="pool id for uniswap_v2"):
            run(encoder.encode_swap(swap, make_context()))

    def test_invalid_executor_address(self):
        with pytest.raises(FatalEncodingError, match="Invalid executor address"):
            UniswapV2SwapEncoder("0x1234", Chain.ETHEREUM)

    def test_clone_shares_config(self, encoder):
        clone = encoder.clone()
        assert clone is not encoder
        assert clone.executor_address == encoder.executor_address


class TestUniswapV3:
    @pytest.fixture
    def encoder(self) -> UniswapV3SwapEncoder:
        return UniswapV3SwapEncoder(UNISWAP_V3_EXECUTOR, Chain.ETHEREUM)

    def test_layout(self, encoder):
        """token_in | token_out | fee | receiver | pool | zero_to_one | transfer_type."""
        swap = make_swap(
            WETH,
            USDC,
            pool=WETH_USDC_V3,
            protocol="uniswap_v3",
            static_attributes={"fee": "0x01f4"},
        )
        data = run(encoder.encode_swap(swap, make_context(transfer_type=TransferType.NONE)))
        assert data == (
            raw(WETH)
            + raw(USDC)
            + b"\x00\x01\xf4"
            + raw(RECEIVER)
            + raw(WETH_USDC_V3)
            + b"\x00"
            + bytes([TransferType.NONE])
        )

    def test_missing_fee(self, encoder):
        swap = make_swap(WETH, USDC, pool=WETH_USDC_V3, protocol="uniswap_v3")
        with pytest.raises(FatalEncodingError, match="Attribute fee not found"):
            run(encoder.encode_swap(swap, make_context()))


class TestSlipstreams:
    @pytest.fixture
    def encoder(self) -> SlipstreamsSwapEncoder:
        return SlipstreamsSwapEncoder(UNISWAP_V3_EXECUTOR, Chain.BASE)

    def make_slipstreams_swap(self, token_in: str, token_out: str, tick_spacing: str):
        return make_swap(
            token_in,
            token_out,
            pool=WETH_USDC_V3,
            protocol="aerodrome_slipstreams",
            static_attributes={"tick_spacing": tick_spacing},
        )

    def test_layout(self, encoder):
        """token_in | token_out | tick_spacing | transfer_type | receiver | pool | zero_to_one."""
        swap = self.make_slipstreams_swap(WETH, USDC, "0x64")
        data = run(encoder.encode_swap(swap, make_context(transfer_type=TransferType.TRANSFER)))
        assert data == (
            raw(WETH)
            + raw(USDC)
            + b"\x00\x00\x64"
            + bytes([TransferType.TRANSFER])
            + raw(RECEIVER)
            + raw(WETH_USDC_V3)
            + b"\x00"
        )

    @pytest.mark.parametrize(
        ("token_in", "token_out", "expected"),
        [(USDC, WETH, 1), (WETH, USDC, 0)],
    )
    def test_zero_to_one(self, encoder, token_in, token_out, expected):
        swap = self.make_slipstreams_swap(token_in, token_out, "0x01")
        data = run(encoder.encode_swap(swap, make_context()))
        assert data[-1] == expected

    def test_oversized_tick_spacing_with_zero_surplus(self, encoder):
        swap = self.make_slipstreams_swap(WETH, USDC, "0x00000032")
        data = run(encoder.encode_swap(swap, make_context()))
        assert data[40:43] == b"\x00\x00\x32"

    def test_tick_spacing_too_large(self, encoder):
        swap = self.make_slipstreams_swap(WETH, USDC, "0x01000032")
        with pytest.raises(FatalEncodingError, match="does not fit"):
            run(encoder.encode_swap(swap, make_context()))
