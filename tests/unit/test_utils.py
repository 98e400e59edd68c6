"""Tests for byte-level encoding helpers."""

import asyncio

import pytest

from encoder.errors import (
    EncodingError,
    FatalEncodingError,
    InvalidInputError,
    NotImplementedEncodingError,
    RecoverableEncodingError,
)
from encoder.utils import (
    address_bytes,
    encode_input,
    function_selector,
    get_static_attribute,
    get_token_position,
    pad_or_truncate_to_size,
    percentage_to_uint24,
    ple_encode,
    run_concurrently,
    signature_arg_types,
)
from tests.conftest import run
from tests.helpers import DAI, USDC, WETH, make_swap


class TestPleEncode:
    def test_prefixes_each_chunk_with_length(self):
        assert ple_encode([b"\xaa", b"\xbb\xcc"]) == b"\x00\x01\xaa\x00\x02\xbb\xcc"

    def test_empty(self):
        assert ple_encode([]) == b""

    def test_empty_chunk(self):
        assert ple_encode([b""]) == b"\x00\x00"

    def test_chunk_too_long(self):
        with pytest.raises(FatalEncodingError):
            ple_encode([bytes(2**16)])


class TestPadOrTruncate:
    def test_left_pads_short_values(self):
        assert pad_or_truncate_to_size(b"\x0b\xb8", 3) == b"\x00\x0b\xb8"

    def test_exact_size_unchanged(self):
        assert pad_or_truncate_to_size(b"\x01\x02\x03", 3) == b"\x01\x02\x03"

    def test_strips_zero_surplus(self):
        assert pad_or_truncate_to_size(b"\x00\x00\x00\x3c", 3) == b"\x00\x00\x3c"

    def test_rejects_nonzero_surplus(self):
        with pytest.raises(FatalEncodingError, match="does not fit"):
            pad_or_truncate_to_size(b"\x01\x00\x00\x3c", 3)


class TestPercentageToUint24:
    def test_bounds(self):
        assert percentage_to_uint24(0.0) == 0
        assert percentage_to_uint24(1.0) == 2**24 - 1

    def test_half(self):
        assert percentage_to_uint24(0.5) == 8388608


class TestSelectors:
    def test_known_selector(self):
        """ERC-20 transfer selector."""
        assert function_selector("transfer(address,uint256)") == bytes.fromhex("a9059cbb")

    def test_encode_input_prefixes_selector(self):
        data = encode_input("approve(address,uint256)", ["address", "uint256"], [WETH, 1])
        assert data[:4] == bytes.fromhex("095ea7b3")
        assert len(data) == 4 + 64
        assert data[-1] == 1

    def test_signature_arg_types_flat(self):
        assert signature_arg_types("f(uint256,address,bool)") == ["uint256", "address", "bool"]

    def test_signature_arg_types_nested_tuple(self):
        sig = "f(uint256,((address,uint160,uint48,uint48),address,uint256),bytes)"
        assert signature_arg_types(sig) == [
            "uint256",
            "((address,uint160,uint48,uint48),address,uint256)",
            "bytes",
        ]

    def test_signature_arg_types_no_args(self):
        assert signature_arg_types("f()") == []


class TestAddressBytes:
    def test_returns_raw_bytes(self):
        assert address_bytes(WETH) == bytes.fromhex(WETH[2:])

    def test_invalid_address(self):
        with pytest.raises(InvalidInputError, match="receiver"):
            address_bytes("0x12", "receiver")


class TestRunConcurrently:
    def test_preserves_order(self):
        async def value(v: int, delay: float) -> int:
            await asyncio.sleep(delay)
            return v

        result = run(run_concurrently([value(1, 0.02), value(2, 0.0), value(3, 0.01)]))
        assert result == [1, 2, 3]

    def test_first_error_unwrapped(self):
        """The original error is raised, not an ExceptionGroup."""

        async def fail() -> int:
            raise RecoverableEncodingError("rpc down")

        async def ok() -> int:
            return 1

        with pytest.raises(RecoverableEncodingError, match="rpc down"):
            run(run_concurrently([ok(), fail()]))

    def test_failure_cancels_siblings(self):
        finished: list[str] = []

        async def slow() -> None:
            await asyncio.sleep(1)
            finished.append("slow")

        async def fail() -> None:
            raise InvalidInputError("bad")

        with pytest.raises(InvalidInputError):
            run(run_concurrently([slow(), fail()]))
        assert finished == []

    def test_empty(self):
        assert run(run_concurrently([])) == []


class TestLookups:
    def test_static_attribute(self):
        swap = make_swap(static_attributes={"fee": "0x01f4"})
        assert get_static_attribute(swap, "fee") == b"\x01\xf4"

    def test_missing_static_attribute(self):
        with pytest.raises(FatalEncodingError, match="Attribute fee not found"):
            get_static_attribute(make_swap(), "fee")

    def test_token_position(self):
        assert get_token_position([WETH, DAI, USDC], USDC) == 2

    def test_token_position_missing(self):
        with pytest.raises(InvalidInputError):
            get_token_position([WETH, USDC], DAI)


class TestErrors:
    @pytest.mark.parametrize(
        ("error_cls", "kind", "retryable"),
        [
            (InvalidInputError, "invalid_input", False),
            (FatalEncodingError, "fatal", False),
            (RecoverableEncodingError, "recoverable", True),
            (NotImplementedEncodingError, "not_implemented", False),
        ],
    )
    def test_kind_and_retryable(self, error_cls, kind, retryable):
        error = error_cls("boom")
        assert isinstance(error, EncodingError)
        assert error.kind == kind
        assert error.retryable is retryable
        assert error.message == "boom"
        assert str(error) == f"{kind}: boom"
