"""Byte-level helpers shared by the swap and strategy encoders."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from eth_abi import encode
from eth_utils import keccak

from encoder.constants import SPLIT_SCALE
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.types import address_to_bytes, is_valid_address

if TYPE_CHECKING:
    from encoder.models.solution import Swap

T = TypeVar("T")

# Prefix-length-encoded chunks carry a uint16 length
MAX_PLE_CHUNK = 2**16 - 1


def address_bytes(address: str, field: str = "address") -> bytes:
    """Return the 20 raw bytes of an address.

    Raises:
        InvalidInputError: If the value is not a valid address
    """
    if not is_valid_address(address):
        raise InvalidInputError(f"Invalid {field}: {address}")
    return address_to_bytes(address)


def pad_or_truncate_to_size(data: bytes, size: int) -> bytes:
    """Re-encode a big-endian value to exactly ``size`` bytes.

    Shorter inputs are left-padded with zeros. Longer inputs are accepted
    only when the surplus leading bytes are all zero.

    Raises:
        FatalEncodingError: If the value does not fit in ``size`` bytes
    """
    if len(data) <= size:
        return data.rjust(size, b"\x00")
    surplus = len(data) - size
    if any(data[:surplus]):
        raise FatalEncodingError(
            f"Value 0x{data.hex()} does not fit in {size} bytes"
        )
    return data[surplus:]


def ple_encode(chunks: Iterable[bytes]) -> bytes:
    """Concatenate chunks, each prefixed with its uint16 length.

    Raises:
        FatalEncodingError: If a chunk is longer than 65535 bytes
    """
    out = bytearray()
    for chunk in chunks:
        if len(chunk) > MAX_PLE_CHUNK:
            raise FatalEncodingError(f"Encoded chunk too long: {len(chunk)} bytes")
        out += len(chunk).to_bytes(2, "big")
        out += chunk
    return bytes(out)


def percentage_to_uint24(fraction: float) -> int:
    """Scale a fraction in [0, 1] to a uint24 (``round(f * (2**24 - 1))``)."""
    return round(fraction * SPLIT_SCALE)


def function_selector(signature: str) -> bytes:
    """First four bytes of the keccak hash of a function signature."""
    return keccak(text=signature)[:4]


def encode_input(signature: str, arg_types: Sequence[str], args: Sequence[object]) -> bytes:
    """Build call data: selector followed by the ABI-encoded arguments."""
    return function_selector(signature) + encode(list(arg_types), list(args))


def signature_arg_types(signature: str) -> list[str]:
    """Top-level argument types of a function signature.

    ``f(uint256,(address,uint160),bytes)`` -> ``["uint256", "(address,uint160)", "bytes"]``
    """
    start = signature.index("(")
    inner = signature[start + 1 : -1]
    types: list[str] = []
    depth = 0
    current = ""
    for char in inner:
        if char == "," and depth == 0:
            types.append(current)
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current:
        types.append(current)
    return types


async def run_concurrently(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Await all awaitables concurrently, preserving order.

    The first failure cancels the others and is re-raised as-is (not
    wrapped in an ExceptionGroup).
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(_as_coroutine(aw)) for aw in aws]
    except BaseExceptionGroup as group:
        raise _first_leaf(group) from None
    return [task.result() for task in tasks]


async def _as_coroutine(aw: Awaitable[T]) -> T:
    return await aw


def _first_leaf(group: BaseExceptionGroup) -> BaseException:
    first = group.exceptions[0]
    while isinstance(first, BaseExceptionGroup):
        first = first.exceptions[0]
    return first


def get_static_attribute(swap: Swap, name: str) -> bytes:
    """Read a static attribute of the swap's component.

    Raises:
        FatalEncodingError: If the attribute is missing
    """
    try:
        return swap.component.static_attributes[name]
    except KeyError:
        raise FatalEncodingError(
            f"Attribute {name} not found on component {swap.component.id}"
        ) from None


def get_token_position(tokens: Sequence[str], token: str) -> int:
    """Index of a token in the split token table.

    Raises:
        InvalidInputError: If the token is not in the table
    """
    try:
        return tokens.index(token)
    except ValueError:
        raise InvalidInputError(f"Token {token} not found in tokens array") from None


__all__ = [
    "address_bytes",
    "pad_or_truncate_to_size",
    "ple_encode",
    "percentage_to_uint24",
    "function_selector",
    "encode_input",
    "signature_arg_types",
    "run_concurrently",
    "get_static_attribute",
    "get_token_position",
]
