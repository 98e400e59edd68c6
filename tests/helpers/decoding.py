"""Decoders for the byte layouts produced by the encoders, for assertions."""

from __future__ import annotations

from eth_abi import decode

from encoder.utils import function_selector, signature_arg_types


def raw(address: str) -> bytes:
    """20 raw bytes of a 0x-prefixed address."""
    return bytes.fromhex(address[2:])


def ple_decode(data: bytes) -> list[bytes]:
    """Split prefix-length-encoded data back into its chunks."""
    chunks = []
    position = 0
    while position < len(data):
        length = int.from_bytes(data[position : position + 2], "big")
        chunks.append(data[position + 2 : position + 2 + length])
        position += 2 + length
    assert position == len(data), "trailing bytes after last chunk"
    return chunks


def decode_call(signature: str, data: bytes) -> tuple:
    """Check the selector and decode the arguments of router call data."""
    assert data[:4] == function_selector(signature), "selector mismatch"
    return decode(signature_arg_types(signature), data[4:])
