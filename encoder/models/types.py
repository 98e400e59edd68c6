"""Shared type definitions for the encoding models.

These types are used across the solution models, the swap encoders and
the router encoder.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, PlainSerializer

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# Maximum uint160 value (Permit2 amounts)
UINT160_MAX = 2**160 - 1


def validate_uint256(value: Any) -> int:
    """Validate that a value is a valid uint256 and return it as int.

    Args:
        value: Value to validate (int or decimal string)

    Returns:
        Value as a non-negative int within uint256 range

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if isinstance(value, str):
        try:
            value = int(value.replace("_", ""))
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return value


def parse_hex_bytes(value: Any) -> bytes:
    """Parse bytes given either raw or as a 0x-prefixed hex string."""
    if isinstance(value, bytes | bytearray):
        return bytes(value)
    if isinstance(value, str):
        raw = value[2:] if value.lower().startswith("0x") else value
        if len(raw) % 2:
            raw = "0" + raw
        try:
            return bytes.fromhex(raw)
        except ValueError as err:
            raise ValueError(f"Invalid hex string: '{value}'") from err
    raise ValueError(f"Expected bytes or hex string, got {type(value).__name__}")


def _check_address(value: str) -> str:
    if not is_valid_address(value):
        raise ValueError(f"Invalid address: {value}")
    return normalize_address(value)


# Ethereum address (40 hex chars after 0x prefix), stored lowercase
Address = Annotated[str, AfterValidator(_check_address)]

# 256-bit unsigned integer, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]

# Arbitrary bytes, accepted as bytes or hex string, serialized as 0x-hex
HexBytes = Annotated[
    bytes,
    BeforeValidator(parse_hex_bytes),
    PlainSerializer(lambda b: "0x" + b.hex(), return_type=str),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address.

    Args:
        address: String to validate

    Returns:
        True if valid Ethereum address format
    """
    if not isinstance(address, str):
        return False
    if not address.lower().startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def address_to_bytes(address: str) -> bytes:
    """Convert a validated address to its 20 raw bytes.

    Raises:
        ValueError: If the address is not 20 bytes of hex
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address}")
    return bytes.fromhex(address[2:])
