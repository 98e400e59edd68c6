"""Protocol constants for the router encoder.

Centralizes well-known addresses and fixed-width encoding parameters.
"""

from encoder.models.types import UINT256_MAX, is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Native coin placeholder used on every supported chain
NATIVE_TOKEN = _validate_address("native token", "0x0000000000000000000000000000000000000000")

# Permit2 is deployed at the same address on every chain
PERMIT2_ADDRESS = _validate_address("Permit2", "0x000000000022d473030f116ddee9f6b43ac78ba3")

# An allowance at or above this is treated as unbounded
APPROVAL_THRESHOLD = UINT256_MAX // 2

# Permit lifetimes in seconds
PERMIT_EXPIRATION = 30 * 24 * 60 * 60
PERMIT_SIG_DEADLINE = 30 * 60

# Splits are encoded as uint24 fractions of 2**24 - 1
SPLIT_SCALE = 2**24 - 1

# Tolerance when checking that fork splits sum to one
SPLIT_TOLERANCE = 1e-6

# Default timeout for allowance, nonce and quote requests (seconds)
DEFAULT_REQUEST_TIMEOUT = 10.0
