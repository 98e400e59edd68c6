"""Internal value types derived while encoding an order.

None of these are caller input: they are built by the grouping optimizer
and the strategy encoders for the duration of one encode call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.models.solution import Swap


class TransferType(IntEnum):
    """How tokens get into a pool, encoded as a single byte.

    TRANSFER_FROM: the router pulls the user's funds into the pool/router.
    TRANSFER: the router pushes its own balance into the pool.
    NONE: funds are already where the pool expects them.
    """

    TRANSFER_FROM = 0
    TRANSFER = 1
    NONE = 2


class ActionType(str, Enum):
    """Shape of an order's swap graph."""

    SINGLE_EXACT_IN = "single_exact_in"
    SINGLE_EXACT_OUT = "single_exact_out"
    SEQUENTIAL_EXACT_IN = "sequential_exact_in"
    SEQUENTIAL_EXACT_OUT = "sequential_exact_out"
    SPLIT_IN = "split_in"


class UserTransferType(str, Enum):
    """How the user's funds enter the router."""

    TRANSFER_FROM_PERMIT2 = "transfer_from_permit2"
    TRANSFER_FROM = "transfer_from"
    NONE = "none"


@dataclass(frozen=True)
class EncodingContext:
    """Per-group attributes passed to a protocol swap encoder.

    Attributes:
        receiver: Address receiving the output of this swap
        exact_out: Whether the order is exact output
        router_address: Router that executes the swap (None for direct executor calls)
        transfer_type: How the input tokens reach the pool
        address_for_approvals: Address holding the tokens when the swap executes
        group_token_in: First input token of the enclosing group
        group_token_out: Last output token of the enclosing group
        approvals: Call-scoped approval resolver, if on-chain checks are available
    """

    receiver: str
    exact_out: bool
    router_address: str | None
    transfer_type: TransferType
    address_for_approvals: str
    group_token_in: str
    group_token_out: str
    approvals: ApprovalResolver | None = None


@dataclass
class SwapGroup:
    """Consecutive swaps merged into a single executor call."""

    protocol_system: str
    token_in: str
    token_out: str
    split: float
    swaps: list[Swap] = field(default_factory=list)

    @property
    def pool_id(self) -> str:
        """Component id of the first pool in the group."""
        return self.swaps[0].component.id


@dataclass(frozen=True)
class PermitDetails:
    """Token, amount, expiration and nonce of a Permit2 approval."""

    token: str
    amount: int
    expiration: int
    nonce: int


@dataclass(frozen=True)
class PermitSingle:
    """A Permit2 single-token permit."""

    details: PermitDetails
    spender: str
    sig_deadline: int

    def as_abi_tuple(self) -> tuple:
        """Return the permit as nested tuple for ABI encoding."""
        from encoder.models.types import address_to_bytes

        return (
            (
                address_to_bytes(self.details.token),
                self.details.amount,
                self.details.expiration,
                self.details.nonce,
            ),
            address_to_bytes(self.spender),
            self.sig_deadline,
        )


@dataclass
class EncodedSolution:
    """Strategy output: the encoded swap path plus what is needed to call the router.

    Attributes:
        swaps: Encoded swap path
        interacting_with: Contract to call (the router)
        function_signature: Router function to call
        n_tokens: Number of distinct tokens (split swaps only)
        permit: Permit2 permit, when a signer is configured
        signature: Signature over the permit
    """

    swaps: bytes
    interacting_with: str
    function_signature: str
    n_tokens: int = 0
    permit: PermitSingle | None = None
    signature: bytes | None = None


__all__ = [
    "TransferType",
    "ActionType",
    "UserTransferType",
    "EncodingContext",
    "SwapGroup",
    "PermitDetails",
    "PermitSingle",
    "EncodedSolution",
]
