"""Pydantic models for the caller-facing solution data structures.

A Solution groups Orders submitted together. Each Order describes one
swap request and the graph of elementary pool swaps that fills it.
All models are frozen: they are built once by the caller and consumed
by the router encoder.
"""

from enum import Enum

from pydantic import BaseModel, Field

from encoder.models.types import Address, HexBytes, Uint256


class NativeAction(str, Enum):
    """Native coin <-> wrapped token conversion at the order boundary."""

    WRAP = "wrap"
    UNWRAP = "unwrap"


class ProtocolComponent(BaseModel):
    """Pool descriptor supplied by the upstream indexer.

    Treated as opaque read-only input: the id is an address for most
    AMMs and a 32-byte pool id for vault-style pools.
    """

    id: str
    protocol_system: str
    tokens: list[Address] = Field(default_factory=list)
    static_attributes: dict[str, HexBytes] = Field(default_factory=dict)

    model_config = {"frozen": True, "populate_by_name": True}


class Swap(BaseModel):
    """A single elementary swap through one pool."""

    component: ProtocolComponent
    token_in: Address
    token_out: Address
    split: float = Field(
        default=0.0,
        description="Fraction of the incoming amount routed through this swap (0 = remainder).",
    )
    user_data: HexBytes | None = Field(
        default=None,
        description="Optional data forwarded to hook-capable protocols.",
    )
    estimated_amount_in: Uint256 | None = Field(
        default=None,
        description="Amount expected to flow through this swap. Required for RFQ swaps.",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def protocol_system(self) -> str:
        return self.component.protocol_system


class Order(BaseModel):
    """One swap request: what to sell, what to receive, and how to route it."""

    exact_out: bool = Field(
        default=False,
        description="Only exact input orders are currently supported.",
    )
    given_token: Address
    given_amount: Uint256
    checked_token: Address
    check_amount: Uint256 = Field(
        description="Minimum amount of checked_token to receive (before slippage).",
    )
    sender: Address
    receiver: Address
    swaps: list[Swap] = Field(default_factory=list)
    add_router_calldata: bool = Field(
        default=True,
        description="If False, only the encoded swap path is returned as call data.",
    )
    router_address: Address | None = None
    slippage: float | None = None
    native_action: NativeAction | None = None

    model_config = {"frozen": True, "populate_by_name": True}


class Solution(BaseModel):
    """Ordered batch of orders. Output preserves the input order."""

    orders: list[Order] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True}


class Transaction(BaseModel):
    """A ready-to-send transaction targeting the router."""

    to: Address
    value: Uint256 = 0
    data: HexBytes

    model_config = {"frozen": True}


__all__ = [
    "NativeAction",
    "ProtocolComponent",
    "Swap",
    "Order",
    "Solution",
    "Transaction",
]
