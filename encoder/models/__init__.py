"""Data models for solutions, swaps and encoding state."""

from encoder.models.context import (
    ActionType,
    EncodedSolution,
    EncodingContext,
    PermitDetails,
    PermitSingle,
    SwapGroup,
    TransferType,
    UserTransferType,
)
from encoder.models.solution import (
    NativeAction,
    Order,
    ProtocolComponent,
    Solution,
    Swap,
    Transaction,
)
from encoder.models.types import Address, HexBytes, Uint256

__all__ = [
    # Types
    "Address",
    "HexBytes",
    "Uint256",
    # Caller input
    "NativeAction",
    "ProtocolComponent",
    "Swap",
    "Order",
    "Solution",
    # Output
    "Transaction",
    "EncodedSolution",
    "PermitDetails",
    "PermitSingle",
    # Encoding state
    "ActionType",
    "TransferType",
    "UserTransferType",
    "EncodingContext",
    "SwapGroup",
]
