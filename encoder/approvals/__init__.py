"""Approval checks and Permit2 permits."""

from encoder.approvals.allowance import (
    ApprovalResolver,
    CachedApprovalResolver,
    MockApprovalResolver,
    RpcApprovalResolver,
)
from encoder.approvals.permit2 import Permit2

__all__ = [
    "ApprovalResolver",
    "RpcApprovalResolver",
    "CachedApprovalResolver",
    "MockApprovalResolver",
    "Permit2",
]
