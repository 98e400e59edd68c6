"""ERC-20 approval checks.

Protocols whose executor spends tokens held by the router (or by an
intermediate pool) need to know whether an approval must be granted as
part of the swap. The answer comes from the on-chain allowance, which is
treated as sufficient once it reaches half of the uint256 range.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from encoder.chain import ChainReader
from encoder.constants import APPROVAL_THRESHOLD
from encoder.errors import FatalEncodingError, RecoverableEncodingError
from encoder.models.types import is_valid_address, normalize_address
from encoder.utils import function_selector

logger = structlog.get_logger()

ALLOWANCE_SELECTOR = function_selector("allowance(address,address)")

ApprovalKey = tuple[str, str, str]


class ApprovalResolver(Protocol):
    """Protocol for approval lookups."""

    async def approval_needed(self, token: str, owner: str, spender: str) -> bool:
        """Return True if ``owner`` has not approved ``spender`` for ``token``.

        Raises:
            RecoverableEncodingError: On transport faults or timeouts
            FatalEncodingError: On malformed addresses or responses
        """
        ...


def _approval_key(token: str, owner: str, spender: str) -> ApprovalKey:
    for name, value in (("token", token), ("owner", owner), ("spender", spender)):
        if not is_valid_address(value):
            raise FatalEncodingError(f"Invalid {name} address for approval check: {value}")
    return normalize_address(token), normalize_address(owner), normalize_address(spender)


class RpcApprovalResolver:
    """Reads ERC-20 allowances through a chain reader."""

    def __init__(self, reader: ChainReader):
        self.reader = reader

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        """Current allowance of ``spender`` over ``owner``'s ``token``."""
        token, owner, spender = _approval_key(token, owner, spender)
        data = ALLOWANCE_SELECTOR + encode(["address", "address"], [owner, spender])
        try:
            raw = await self.reader.call(token, data)
        except RecoverableEncodingError:
            logger.warning("allowance_query_failed", token=token, owner=owner, spender=spender)
            raise
        try:
            (value,) = decode(["uint256"], raw)
        except DecodingError as e:
            raise FatalEncodingError(
                f"Undecodable allowance response from {token}: 0x{raw.hex()}"
            ) from e
        return value

    async def approval_needed(self, token: str, owner: str, spender: str) -> bool:
        return await self.allowance(token, owner, spender) < APPROVAL_THRESHOLD


class CachedApprovalResolver:
    """Memoizes approval lookups for the duration of one encode call.

    Concurrent lookups of the same (token, owner, spender) share one
    in-flight request. Never reuse an instance across calls: allowances
    change between blocks.
    """

    def __init__(self, inner: ApprovalResolver):
        self.inner = inner
        self._results: dict[ApprovalKey, asyncio.Future[bool]] = {}

    async def approval_needed(self, token: str, owner: str, spender: str) -> bool:
        key = _approval_key(token, owner, spender)
        future = self._results.get(key)
        if future is None:
            future = asyncio.ensure_future(self.inner.approval_needed(*key))
            self._results[key] = future
        return await future

    @property
    def cached_keys(self) -> list[ApprovalKey]:
        return list(self._results)


class MockApprovalResolver:
    """Mock resolver with fixed answers, for testing and offline use.

    Configure answers per (token, owner, spender) and track calls for
    assertions.
    """

    def __init__(
        self,
        answers: dict[ApprovalKey, bool] | None = None,
        default: bool = False,
        error: Exception | None = None,
    ):
        """Initialize mock resolver.

        Args:
            answers: Mapping of (token, owner, spender) -> approval needed
            default: Answer for unconfigured keys
            error: If set, raised on every lookup
        """
        self.answers = {
            (normalize_address(t), normalize_address(o), normalize_address(s)): needed
            for (t, o, s), needed in (answers or {}).items()
        }
        self.default = default
        self.error = error
        self.calls: list[ApprovalKey] = []

    async def approval_needed(self, token: str, owner: str, spender: str) -> bool:
        key = _approval_key(token, owner, spender)
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return self.answers.get(key, self.default)


__all__ = [
    "ApprovalResolver",
    "RpcApprovalResolver",
    "CachedApprovalResolver",
    "MockApprovalResolver",
    "ALLOWANCE_SELECTOR",
]
