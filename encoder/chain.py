"""Read-only chain-state access for allowance and nonce lookups."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

import structlog
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from encoder.constants import DEFAULT_REQUEST_TIMEOUT
from encoder.errors import FatalEncodingError, RecoverableEncodingError
from encoder.models.types import normalize_address

logger = structlog.get_logger()


class ChainReader(Protocol):
    """Protocol for eth_call style contract reads.

    This allows swapping between the real RPC reader and a mock for testing.
    """

    async def call(self, to: str, data: bytes) -> bytes:
        """Execute a read-only call and return the raw return data.

        Raises:
            RecoverableEncodingError: On transport faults or timeouts
            FatalEncodingError: If the call reverts
        """
        ...


class Web3ChainReader:
    """Reader that issues eth_call requests through an async web3 provider."""

    def __init__(self, rpc_url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """Initialize reader with an RPC endpoint.

        Args:
            rpc_url: HTTP RPC URL (e.g., "https://eth.llamarpc.com")
            timeout: Per-request timeout in seconds
        """
        self.timeout = timeout
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

    async def call(self, to: str, data: bytes) -> bytes:
        tx = {"to": AsyncWeb3.to_checksum_address(to), "data": "0x" + data.hex()}
        try:
            async with asyncio.timeout(self.timeout):
                result = await self.w3.eth.call(tx)  # type: ignore[arg-type]
        except ContractLogicError as e:
            raise FatalEncodingError(f"Call to {to} reverted: {e}") from e
        except (TimeoutError, OSError, Web3Exception) as e:
            logger.warning("chain_call_failed", to=to, error=str(e))
            raise RecoverableEncodingError(f"Call to {to} failed: {e}") from e
        return bytes(result)


class MockChainReader:
    """Mock reader for testing without RPC calls.

    Responses are keyed by (contract address, 4-byte selector). A response
    may be raw bytes, an exception to raise, or an async callable taking
    the full call data.
    """

    def __init__(
        self,
        responses: dict[tuple[str, bytes], bytes | Exception | Callable[[bytes], Awaitable[bytes]]]
        | None = None,
    ):
        self.responses = {
            (normalize_address(to), selector): value
            for (to, selector), value in (responses or {}).items()
        }
        self.calls: list[tuple[str, bytes]] = []

    async def call(self, to: str, data: bytes) -> bytes:
        self.calls.append((to, data))
        key = (normalize_address(to), data[:4])
        if key not in self.responses:
            raise FatalEncodingError(f"No mock response for {to} selector 0x{data[:4].hex()}")
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return await value(data)
        return value


__all__ = ["ChainReader", "Web3ChainReader", "MockChainReader"]
