"""Base class for protocol swap encoders."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from encoder.errors import FatalEncodingError
from encoder.models.types import is_valid_address, normalize_address
from encoder.utils import address_bytes

if TYPE_CHECKING:
    from encoder.approvals.allowance import ApprovalResolver
    from encoder.config import Chain
    from encoder.models.context import EncodingContext
    from encoder.models.solution import Swap
    from encoder.swap_encoders.quotes import IndicativelyPriced


class SwapEncoder(ABC):
    """Encodes one swap into the parameters its executor contract expects.

    Implementations are stateless apart from their static configuration,
    so a registry can hand the same instance to concurrent encode calls.
    Subclasses list the protocol-specific config keys they need in
    ``required_config``; a missing key fails at construction time.
    """

    required_config: tuple[str, ...] = ()

    def __init__(
        self,
        executor_address: str,
        chain: Chain,
        protocol_config: dict[str, str] | None = None,
        approvals: ApprovalResolver | None = None,
        quote_provider: IndicativelyPriced | None = None,
    ):
        """Initialize encoder.

        Args:
            executor_address: Executor contract for this protocol
            chain: Target chain
            protocol_config: Protocol-specific addresses and settings
            approvals: Fallback approval resolver when the context has none
            quote_provider: Signed-quote source for off-chain priced protocols
        """
        if not is_valid_address(executor_address):
            raise FatalEncodingError(f"Invalid executor address: {executor_address}")
        self._executor_address = normalize_address(executor_address)
        self.chain = chain
        self.protocol_config = dict(protocol_config or {})
        self.approvals = approvals
        self.quote_provider = quote_provider

        for key in self.required_config:
            if key not in self.protocol_config:
                raise FatalEncodingError(
                    f"Missing {key} in protocol config for {type(self).__name__}"
                )

    @property
    def executor_address(self) -> str:
        return self._executor_address

    @abstractmethod
    async def encode_swap(self, swap: Swap, context: EncodingContext) -> bytes:
        """Encode a swap for the executor.

        Args:
            swap: The swap to encode
            context: Receiver, transfer type and approval data for this hop

        Returns:
            Protocol-specific call data (without the executor header)
        """
        ...

    def clone(self) -> SwapEncoder:
        return copy.copy(self)

    def _config_address(self, key: str) -> bytes:
        value = self.protocol_config[key]
        if not is_valid_address(value):
            raise FatalEncodingError(f"Invalid {key} in protocol config: {value}")
        return bytes.fromhex(value[2:])

    def _approval_resolver(self, context: EncodingContext) -> ApprovalResolver | None:
        return context.approvals if context.approvals is not None else self.approvals


def pool_address(swap: Swap) -> bytes:
    """20-byte pool address from the component id."""
    return address_bytes(swap.component.id, f"pool id for {swap.protocol_system}")


def zero_to_one(token_in: bytes, token_out: bytes) -> bool:
    """Swap direction: True when token_in sorts before token_out."""
    return token_in < token_out


__all__ = ["SwapEncoder", "pool_address", "zero_to_one"]
