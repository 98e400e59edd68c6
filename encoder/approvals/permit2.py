"""Permit2 permit construction and EIP-712 signing."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_account import Account
from eth_utils import to_checksum_address

from encoder.chain import ChainReader
from encoder.config import Chain
from encoder.constants import PERMIT2_ADDRESS, PERMIT_EXPIRATION, PERMIT_SIG_DEADLINE
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.context import PermitDetails, PermitSingle
from encoder.models.types import UINT160_MAX, normalize_address
from encoder.utils import function_selector

logger = structlog.get_logger()

# allowance(owner, token, spender) -> (uint160 amount, uint48 expiration, uint48 nonce)
PERMIT2_ALLOWANCE_SELECTOR = function_selector("allowance(address,address,address)")

PERMIT_TYPES = {
    "PermitSingle": [
        {"name": "details", "type": "PermitDetails"},
        {"name": "spender", "type": "address"},
        {"name": "sigDeadline", "type": "uint256"},
    ],
    "PermitDetails": [
        {"name": "token", "type": "address"},
        {"name": "amount", "type": "uint160"},
        {"name": "expiration", "type": "uint48"},
        {"name": "nonce", "type": "uint48"},
    ],
}


class Permit2:
    """Builds and signs Permit2 single-token permits for a swapper.

    The swapper's key is held only to sign permits; the permit owner is
    always the address derived from it.
    """

    def __init__(
        self,
        chain: Chain,
        signer_key: str,
        reader: ChainReader | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize Permit2 helper.

        Args:
            chain: Chain whose id goes into the EIP-712 domain
            signer_key: Hex private key of the swapper
            reader: Chain reader used to fetch the current nonce
            clock: Source of the current unix time
        """
        self.chain = chain
        self.reader = reader
        self.clock = clock
        try:
            self._account = Account.from_key(signer_key)
        except (ValueError, TypeError) as e:
            raise FatalEncodingError("Invalid swapper private key") from e

    @property
    def owner(self) -> str:
        return normalize_address(self._account.address)

    async def get_nonce(self, owner: str, token: str, spender: str) -> int:
        """Current Permit2 nonce for (owner, token, spender)."""
        if self.reader is None:
            raise FatalEncodingError("Permit2 needs an RPC endpoint to read the current nonce")
        data = PERMIT2_ALLOWANCE_SELECTOR + encode(
            ["address", "address", "address"],
            [normalize_address(owner), normalize_address(token), normalize_address(spender)],
        )
        raw = await self.reader.call(PERMIT2_ADDRESS, data)
        try:
            _amount, _expiration, nonce = decode(["uint160", "uint48", "uint48"], raw)
        except DecodingError as e:
            raise FatalEncodingError(
                f"Undecodable Permit2 allowance response: 0x{raw.hex()}"
            ) from e
        return nonce

    async def get_permit(self, spender: str, owner: str, token: str, amount: int) -> PermitSingle:
        """Build a permit letting ``spender`` pull ``amount`` of ``token`` from ``owner``.

        Raises:
            InvalidInputError: If the owner is not the signer or the amount
                does not fit uint160
        """
        owner = normalize_address(owner)
        if owner != self.owner:
            raise InvalidInputError(
                f"Order sender {owner} does not match the permit signer {self.owner}"
            )
        if amount > UINT160_MAX:
            raise InvalidInputError(f"Permit amount {amount} does not fit uint160")

        nonce = await self.get_nonce(owner, token, spender)
        now = int(self.clock())
        permit = PermitSingle(
            details=PermitDetails(
                token=normalize_address(token),
                amount=amount,
                expiration=now + PERMIT_EXPIRATION,
                nonce=nonce,
            ),
            spender=normalize_address(spender),
            sig_deadline=now + PERMIT_SIG_DEADLINE,
        )
        logger.debug("permit_built", token=token, spender=spender, nonce=nonce)
        return permit

    def sign_permit(self, permit: PermitSingle) -> bytes:
        """Sign a permit as EIP-712 typed data; returns the 65-byte signature."""
        domain = {
            "name": "Permit2",
            "chainId": self.chain.chain_id,
            "verifyingContract": to_checksum_address(PERMIT2_ADDRESS),
        }
        message = {
            "details": {
                "token": to_checksum_address(permit.details.token),
                "amount": permit.details.amount,
                "expiration": permit.details.expiration,
                "nonce": permit.details.nonce,
            },
            "spender": to_checksum_address(permit.spender),
            "sigDeadline": permit.sig_deadline,
        }
        signed = Account.sign_typed_data(
            self._account.key,
            domain_data=domain,
            message_types=PERMIT_TYPES,
            message_data=message,
        )
        return bytes(signed.signature)


__all__ = ["Permit2", "PERMIT_TYPES", "PERMIT2_ALLOWANCE_SELECTOR"]
