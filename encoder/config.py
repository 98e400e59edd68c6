"""Static configuration for the router encoder.

Address tables and protocol capability sets are bundled as JSON under
``encoder/config/`` and loaded once into an immutable ``EncoderConfig``
that is passed explicitly to the registries. Runtime settings (RPC URL,
timeouts, API host/port) come from environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
from importlib import resources
from pathlib import Path
from typing import Any

import structlog

from encoder.constants import DEFAULT_REQUEST_TIMEOUT, NATIVE_TOKEN
from encoder.errors import FatalEncodingError, InvalidInputError
from encoder.models.types import is_valid_address, normalize_address

logger = structlog.get_logger()

EXECUTORS_FILE = "executor_addresses.json"
ROUTERS_FILE = "router_addresses.json"
PROTOCOL_SPECIFIC_FILE = "protocol_specific_addresses.json"
CAPABILITIES_FILE = "protocol_capabilities.json"


class Chain(str, Enum):
    """Chains with a deployed router."""

    ETHEREUM = "ethereum"
    BASE = "base"
    UNICHAIN = "unichain"
    ARBITRUM = "arbitrum"

    @property
    def chain_id(self) -> int:
        return _CHAIN_IDS[self]

    @property
    def native_token(self) -> str:
        return NATIVE_TOKEN

    @property
    def wrapped_token(self) -> str:
        return _WRAPPED_TOKENS[self]

    @classmethod
    def from_name(cls, name: str) -> Chain:
        """Parse a chain name (case-insensitive).

        Raises:
            InvalidInputError: If the chain is not supported
        """
        try:
            return cls(name.lower())
        except ValueError:
            raise InvalidInputError(f"Unsupported chain: {name}") from None


_CHAIN_IDS = {
    Chain.ETHEREUM: 1,
    Chain.BASE: 8453,
    Chain.UNICHAIN: 130,
    Chain.ARBITRUM: 42161,
}

_WRAPPED_TOKENS = {
    Chain.ETHEREUM: "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    Chain.BASE: "0x4200000000000000000000000000000000000006",
    Chain.UNICHAIN: "0x4200000000000000000000000000000000000006",
    Chain.ARBITRUM: "0x82af49447d8a07e3bd95bd0d56f35241523fbab1",
}


def _matches(protocol: str, patterns: frozenset[str]) -> bool:
    if protocol in patterns:
        return True
    return any(fnmatchcase(protocol, p) for p in patterns if "*" in p)


@dataclass(frozen=True)
class ProtocolCapabilities:
    """Protocol classification consumed by the grouping optimizer.

    Entries may be exact protocol names or shell-style patterns
    (e.g. ``rfq:*``).

    Attributes:
        groupable: Flash-accounting protocols whose consecutive swaps are
            merged into one executor call
        in_transfer_optimizable: Protocols whose pools may be paid directly
            by the previous pool
        unsupported_for_chained_swaps: Protocols that can only receive funds
            from the router and always send their output back to it
        funds_in_router: Protocols whose executor pulls the input from the
            router itself, so no in-transfer is encoded
    """

    groupable: frozenset[str] = frozenset()
    in_transfer_optimizable: frozenset[str] = frozenset()
    unsupported_for_chained_swaps: frozenset[str] = frozenset()
    funds_in_router: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        overlap = self.groupable & self.unsupported_for_chained_swaps
        if overlap:
            raise FatalEncodingError(
                "Protocols cannot be both groupable and unsupported for chained swaps: "
                + ", ".join(sorted(overlap))
            )

    def is_groupable(self, protocol: str) -> bool:
        return _matches(protocol, self.groupable)

    def is_unsupported_for_chaining(self, protocol: str) -> bool:
        return _matches(protocol, self.unsupported_for_chained_swaps)

    def needs_in_transfer(self, protocol: str) -> bool:
        """Whether tokens must be transferred into the pool before it swaps."""
        return not _matches(protocol, self.funds_in_router)

    def allows_direct_transfer(self, from_protocol: str, to_protocol: str) -> bool:
        """Whether a pool of ``from_protocol`` may pay a pool of ``to_protocol`` directly."""
        if self.is_unsupported_for_chaining(from_protocol):
            return False
        if self.is_unsupported_for_chaining(to_protocol):
            return False
        if not self.needs_in_transfer(to_protocol):
            return False
        if self.is_groupable(from_protocol) and self.is_groupable(to_protocol):
            return True
        return _matches(to_protocol, self.in_transfer_optimizable)

    @classmethod
    def from_dict(cls, data: dict[str, list[str]]) -> ProtocolCapabilities:
        return cls(
            groupable=frozenset(data.get("groupable", [])),
            in_transfer_optimizable=frozenset(data.get("in_transfer_optimizable", [])),
            unsupported_for_chained_swaps=frozenset(data.get("unsupported_for_chained_swaps", [])),
            funds_in_router=frozenset(data.get("funds_in_router", [])),
        )


@dataclass(frozen=True)
class EncoderConfig:
    """Per-chain static configuration, built once and shared read-only.

    Attributes:
        chain: Target chain
        executors: Protocol system -> executor contract address
        router_address: Default router address (None if not deployed)
        protocol_specific: Protocol system -> extra addresses/settings
        capabilities: Protocol capability sets
    """

    chain: Chain
    executors: dict[str, str]
    router_address: str | None
    protocol_specific: dict[str, dict[str, str]] = field(default_factory=dict)
    capabilities: ProtocolCapabilities = field(default_factory=ProtocolCapabilities)

    def protocol_config(self, protocol: str) -> dict[str, str]:
        """Protocol-specific settings, with ``rfq:*`` style fallbacks."""
        if protocol in self.protocol_specific:
            return dict(self.protocol_specific[protocol])
        for pattern, values in self.protocol_specific.items():
            if "*" in pattern and fnmatchcase(protocol, pattern):
                return dict(values)
        return {}


def _read_json(path: str | Path | None, default_name: str) -> Any:
    """Read a JSON table from ``path`` or from the bundled defaults."""
    try:
        if path is None:
            text = resources.files("encoder").joinpath("config").joinpath(default_name).read_text()
        else:
            text = Path(path).read_text()
    except OSError as err:
        raise FatalEncodingError(f"Cannot read config {path or default_name}: {err}") from err
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        raise FatalEncodingError(f"Invalid JSON in {path or default_name}: {err}") from err


def _checked_address(value: Any, what: str) -> str:
    if not isinstance(value, str) or not is_valid_address(value):
        raise FatalEncodingError(f"Invalid {what}: {value}")
    return normalize_address(value)


def load_encoder_config(
    chain: Chain | str,
    executors_path: str | Path | None = None,
    routers_path: str | Path | None = None,
    capabilities_path: str | Path | None = None,
) -> EncoderConfig:
    """Load the static tables for one chain.

    Args:
        chain: Target chain (enum or name)
        executors_path: Optional executor-address table replacing the bundled one
        routers_path: Optional router-address table replacing the bundled one
        capabilities_path: Optional capability table replacing the bundled one

    Returns:
        Immutable EncoderConfig for the chain

    Raises:
        FatalEncodingError: If a table is missing, malformed or has no entry
            for the chain
    """
    chain = chain if isinstance(chain, Chain) else Chain.from_name(chain)

    executors_table = _read_json(executors_path, EXECUTORS_FILE)
    if chain.value not in executors_table:
        raise FatalEncodingError(f"No executor addresses configured for chain {chain.value}")
    executors = {
        protocol: _checked_address(address, f"executor address for {protocol}")
        for protocol, address in executors_table[chain.value].items()
    }

    routers_table = _read_json(routers_path, ROUTERS_FILE)
    router_address = routers_table.get(chain.value)
    if router_address is not None:
        router_address = _checked_address(router_address, "router address")

    specific_table = _read_json(None, PROTOCOL_SPECIFIC_FILE)
    protocol_specific = {
        protocol: dict(values) for protocol, values in specific_table.get(chain.value, {}).items()
    }

    capabilities = ProtocolCapabilities.from_dict(_read_json(capabilities_path, CAPABILITIES_FILE))

    logger.debug(
        "encoder_config_loaded",
        chain=chain.value,
        executor_count=len(executors),
        has_router=router_address is not None,
    )

    return EncoderConfig(
        chain=chain,
        executors=executors,
        router_address=router_address,
        protocol_specific=protocol_specific,
        capabilities=capabilities,
    )


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class EncoderSettings:
    """Runtime settings read from the environment.

    Attributes:
        rpc_url: JSON-RPC endpoint for allowance and nonce reads
        request_timeout: Timeout in seconds for each external request
        host: API bind host
        port: API bind port
        debug: Enable reload mode for the API server
        supported_chains: Chains served by the API
    """

    rpc_url: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    supported_chains: frozenset[str] = frozenset({Chain.ETHEREUM.value})

    @classmethod
    def from_env(cls) -> EncoderSettings:
        chains = os.environ.get("ENCODER_SUPPORTED_CHAINS", Chain.ETHEREUM.value)
        return cls(
            rpc_url=os.environ.get("RPC_URL") or None,
            request_timeout=float(
                os.environ.get("ENCODER_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
            ),
            host=os.environ.get("ENCODER_HOST", "0.0.0.0"),
            port=int(os.environ.get("ENCODER_PORT", "8000")),
            debug=_env_flag("ENCODER_DEBUG"),
            supported_chains=frozenset(c.strip().lower() for c in chains.split(",") if c.strip()),
        )


def rfq_api_key(protocol: str) -> str | None:
    """API key for an RFQ provider, from ``RFQ_<NAME>_API_KEY``.

    ``rfq:bebop`` reads ``RFQ_BEBOP_API_KEY``.
    """
    name = protocol.split(":", 1)[-1].upper().replace("-", "_")
    return os.environ.get(f"RFQ_{name}_API_KEY") or None


__all__ = [
    "Chain",
    "ProtocolCapabilities",
    "EncoderConfig",
    "EncoderSettings",
    "load_encoder_config",
    "rfq_api_key",
]
