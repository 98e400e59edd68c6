"""Pytest configuration and fixtures."""

import asyncio
import json
from collections.abc import Coroutine, Iterator
from pathlib import Path
from typing import Any, TypeVar

import pytest
import structlog
from eth_abi import encode

from encoder.approvals.allowance import MockApprovalResolver
from encoder.approvals.permit2 import PERMIT2_ALLOWANCE_SELECTOR, Permit2
from encoder.chain import MockChainReader
from encoder.config import Chain, EncoderConfig, load_encoder_config
from encoder.constants import PERMIT2_ADDRESS
from encoder.swap_encoders.quotes import MockQuoteProvider, SignedQuote
from tests.helpers.constants import SWAPPER_PK

T = TypeVar("T")

# Fixed clock for deterministic permits
PERMIT_NOW = 1_700_000_000


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from a sync test."""
    return asyncio.run(coro)


@pytest.fixture
def ethereum_config() -> EncoderConfig:
    """Bundled Ethereum configuration."""
    return load_encoder_config(Chain.ETHEREUM)


@pytest.fixture
def approvals() -> MockApprovalResolver:
    """Approval resolver answering "no approval needed" unless configured."""
    return MockApprovalResolver(default=False)


@pytest.fixture
def quote_provider() -> MockQuoteProvider:
    """Quote provider returning a fixed signed quote."""
    return MockQuoteProvider(
        default=SignedQuote(amount_out=2_000_000_000, quote_attributes={"calldata": b"\xca\xfe"})
    )


@pytest.fixture
def permit2_reader() -> MockChainReader:
    """Chain reader answering Permit2 allowance queries with nonce 3."""
    return MockChainReader(
        {
            (PERMIT2_ADDRESS, PERMIT2_ALLOWANCE_SELECTOR): encode(
                ["uint160", "uint48", "uint48"], [0, 0, 3]
            )
        }
    )


@pytest.fixture
def permit2(permit2_reader: MockChainReader) -> Permit2:
    """Permit2 signer for the test swapper with a fixed clock."""
    return Permit2(Chain.ETHEREUM, SWAPPER_PK, reader=permit2_reader, clock=lambda: PERMIT_NOW)


@pytest.fixture
def executors_file(tmp_path: Path) -> Path:
    """Executor table with a single UniswapV2 executor on Ethereum."""
    path = tmp_path / "executors.json"
    path.write_text(
        json.dumps({"ethereum": {"uniswap_v2": "0x5615deb798bb3e4dfa0139dfa1b3d433cc23b72f"}})
    )
    return path


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
