"""Swap router call-data encoder."""

__version__ = "0.1.0"

from encoder.config import Chain, load_encoder_config  # noqa: E402
from encoder.errors import (  # noqa: E402
    EncodingError,
    FatalEncodingError,
    InvalidInputError,
    NotImplementedEncodingError,
    RecoverableEncodingError,
)
from encoder.models import Order, Solution, Swap, Transaction  # noqa: E402
from encoder.router import RouterEncoder  # noqa: E402
from encoder.strategies.registry import StrategyRegistry  # noqa: E402

__all__ = [
    "Chain",
    "EncodingError",
    "FatalEncodingError",
    "InvalidInputError",
    "NotImplementedEncodingError",
    "Order",
    "RecoverableEncodingError",
    "RouterEncoder",
    "Solution",
    "StrategyRegistry",
    "Swap",
    "Transaction",
    "load_encoder_config",
    "__version__",
]
