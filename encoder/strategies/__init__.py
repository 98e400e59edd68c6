"""Strategy classification, grouping and encoding.

An order's swap graph is classified into an action type, and the matching
strategy encodes it for one router entry point:

    SingleSwapStrategy - one group, ``singleSwap``
    SequentialSwapStrategy - linear path, ``sequentialSwap``
    SplitSwapStrategy - forked graph, ``splitSwap``
"""

from encoder.strategies.base import StrategyEncoder, router_signature
from encoder.strategies.classifier import classify
from encoder.strategies.grouping import group_swaps
from encoder.strategies.registry import StrategyRegistry
from encoder.strategies.sequential import SequentialSwapStrategy
from encoder.strategies.single import SingleSwapStrategy
from encoder.strategies.split import SplitSwapStrategy
from encoder.strategies.transfers import HopTransfer, TransferOptimization

__all__ = [
    "StrategyEncoder",
    "StrategyRegistry",
    "SingleSwapStrategy",
    "SequentialSwapStrategy",
    "SplitSwapStrategy",
    "TransferOptimization",
    "HopTransfer",
    "classify",
    "group_swaps",
    "router_signature",
]
