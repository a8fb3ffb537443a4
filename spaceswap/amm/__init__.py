"""Constant-product pair and its router."""

from spaceswap.amm.pair import Pair, PairState
from spaceswap.amm.results import Asset, LiquidityAdded, LiquidityRemoved, SwapResult
from spaceswap.amm.router import Router

__all__ = [
    # Contracts
    "Pair",
    "PairState",
    "Router",
    # Results
    "Asset",
    "LiquidityAdded",
    "LiquidityRemoved",
    "SwapResult",
]
