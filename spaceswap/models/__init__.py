"""Pydantic models and shared types for the API.

Response models live in spaceswap.models.responses; they depend on the AMM
result types and are imported from there directly.
"""

from spaceswap.models.requests import (
    AddLiquidityRequest,
    ApproveRequest,
    FaucetRequest,
    RemoveLiquidityRequest,
    SwapNativeForTokenRequest,
    SwapTokenForNativeRequest,
    ToggleTaxRequest,
)
from spaceswap.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    # Requests
    "AddLiquidityRequest",
    "ApproveRequest",
    "FaucetRequest",
    "RemoveLiquidityRequest",
    "SwapNativeForTokenRequest",
    "SwapTokenForNativeRequest",
    "ToggleTaxRequest",
]
