"""Result types returned by the router's entry points."""

from dataclasses import dataclass
from enum import Enum


class Asset(str, Enum):
    """The two assets the pair holds."""

    TOKEN = "SPC"
    NATIVE = "ETH"


@dataclass(frozen=True)
class SwapResult:
    """Result of a swap through the pair.

    amount_in is what the pair actually received (after any transfer tax);
    amount_out is what the pair paid out.
    """

    amount_in: int
    amount_out: int
    asset_in: Asset
    asset_out: Asset
    recipient: str


@dataclass(frozen=True)
class LiquidityAdded:
    """Amounts that entered the reserves, shares minted and native refunded."""

    token_amount: int
    native_amount: int
    shares: int
    native_refund: int
    recipient: str


@dataclass(frozen=True)
class LiquidityRemoved:
    """Shares burned and the two legs paid out."""

    shares: int
    token_amount: int
    native_amount: int
    recipient: str
