"""Pydantic models for API request bodies.

Amounts are uint256 decimal strings, addresses 0x-prefixed hex. `sender` is
the account the call is made on behalf of.
"""

from pydantic import BaseModel, Field

from spaceswap.models.types import Address, Uint256


class FaucetRequest(BaseModel):
    """Credit native value to an account (devnet only)."""

    address: Address
    amount: Uint256


class ApproveRequest(BaseModel):
    """Approve the router to move the sender's tokens or shares."""

    sender: Address
    amount: Uint256


class ToggleTaxRequest(BaseModel):
    sender: Address


class AddLiquidityRequest(BaseModel):
    """Deposit tokens plus attached native value."""

    sender: Address
    token_amount_desired: Uint256 = Field(alias="tokenAmountDesired")
    value: Uint256 = Field(description="Native value attached to the call")
    to: Address | None = Field(default=None, description="Share recipient, defaults to sender")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    sender: Address
    share_amount: Uint256 = Field(alias="shareAmount")
    to: Address | None = Field(default=None, description="Asset recipient, defaults to sender")

    model_config = {"populate_by_name": True}


class SwapNativeForTokenRequest(BaseModel):
    sender: Address
    value: Uint256 = Field(description="Native value sold")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    to: Address | None = None

    model_config = {"populate_by_name": True}


class SwapTokenForNativeRequest(BaseModel):
    sender: Address
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    to: Address | None = None

    model_config = {"populate_by_name": True}
