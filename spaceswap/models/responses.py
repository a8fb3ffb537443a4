"""Pydantic models for API responses."""

from pydantic import BaseModel, Field

from spaceswap.amm.results import LiquidityAdded, LiquidityRemoved, SwapResult
from spaceswap.models.types import Address, Uint256


class ReservesResponse(BaseModel):
    reserve_token: Uint256 = Field(alias="reserveToken")
    reserve_native: Uint256 = Field(alias="reserveNative")
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class AccountResponse(BaseModel):
    address: Address
    native: Uint256
    token: Uint256
    shares: Uint256


class TaxResponse(BaseModel):
    enabled: bool


class LiquidityAddedResponse(BaseModel):
    token_amount: Uint256 = Field(alias="tokenAmount")
    native_amount: Uint256 = Field(alias="nativeAmount")
    shares: Uint256
    native_refund: Uint256 = Field(alias="nativeRefund")
    recipient: Address

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: LiquidityAdded) -> "LiquidityAddedResponse":
        return cls(
            token_amount=result.token_amount,
            native_amount=result.native_amount,
            shares=result.shares,
            native_refund=result.native_refund,
            recipient=result.recipient,
        )


class LiquidityRemovedResponse(BaseModel):
    shares: Uint256
    token_amount: Uint256 = Field(alias="tokenAmount")
    native_amount: Uint256 = Field(alias="nativeAmount")
    recipient: Address

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: LiquidityRemoved) -> "LiquidityRemovedResponse":
        return cls(
            shares=result.shares,
            token_amount=result.token_amount,
            native_amount=result.native_amount,
            recipient=result.recipient,
        )


class SwapResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    asset_in: str = Field(alias="assetIn")
    asset_out: str = Field(alias="assetOut")
    recipient: Address

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: SwapResult) -> "SwapResponse":
        return cls(
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            asset_in=result.asset_in.value,
            asset_out=result.asset_out.value,
            recipient=result.recipient,
        )


class ErrorResponse(BaseModel):
    error: str
    detail: str
