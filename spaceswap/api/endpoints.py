"""API endpoints exposing the router's entry points.

Every handler takes the exchange lock, so calls are applied one at a time in
arrival order. State-changing handlers run inside `Exchange.transaction()`,
which also drains the event log once the call is done. Domain errors propagate to the exception handlers installed
in spaceswap.api.main.
"""

import threading
from enum import Enum

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from spaceswap.amm.results import Asset
from spaceswap.config import ApiSettings
from spaceswap.deploy import Exchange, deploy_exchange
from spaceswap.models.requests import (
    AddLiquidityRequest,
    ApproveRequest,
    FaucetRequest,
    RemoveLiquidityRequest,
    SwapNativeForTokenRequest,
    SwapTokenForNativeRequest,
    ToggleTaxRequest,
)
from spaceswap.models.responses import (
    AccountResponse,
    LiquidityAddedResponse,
    LiquidityRemovedResponse,
    QuoteResponse,
    ReservesResponse,
    SwapResponse,
    TaxResponse,
)
from spaceswap.models.types import is_valid_address, normalize_address

logger = structlog.get_logger()

router = APIRouter()

_default_exchange: Exchange | None = None
_default_lock = threading.Lock()


def get_settings() -> ApiSettings:
    """Dependency provider for API settings (read from the environment)."""
    return ApiSettings()


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a prepared exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange

    Returns:
        The process-wide exchange, deployed on first use.
    """
    global _default_exchange
    with _default_lock:
        if _default_exchange is None:
            settings = get_settings()
            _default_exchange = deploy_exchange(owner=settings.owner, treasury=settings.treasury)
        return _default_exchange


class SwapDirection(str, Enum):
    NATIVE_FOR_TOKEN = "native-for-token"
    TOKEN_FOR_NATIVE = "token-for-native"


# --- Reads ---


@router.get("/reserves", response_model_by_alias=True)
def get_reserves(exchange: Exchange = Depends(get_exchange)) -> ReservesResponse:
    """Current pair reserves and total pool shares."""
    with exchange.lock:
        reserve_token, reserve_native = exchange.router.get_reserves()
        total_shares = exchange.pair.total_shares
    return ReservesResponse(
        reserve_token=reserve_token,
        reserve_native=reserve_native,
        total_shares=total_shares,
    )


@router.get("/quote/{direction}")
def get_quote(
    direction: SwapDirection,
    amount_in: int = Query(alias="amountIn", ge=0),
    exchange: Exchange = Depends(get_exchange),
) -> QuoteResponse:
    """Output for an input that fully arrives at the pair (no transfer tax)."""
    asset_in = Asset.NATIVE if direction is SwapDirection.NATIVE_FOR_TOKEN else Asset.TOKEN
    with exchange.lock:
        amount_out = exchange.router.quote_swap(asset_in, amount_in)
    return QuoteResponse(amount_in=amount_in, amount_out=amount_out)


@router.get("/accounts/{address}")
def get_account(address: str, exchange: Exchange = Depends(get_exchange)) -> AccountResponse:
    """Native, token and pool-share balances of one account."""
    address = normalize_address(address)
    if not is_valid_address(address):
        raise HTTPException(status_code=422, detail=f"Invalid address: {address}")
    with exchange.lock:
        return AccountResponse(
            address=address,
            native=exchange.chain.native_balance(address),
            token=exchange.token.balance_of(address),
            shares=exchange.pair.balance_of(address),
        )


@router.get("/tax")
def get_tax(exchange: Exchange = Depends(get_exchange)) -> TaxResponse:
    with exchange.lock:
        return TaxResponse(enabled=exchange.tax_policy.enabled)


# --- Account setup ---


@router.post("/faucet")
def faucet(
    request: FaucetRequest,
    exchange: Exchange = Depends(get_exchange),
    settings: ApiSettings = Depends(get_settings),
) -> AccountResponse:
    """Credit native value to an account. Returns 404 unless the faucet is enabled."""
    if not settings.faucet_enabled:
        raise HTTPException(status_code=404, detail="Faucet is disabled")
    with exchange.transaction():
        exchange.chain.fund(request.address, int(request.amount))
        logger.info("faucet_funded", address=request.address, amount=request.amount)
        return AccountResponse(
            address=request.address,
            native=exchange.chain.native_balance(request.address),
            token=exchange.token.balance_of(request.address),
            shares=exchange.pair.balance_of(request.address),
        )


@router.post("/token/approve")
def approve_token(request: ApproveRequest, exchange: Exchange = Depends(get_exchange)) -> dict[str, bool]:
    """Approve the router to pull the sender's tokens."""
    with exchange.transaction():
        ok = exchange.token.approve(request.sender, exchange.router.address, int(request.amount))
    return {"approved": ok}


@router.post("/shares/approve")
def approve_shares(request: ApproveRequest, exchange: Exchange = Depends(get_exchange)) -> dict[str, bool]:
    """Approve the router to pull the sender's pool shares."""
    with exchange.transaction():
        ok = exchange.pair.approve(request.sender, exchange.router.address, int(request.amount))
    return {"approved": ok}


@router.post("/tax/toggle")
def toggle_tax(request: ToggleTaxRequest, exchange: Exchange = Depends(get_exchange)) -> TaxResponse:
    """Flip the transfer tax. Only the owner may call this."""
    with exchange.transaction():
        return TaxResponse(enabled=exchange.tax_policy.toggle(request.sender))


# --- Router entry points ---


@router.post("/liquidity/add", response_model_by_alias=True)
def add_liquidity(
    request: AddLiquidityRequest, exchange: Exchange = Depends(get_exchange)
) -> LiquidityAddedResponse:
    with exchange.transaction():
        result = exchange.router.add_liquidity(
            request.sender,
            int(request.token_amount_desired),
            request.to or request.sender,
            value=int(request.value),
        )
    return LiquidityAddedResponse.from_result(result)


@router.post("/liquidity/remove", response_model_by_alias=True)
def remove_liquidity(
    request: RemoveLiquidityRequest, exchange: Exchange = Depends(get_exchange)
) -> LiquidityRemovedResponse:
    with exchange.transaction():
        result = exchange.router.remove_liquidity(
            request.sender,
            int(request.share_amount),
            request.to or request.sender,
        )
    return LiquidityRemovedResponse.from_result(result)


@router.post("/swap/native-for-token", response_model_by_alias=True)
def swap_native_for_token(
    request: SwapNativeForTokenRequest, exchange: Exchange = Depends(get_exchange)
) -> SwapResponse:
    with exchange.transaction():
        result = exchange.router.swap_native_for_token(
            request.sender,
            int(request.amount_out_min),
            request.to or request.sender,
            value=int(request.value),
        )
    return SwapResponse.from_result(result)


@router.post("/swap/token-for-native", response_model_by_alias=True)
def swap_token_for_native(
    request: SwapTokenForNativeRequest, exchange: Exchange = Depends(get_exchange)
) -> SwapResponse:
    with exchange.transaction():
        result = exchange.router.swap_token_for_native(
            request.sender,
            int(request.amount_in),
            int(request.amount_out_min),
            request.to or request.sender,
        )
    return SwapResponse.from_result(result)
