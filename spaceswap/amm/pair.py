"""The SPC/ETH liquidity pair.

The pair keeps its own reserve counters instead of reading balances live:
assets pushed at the pair's address outside a mint or swap never move the
price. Reserves change only at the end of mint, burn and swap, and only by
the amounts the pair verified it received or actually sent.

Only the bound router may call the reserve-affecting entry points or push
native value in. Every entry point updates the pair's own ledgers before any
asset leaves, so a reentrant call triggered by a payout sees final state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from spaceswap.chain.contract import external
from spaceswap.chain.events import Burn, Mint, Swap, Sync
from spaceswap.config import DEFAULT_POOL_CONFIG, PoolConfig
from spaceswap.errors import (
    InsufficientInitialLiquidity,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InsufficientShares,
    InvariantViolation,
    UnauthorizedCaller,
)
from spaceswap.math.constant_product import constant_product
from spaceswap.models.types import normalize_address
from spaceswap.safe_int import S
from spaceswap.token.ledger import FungibleLedger, LedgerState

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain

logger = structlog.get_logger()


@dataclass
class PairState(LedgerState):
    reserve_token: int = 0
    reserve_native: int = 0


class Pair(FungibleLedger):
    """Constant-product pool over SPC and ETH; its ledger is the pool shares."""

    def __init__(
        self,
        chain: Chain,
        address: str,
        token: FungibleLedger,
        router: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        super().__init__(chain, address, name="SpaceCoin-ETH Pair", symbol="SPC-ETH", state=PairState())
        self.token = token
        self.router = normalize_address(router)
        self.config = config

    @property
    def state(self) -> PairState:
        return self.chain.storage(self.address)

    @property
    def total_shares(self) -> int:
        return self.state.total_supply

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_token, reserve_native)."""
        return self.state.reserve_token, self.state.reserve_native

    # --- Native custody ---

    def receive_native(self, sender: str, amount: int) -> None:
        self._only_router(sender)
        logger.debug("pair_received_native", amount=amount)

    def _only_router(self, sender: str) -> None:
        if normalize_address(sender) != self.router:
            raise UnauthorizedCaller(f"Caller {sender} is not the router")

    # --- Entry points ---

    @external
    def mint(self, sender: str, token_amount_in: int, native_amount_in: int, to: str) -> int:
        """Issue pool shares for assets the router already moved into the pair.

        The first deposit sets the price and locks the minimum liquidity to
        the burn address; later deposits are priced on both legs against the
        pre-deposit reserves and the smaller share count wins.

        Args:
            sender: Caller, must be the router
            token_amount_in: Tokens the pair received for this deposit
            native_amount_in: Native value the pair received for this deposit
            to: Recipient of the new shares

        Returns:
            Shares credited to `to`

        Raises:
            UnauthorizedCaller: If sender is not the router
            InsufficientInputAmount: If the pair does not hold the claimed deposit
            InsufficientInitialLiquidity: If a first deposit mints no shares
            InsufficientLiquidityMinted: If a later deposit mints no shares
        """
        self._only_router(sender)
        token_amount_in = S(token_amount_in).to_uint256()
        native_amount_in = S(native_amount_in).to_uint256()
        to = normalize_address(to)

        state = self.state
        reserve_token, reserve_native = state.reserve_token, state.reserve_native
        self._require_received(token_amount_in, native_amount_in)

        if state.total_supply == 0:
            shares = constant_product.initial_shares(
                token_amount_in, native_amount_in, self.config.minimum_liquidity
            )
            if shares <= 0:
                raise InsufficientInitialLiquidity(
                    f"Initial deposit ({token_amount_in}, {native_amount_in}) does not exceed "
                    f"the locked minimum of {self.config.minimum_liquidity} shares"
                )
            self._mint(self.config.burn_address, self.config.minimum_liquidity)
        else:
            shares = constant_product.deposit_shares(
                token_amount_in,
                native_amount_in,
                reserve_token,
                reserve_native,
                state.total_supply,
            )
            if shares <= 0:
                raise InsufficientLiquidityMinted(
                    f"Deposit ({token_amount_in}, {native_amount_in}) mints no shares"
                )

        self._mint(to, shares)
        self._sync(reserve_token + token_amount_in, reserve_native + native_amount_in)
        self._emit(
            Mint,
            sender=self.router,
            recipient=to,
            token_amount=token_amount_in,
            native_amount=native_amount_in,
            shares=shares,
        )
        logger.info(
            "liquidity_minted",
            recipient=to,
            token_amount=token_amount_in,
            native_amount=native_amount_in,
            shares=shares,
        )
        return shares

    @external
    def burn(self, sender: str, share_amount: int, to: str) -> tuple[int, int]:
        """Destroy the router's shares and pay out the pro-rata reserves.

        The token leg goes straight to `to`; the native leg goes to the
        router, the pair's only native counterparty, which forwards it.

        Returns:
            (token_out, native_out)

        Raises:
            UnauthorizedCaller: If sender is not the router
            InsufficientShares: If the router holds fewer than share_amount shares
            InsufficientLiquidityBurned: If either leg rounds down to zero
        """
        self._only_router(sender)
        share_amount = S(share_amount).to_uint256()
        to = normalize_address(to)

        held = self.balance_of(self.router)
        if held < share_amount:
            raise InsufficientShares(f"Caller holds {held} shares, tried to burn {share_amount}")

        state = self.state
        reserve_token, reserve_native = state.reserve_token, state.reserve_native
        token_out, native_out = constant_product.withdrawal_amounts(
            share_amount, reserve_token, reserve_native, state.total_supply
        )
        if token_out == 0 or native_out == 0:
            raise InsufficientLiquidityBurned(
                f"Burning {share_amount} shares pays ({token_out}, {native_out})"
            )

        # Effects before interactions
        self._burn(self.router, share_amount)
        self._sync(reserve_token - token_out, reserve_native - native_out)

        self._pay_token(to, token_out)
        self._pay_native(native_out)
        self._check_backing()

        self._emit(
            Burn,
            sender=self.router,
            recipient=to,
            token_amount=token_out,
            native_amount=native_out,
            shares=share_amount,
        )
        logger.info(
            "liquidity_burned",
            recipient=to,
            shares=share_amount,
            token_amount=token_out,
            native_amount=native_out,
        )
        return token_out, native_out

    @external
    def swap(
        self,
        sender: str,
        token_in: int,
        native_in: int,
        token_out: int,
        native_out: int,
        to: str,
    ) -> None:
        """Trade one asset for the other, validating the fee-adjusted invariant.

        The router moves the input into the pair first and states how much
        arrived; the pair checks that it really holds it. Direction is not
        special-cased: the same constant-product check covers both. A token
        output is paid to `to`; a native output is paid to the router.

        Raises:
            UnauthorizedCaller: If sender is not the router
            InsufficientOutputAmount: Unless exactly one output leg is requested
            InsufficientInputAmount: Unless exactly one input leg is given, or if it did not arrive
            InvariantViolation: If input and output are the same asset, or k would shrink
            InsufficientLiquidity: If an output would drain its reserve
        """
        self._only_router(sender)
        token_in = S(token_in).to_uint256()
        native_in = S(native_in).to_uint256()
        token_out = S(token_out).to_uint256()
        native_out = S(native_out).to_uint256()
        to = normalize_address(to)

        if (token_out == 0) == (native_out == 0):
            raise InsufficientOutputAmount(
                f"Swap needs exactly one output leg, got ({token_out}, {native_out})"
            )
        if (token_in == 0) == (native_in == 0):
            raise InsufficientInputAmount(
                f"Swap needs exactly one input leg, got ({token_in}, {native_in})"
            )
        if (token_in > 0) == (token_out > 0):
            raise InvariantViolation(
                f"Swap input and output must be different assets, got "
                f"in=({token_in}, {native_in}) out=({token_out}, {native_out})"
            )

        state = self.state
        reserve_token, reserve_native = state.reserve_token, state.reserve_native
        if token_out >= reserve_token or native_out >= reserve_native:
            raise InsufficientLiquidity(
                f"Output ({token_out}, {native_out}) exceeds reserves ({reserve_token}, {reserve_native})"
            )
        self._require_received(token_in, native_in)

        if not constant_product.invariant_holds(
            reserve_token,
            reserve_native,
            token_in,
            native_in,
            token_out,
            native_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        ):
            raise InvariantViolation(
                f"Swap in=({token_in}, {native_in}) out=({token_out}, {native_out}) "
                f"would shrink k of reserves ({reserve_token}, {reserve_native})"
            )

        # Effects before interactions
        self._sync(reserve_token + token_in - token_out, reserve_native + native_in - native_out)

        self._pay_token(to, token_out)
        self._pay_native(native_out)
        self._check_backing()

        self._emit(
            Swap,
            sender=self.router,
            recipient=to,
            token_in=token_in,
            native_in=native_in,
            token_out=token_out,
            native_out=native_out,
        )
        logger.info(
            "pair_swapped",
            token_in=token_in,
            native_in=native_in,
            token_out=token_out,
            native_out=native_out,
        )

    # --- Internals ---

    def _debit(self, account: str, amount: int) -> None:
        held = self.state.balances.get(account, 0)
        if held < amount:
            raise InsufficientShares(f"{account} holds {held} shares, needs {amount}")
        super()._debit(account, amount)

    def _require_received(self, token_amount: int, native_amount: int) -> None:
        """Check the pair holds its reserves plus the claimed new input."""
        reserve_token, reserve_native = self.get_reserves()
        token_balance = self.token.balance_of(self.address)
        native_balance = self.chain.native_balance(self.address)
        if token_balance < reserve_token + token_amount:
            raise InsufficientInputAmount(
                f"Pair holds {token_balance} tokens, expected at least {reserve_token + token_amount}"
            )
        if native_balance < reserve_native + native_amount:
            raise InsufficientInputAmount(
                f"Pair holds {native_balance} native, expected at least {reserve_native + native_amount}"
            )

    def _sync(self, reserve_token: int, reserve_native: int) -> None:
        state = self.state
        state.reserve_token = S(reserve_token).to_uint256()
        state.reserve_native = S(reserve_native).to_uint256()
        self._emit(Sync, reserve_token=state.reserve_token, reserve_native=state.reserve_native)

    def _pay_token(self, to: str, amount: int) -> None:
        """Send tokens out, confirming the pair's balance fell by exactly amount."""
        if amount == 0:
            return
        before = self.token.balance_of(self.address)
        self.token.transfer(self.address, to, amount)
        sent = before - self.token.balance_of(self.address)
        if sent != amount:
            raise InvariantViolation(f"Token payout of {amount} moved {sent} out of the pair")

    def _pay_native(self, amount: int) -> None:
        """Send native value to the router, confirming the balance delta."""
        if amount == 0:
            return
        before = self.chain.native_balance(self.address)
        self.chain.transfer_native(self.address, self.router, amount)
        sent = before - self.chain.native_balance(self.address)
        if sent != amount:
            raise InvariantViolation(f"Native payout of {amount} moved {sent} out of the pair")

    def _check_backing(self) -> None:
        """Reserves must never exceed what the pair actually holds."""
        reserve_token, reserve_native = self.get_reserves()
        if self.token.balance_of(self.address) < reserve_token:
            raise InvariantViolation("Token reserve exceeds the pair's token balance")
        if self.chain.native_balance(self.address) < reserve_native:
            raise InvariantViolation("Native reserve exceeds the pair's native balance")
