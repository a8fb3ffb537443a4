"""User-facing router for the SPC/ETH pair.

The router holds no state of its own between calls. It works out how much
of each asset a call should actually use, moves assets between the caller
and the pair, checks slippage limits and hands the invariant math to the
pair. It deploys its pair at construction and is the pair's only caller.

Native value reaches the router only as the value attached to a payable
entry point or as a payout from its own pair; anything else is refused.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from spaceswap.amm.pair import Pair
from spaceswap.amm.results import Asset, LiquidityAdded, LiquidityRemoved, SwapResult
from spaceswap.chain.contract import Contract, external
from spaceswap.config import DEFAULT_POOL_CONFIG, PoolConfig
from spaceswap.errors import InsufficientInputAmount, InsufficientOutputAmount, UnauthorizedCaller
from spaceswap.math.constant_product import constant_product
from spaceswap.models.types import normalize_address
from spaceswap.safe_int import S

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain
    from spaceswap.token.ledger import FungibleLedger

logger = structlog.get_logger()


class Router(Contract):
    """Liquidity and swap entry points for end users."""

    def __init__(
        self,
        chain: Chain,
        address: str,
        token: FungibleLedger,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        super().__init__(chain, address)
        self.token = token
        self.config = config
        self.pair: Pair = chain.deploy(Pair, address, token, address, config)

    def receive_native(self, sender: str, amount: int) -> None:
        if normalize_address(sender) != self.pair.address:
            raise UnauthorizedCaller(f"Caller {sender} is not the SPC-ETH pair")
        logger.debug("router_received_native", amount=amount)

    # --- Quotes ---

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_token, reserve_native) of the pair."""
        return self.pair.get_reserves()

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B equivalent to amount_a of A at the given reserve ratio."""
        return constant_product.quote(amount_a, reserve_a, reserve_b)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Swap output for amount_in arriving at the pair, after the pool fee."""
        return constant_product.get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        )

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input that must arrive at the pair to receive amount_out (rounded up)."""
        return constant_product.get_amount_in(
            amount_out,
            reserve_in,
            reserve_out,
            self.config.fee_numerator,
            self.config.fee_denominator,
        )

    def quote_swap(self, asset_in: Asset, amount_in: int) -> int:
        """Output for swapping amount_in of asset_in at current reserves.

        amount_in is what the pair receives; a taxed token input delivers
        less than the caller sends.
        """
        reserve_token, reserve_native = self.get_reserves()
        if asset_in is Asset.NATIVE:
            return self.get_amount_out(amount_in, reserve_native, reserve_token)
        return self.get_amount_out(amount_in, reserve_token, reserve_native)

    # --- Liquidity ---

    @external
    def add_liquidity(
        self,
        sender: str,
        token_amount_desired: int,
        to: str,
        value: int = 0,
    ) -> LiquidityAdded:
        """Deposit SPC and ETH at the current ratio and mint shares to `to`.

        `value` is the native amount attached to the call. On an empty pool
        both amounts are used as given and set the price. Otherwise the
        deposit is trimmed to the reserve ratio: surplus native is refunded,
        and surplus tokens are simply never pulled.

        If the token transfer is taxed, shares are minted for what the pair
        actually received and the native leg is re-quoted from that amount;
        the extra native is refunded too.

        Raises:
            InsufficientAllowance: If the router may not pull the tokens
            InsufficientBalance: If the caller lacks the tokens or the value
        """
        sender = normalize_address(sender)
        to = normalize_address(to)
        token_amount_desired = S(token_amount_desired).to_uint256()
        value = S(value).to_uint256()

        self.chain.attach_value(sender, self.address, value)
        reserve_token, reserve_native = self.get_reserves()
        token_amount, native_amount = self._deposit_amounts(
            token_amount_desired, value, reserve_token, reserve_native
        )

        received = self.token.transfer_from(self.address, sender, self.pair.address, token_amount)
        if received < token_amount and (reserve_token or reserve_native):
            native_amount = min(native_amount, self.quote(received, reserve_token, reserve_native))

        self.chain.transfer_native(self.address, self.pair.address, native_amount)
        shares = self.pair.mint(self.address, received, native_amount, to)

        refund = value - native_amount
        self.chain.transfer_native(self.address, sender, refund)

        logger.info(
            "liquidity_added",
            sender=sender,
            recipient=to,
            token_amount=received,
            native_amount=native_amount,
            shares=shares,
            native_refund=refund,
        )
        return LiquidityAdded(
            token_amount=received,
            native_amount=native_amount,
            shares=shares,
            native_refund=refund,
            recipient=to,
        )

    def _deposit_amounts(
        self,
        token_desired: int,
        native_desired: int,
        reserve_token: int,
        reserve_native: int,
    ) -> tuple[int, int]:
        """(token, native) to deposit so the pair's price is unchanged."""
        if reserve_token == 0 and reserve_native == 0:
            return token_desired, native_desired

        native_optimal = self.quote(token_desired, reserve_token, reserve_native)
        if native_optimal <= native_desired:
            return token_desired, native_optimal

        # native_optimal > native_desired implies token_optimal <= token_desired
        token_optimal = self.quote(native_desired, reserve_native, reserve_token)
        return token_optimal, native_desired

    @external
    def remove_liquidity(self, sender: str, share_amount: int, to: str) -> LiquidityRemoved:
        """Burn shares and send both legs to `to`.

        The caller must have approved the router for share_amount shares.

        Raises:
            InsufficientAllowance: If the shares were not approved to the router
            InsufficientShares: If the caller holds fewer shares
        """
        sender = normalize_address(sender)
        to = normalize_address(to)
        share_amount = S(share_amount).to_uint256()

        self.pair.transfer_from(self.address, sender, self.address, share_amount)
        token_out, native_out = self.pair.burn(self.address, share_amount, to)
        self.chain.transfer_native(self.address, to, native_out)

        logger.info(
            "liquidity_removed",
            sender=sender,
            recipient=to,
            shares=share_amount,
            token_amount=token_out,
            native_amount=native_out,
        )
        return LiquidityRemoved(
            shares=share_amount,
            token_amount=token_out,
            native_amount=native_out,
            recipient=to,
        )

    # --- Swaps ---

    @external
    def swap_native_for_token(
        self,
        sender: str,
        amount_out_min: int,
        to: str,
        value: int = 0,
    ) -> SwapResult:
        """Sell the attached native value for tokens sent to `to`.

        The output is quoted and checked against amount_out_min before any
        state changes.

        Raises:
            InsufficientInputAmount: If no value is attached
            InsufficientOutputAmount: If the output is below amount_out_min
        """
        sender = normalize_address(sender)
        to = normalize_address(to)
        amount_out_min = S(amount_out_min).to_uint256()
        value = S(value).to_uint256()
        if value == 0:
            raise InsufficientInputAmount("No native value attached")

        reserve_token, reserve_native = self.get_reserves()
        amount_out = self.get_amount_out(value, reserve_native, reserve_token)
        if amount_out == 0 or amount_out < amount_out_min:
            raise InsufficientOutputAmount(
                f"Insufficient output amount: {amount_out} < minimum {amount_out_min}"
            )

        self.chain.attach_value(sender, self.address, value)
        self.chain.transfer_native(self.address, self.pair.address, value)
        self.pair.swap(self.address, 0, value, amount_out, 0, to)

        logger.info(
            "swapped_native_for_token",
            sender=sender,
            recipient=to,
            amount_in=value,
            amount_out=amount_out,
        )
        return SwapResult(
            amount_in=value,
            amount_out=amount_out,
            asset_in=Asset.NATIVE,
            asset_out=Asset.TOKEN,
            recipient=to,
        )

    @external
    def swap_token_for_native(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        to: str,
    ) -> SwapResult:
        """Sell amount_in tokens for native value sent to `to`.

        The tokens go straight from the caller into the pair, and the output
        is priced on what the pair received, which is less than amount_in
        while the transfer tax is on. A failed slippage check aborts the
        whole call, pull included.

        Raises:
            InsufficientInputAmount: If amount_in is zero
            InsufficientAllowance: If the router may not pull amount_in tokens
            InsufficientOutputAmount: If the output is below amount_out_min
        """
        sender = normalize_address(sender)
        to = normalize_address(to)
        amount_in = S(amount_in).to_uint256()
        amount_out_min = S(amount_out_min).to_uint256()
        if amount_in == 0:
            raise InsufficientInputAmount("No tokens offered")

        reserve_token, reserve_native = self.get_reserves()
        received = self.token.transfer_from(self.address, sender, self.pair.address, amount_in)
        amount_out = self.get_amount_out(received, reserve_token, reserve_native)
        if amount_out == 0 or amount_out < amount_out_min:
            raise InsufficientOutputAmount(
                f"Insufficient output amount: {amount_out} < minimum {amount_out_min}"
            )

        self.pair.swap(self.address, received, 0, 0, amount_out, self.address)
        self.chain.transfer_native(self.address, to, amount_out)

        logger.info(
            "swapped_token_for_native",
            sender=sender,
            recipient=to,
            amount_in=amount_in,
            received=received,
            amount_out=amount_out,
        )
        return SwapResult(
            amount_in=received,
            amount_out=amount_out,
            asset_in=Asset.TOKEN,
            asset_out=Asset.NATIVE,
            recipient=to,
        )
