"""Constant-product (x * y = k) math for the SPC/ETH pair.

All formulas are integer-only and floor every division, so rounding always
favors the pool: swaps pay out slightly less, deposits mint slightly fewer
shares and withdrawals return slightly less than the exact rational value.
"""

from __future__ import annotations

import structlog

from spaceswap.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from spaceswap.errors import InsufficientLiquidity
from spaceswap.safe_int import UINT256_MAX, S

logger = structlog.get_logger()


class ConstantProduct:
    """Constant-product AMM math.

    Formula: amount_out = (amount_in * 99 * reserve_out) / (reserve_in * 100 + amount_in * 99)

    The 99/100 factor accounts for the 1% fee, which stays in the pool and is
    what makes k grow on every swap.
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> int:
        """Calculate output amount using constant product formula.

        Formula: amount_out = (in * fee * res_out) / (res_in * denom + in * fee)

        Args:
            amount_in: Input amount (what the pool actually received)
            reserve_in: Reserve of the input asset
            reserve_out: Reserve of the output asset
            fee_numerator: Fee numerator (default 99 for a 1% fee)
            fee_denominator: Fee denominator (default 100)

        Returns:
            Output amount, or 0 for empty input or an empty pool
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(fee_numerator)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(fee_denominator) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> int:
        """Calculate the input required for a desired output.

        Formula: amount_in = (res_in * out * denom) / ((res_out - out) * fee) + 1

        Args:
            amount_out: Desired output amount
            reserve_in: Reserve of the input asset
            reserve_out: Reserve of the output asset
            fee_numerator: Fee numerator (default 99 for a 1% fee)
            fee_denominator: Fee denominator (default 100)

        Returns:
            Required input amount (rounded up), 0 for no output, or max
            uint256 when the output would drain the reserve
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            # Can't extract the whole reserve
            return UINT256_MAX

        numerator = S(reserve_in) * S(amount_out) * S(fee_denominator)
        denominator = (S(reserve_out) - S(amount_out)) * S(fee_numerator)

        return ((numerator // denominator) + S(1)).value

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of asset B worth amount_a of asset A at the current ratio.

        Used for deposit ratio math; no fee applies.

        Raises:
            InsufficientLiquidity: If either reserve is empty
        """
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity(f"Cannot quote against reserves ({reserve_a}, {reserve_b})")
        if amount_a <= 0:
            return 0
        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value

    def initial_shares(self, amount_token: int, amount_native: int, minimum_liquidity: int) -> int:
        """Shares for the first deposit: floor(sqrt(t * n)) - minimum_liquidity.

        May be zero or negative; the pair decides whether that is acceptable.
        """
        return (S(amount_token) * S(amount_native)).sqrt().value - minimum_liquidity

    def deposit_shares(
        self,
        amount_token: int,
        amount_native: int,
        reserve_token: int,
        reserve_native: int,
        total_shares: int,
    ) -> int:
        """Shares for a deposit into a funded pool.

        Both legs are priced against the pre-deposit reserves and the smaller
        result wins, so an unbalanced deposit donates its surplus to the pool.
        """
        by_token = S(amount_token) * S(total_shares) // S(reserve_token)
        by_native = S(amount_native) * S(total_shares) // S(reserve_native)
        return by_token.min(by_native).value

    def withdrawal_amounts(
        self,
        share_amount: int,
        reserve_token: int,
        reserve_native: int,
        total_shares: int,
    ) -> tuple[int, int]:
        """Pro-rata (token_out, native_out) for burning share_amount shares."""
        token_out = S(share_amount) * S(reserve_token) // S(total_shares)
        native_out = S(share_amount) * S(reserve_native) // S(total_shares)
        return token_out.value, native_out.value

    def invariant_holds(
        self,
        reserve_token: int,
        reserve_native: int,
        token_in: int,
        native_in: int,
        token_out: int,
        native_out: int,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> bool:
        """Fee-adjusted constant-product check against pre-trade reserves.

        Each side's post-trade balance is scaled by the fee denominator and
        the fee share of its input is subtracted, so only 99% of an input
        counts towards k. For a one-directional trade this reduces to
        (reserve_in + 0.99 * in) * (reserve_out - out) >= reserve_in * reserve_out.

        Returns:
            True if the trade leaves k at least where it was
        """
        fee = S(fee_denominator) - S(fee_numerator)
        balance_token = S(reserve_token) + S(token_in) - S(token_out)
        balance_native = S(reserve_native) + S(native_in) - S(native_out)
        adjusted_token = balance_token * S(fee_denominator) - S(token_in) * fee
        adjusted_native = balance_native * S(fee_denominator) - S(native_in) * fee

        k_before = S(reserve_token) * S(reserve_native) * S(fee_denominator) * S(fee_denominator)
        holds = adjusted_token * adjusted_native >= k_before
        if not holds:
            logger.debug(
                "invariant_check_failed",
                reserve_token=reserve_token,
                reserve_native=reserve_native,
                token_in=token_in,
                native_in=native_in,
                token_out=token_out,
                native_out=native_out,
            )
        return holds


# Singleton instance
constant_product = ConstantProduct()
