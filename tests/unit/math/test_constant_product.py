"""Tests for constant-product math."""

import pytest

from spaceswap.errors import InsufficientLiquidity
from spaceswap.math import ConstantProduct, constant_product
from spaceswap.safe_int import UINT256_MAX


class TestGetAmountOut:
    """Tests for the fee-adjusted swap output."""

    def test_one_native_into_small_pool(self):
        """1 native against (1000, 10): floor(99 * 1000 / (100 * 10 + 99)) = 90."""
        assert constant_product.get_amount_out(1, 10, 1000) == 90

    def test_fee_reduces_output(self):
        """With the 1% fee, output is below the fee-free constant-product output."""
        amount_in = 10**18
        reserve_in = 100 * 10**18
        reserve_out = 1000 * 10**18
        no_fee = amount_in * reserve_out // (reserve_in + amount_in)

        out = constant_product.get_amount_out(amount_in, reserve_in, reserve_out)

        assert 0 < out < no_fee

    def test_zero_input(self):
        assert constant_product.get_amount_out(0, 100, 100) == 0

    def test_zero_reserves(self):
        assert constant_product.get_amount_out(100, 0, 100) == 0
        assert constant_product.get_amount_out(100, 100, 0) == 0

    def test_custom_fee(self):
        """A 0.3% fee (997/1000) gives the classic Uniswap V2 output."""
        out = constant_product.get_amount_out(1000, 10_000, 10_000, 997, 1000)
        assert out == 1000 * 997 * 10_000 // (10_000 * 1000 + 1000 * 997)

    def test_singleton_is_default_instance(self):
        assert isinstance(constant_product, ConstantProduct)


class TestGetAmountIn:
    """Tests for the exact-output quote."""

    def test_inverse_of_amount_out(self):
        """The required input always buys at least the requested output."""
        reserve_in, reserve_out = 10 * 10**18, 1000 * 10**18
        amount_out = 50 * 10**18

        amount_in = constant_product.get_amount_in(amount_out, reserve_in, reserve_out)

        assert constant_product.get_amount_out(amount_in, reserve_in, reserve_out) >= amount_out
        assert constant_product.get_amount_out(amount_in - 1, reserve_in, reserve_out) <= amount_out

    def test_output_at_reserve_is_unreachable(self):
        assert constant_product.get_amount_in(1000, 10, 1000) == UINT256_MAX

    def test_zero_output(self):
        assert constant_product.get_amount_in(0, 10, 1000) == 0


class TestQuote:
    """Tests for the fee-free ratio quote used by deposits."""

    def test_ratio(self):
        """100 tokens against 1000:10 is worth 1 native."""
        assert constant_product.quote(100, 1000, 10) == 1

    def test_floors(self):
        assert constant_product.quote(150, 1000, 10) == 1

    def test_zero_amount(self):
        assert constant_product.quote(0, 1000, 10) == 0

    def test_empty_reserve_raises(self):
        with pytest.raises(InsufficientLiquidity):
            constant_product.quote(100, 0, 10)


class TestShareMath:
    """Tests for mint and burn share math."""

    def test_initial_shares(self):
        assert constant_product.initial_shares(1000, 10, 10) == 90
        assert constant_product.initial_shares(1000, 10, 1000) == -900

    def test_initial_shares_at_token_scale(self):
        """10 SPC and 1 ETH mint sqrt(10) * 1e18 shares before the lock."""
        shares = constant_product.initial_shares(10 * 10**18, 10**18, 1000)
        assert shares == 3162277660168379331 - 1000

    def test_deposit_shares_takes_smaller_leg(self):
        """An unbalanced deposit is credited on its scarcer leg."""
        # (1000, 10) pool with 100 shares; 100 token is 10 shares, 5 native would be 50
        assert constant_product.deposit_shares(100, 5, 1000, 10, 100) == 10

    def test_second_deposit_at_token_scale(self):
        """1 SPC + 0.1 ETH into a (10, 1) pool mints a tenth of the supply."""
        total = 3162277660168379331
        shares = constant_product.deposit_shares(10**18, 10**17, 10 * 10**18, 10**18, total)
        assert shares == 316227766016837933

    def test_withdrawal_amounts_pro_rata(self):
        assert constant_product.withdrawal_amounts(50, 1000, 10, 100) == (500, 5)

    def test_withdrawal_floors(self):
        assert constant_product.withdrawal_amounts(1, 1000, 10, 100) == (10, 0)


class TestInvariant:
    """Tests for the fee-adjusted constant-product check."""

    def test_quoted_swap_holds(self):
        out = constant_product.get_amount_out(1, 10, 1000)
        assert constant_product.invariant_holds(1000, 10, 0, 1, out, 0)

    def test_one_more_than_quoted_fails(self):
        out = constant_product.get_amount_out(1, 10, 1000)
        assert not constant_product.invariant_holds(1000, 10, 0, 1, out + 1, 0)

    def test_fee_free_output_fails(self):
        """Taking the output a zero-fee pool would pay breaks the 1% check."""
        amount_in = 10**18
        reserve_token, reserve_native = 1000 * 10**18, 10 * 10**18
        no_fee = amount_in * reserve_token // (reserve_native + amount_in)
        assert not constant_product.invariant_holds(
            reserve_token, reserve_native, 0, amount_in, no_fee, 0
        )

    def test_token_to_native(self):
        out = constant_product.get_amount_out(500, 1000, 10)
        assert constant_product.invariant_holds(1000, 10, 500, 0, 0, out)
