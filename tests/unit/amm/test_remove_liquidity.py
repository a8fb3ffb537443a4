"""Tests for Router.remove_liquidity."""

import pytest

from spaceswap.chain.events import Burn
from spaceswap.constants import ONE
from spaceswap.errors import InsufficientAllowance, InsufficientLiquidityBurned, InsufficientShares
from tests.helpers import ALICE, BOB, CAROL, STARTING_NATIVE, STARTING_TOKENS, seed_pool


class TestRemoveLiquidity:
    """Tests for burning shares through the router."""

    def test_pro_rata_withdrawal(self, small_exchange):
        result = small_exchange.router.remove_liquidity(ALICE, 90, ALICE)

        assert (result.token_amount, result.native_amount) == (900, 9)
        assert small_exchange.router.get_reserves() == (100, 1)
        assert small_exchange.pair.balance_of(ALICE) == 0
        assert small_exchange.chain.native_balance(ALICE) == 999
        assert small_exchange.token.balance_of(ALICE) == 99_900

    def test_partial_withdrawal_to_other_recipient(self, small_exchange):
        result = small_exchange.router.remove_liquidity(ALICE, 50, CAROL)

        assert result.recipient == CAROL
        assert small_exchange.token.balance_of(CAROL) == 100_000 + 500
        assert small_exchange.chain.native_balance(CAROL) == 1_000 + 5
        assert small_exchange.pair.balance_of(ALICE) == 40

    def test_round_trip_at_token_scale(self, exchange):
        """Withdrawing every share returns the deposit minus the locked minimum's cut."""
        result = seed_pool(exchange, token_amount=10 * ONE, native_amount=ONE)

        removed = exchange.router.remove_liquidity(ALICE, result.shares, ALICE)

        assert 10 * ONE - 5000 <= removed.token_amount <= 10 * ONE
        assert ONE - 5000 <= removed.native_amount <= ONE
        assert exchange.token.balance_of(ALICE) == STARTING_TOKENS - 10 * ONE + removed.token_amount
        assert exchange.chain.native_balance(ALICE) == STARTING_NATIVE - ONE + removed.native_amount

    def test_router_keeps_nothing(self, small_exchange):
        small_exchange.router.remove_liquidity(ALICE, 90, ALICE)

        router = small_exchange.router.address
        assert small_exchange.chain.native_balance(router) == 0
        assert small_exchange.pair.balance_of(router) == 0

    def test_emits_burn(self, small_exchange):
        small_exchange.router.remove_liquidity(ALICE, 90, ALICE)

        (burn,) = small_exchange.chain.events_of(Burn)
        assert burn.sender == small_exchange.router.address
        assert burn.recipient == ALICE


class TestRemoveLiquidityFailures:
    """Failed withdrawals leave shares and reserves untouched."""

    def test_without_share_approval(self, small_exchange):
        small_exchange.pair.approve(ALICE, small_exchange.router.address, 0)

        with pytest.raises(InsufficientAllowance):
            small_exchange.router.remove_liquidity(ALICE, 90, ALICE)

        assert small_exchange.pair.balance_of(ALICE) == 90

    def test_more_than_held(self, small_exchange):
        with pytest.raises(InsufficientShares):
            small_exchange.router.remove_liquidity(ALICE, 91, ALICE)

    def test_holder_without_shares(self, small_exchange):
        with pytest.raises(InsufficientShares):
            small_exchange.router.remove_liquidity(BOB, 1, BOB)

    def test_dust_withdrawal(self, small_exchange):
        """One share pays (10, 0); the zero native leg aborts the call."""
        with pytest.raises(InsufficientLiquidityBurned):
            small_exchange.router.remove_liquidity(ALICE, 1, ALICE)

        assert small_exchange.pair.balance_of(ALICE) == 90
        assert small_exchange.pair.balance_of(small_exchange.router.address) == 0
        assert small_exchange.router.get_reserves() == (1000, 10)
