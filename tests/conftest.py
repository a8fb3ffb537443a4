"""Pytest configuration and fixtures."""

import pytest

from spaceswap.chain import Chain
from spaceswap.constants import ONE
from spaceswap.deploy import Exchange
from tests.helpers import ALICE, make_exchange, make_small_exchange, seed_pool


@pytest.fixture
def chain() -> Chain:
    """An empty chain."""
    return Chain()


@pytest.fixture
def exchange() -> Exchange:
    """A freshly deployed exchange with funded, approved accounts and an empty pool."""
    return make_exchange()


@pytest.fixture
def seeded_exchange(exchange: Exchange) -> Exchange:
    """Exchange whose pool ALICE seeded with 1000 SPC and 10 ETH."""
    seed_pool(exchange, token_amount=1000 * ONE, native_amount=10 * ONE, provider=ALICE)
    return exchange


@pytest.fixture
def small_exchange() -> Exchange:
    """Exchange with a 10-share locked minimum and a (1000, 10) base-unit pool."""
    return make_small_exchange()
