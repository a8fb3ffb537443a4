"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Test accounts and common amounts
- factories: Exchange deployment and pool seeding
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    OWNER,
    STARTING_NATIVE,
    STARTING_TOKENS,
    TREASURY,
)
from tests.helpers.factories import (
    SMALL_POOL_CONFIG,
    approve_router,
    enable_tax,
    make_exchange,
    make_small_exchange,
    seed_pool,
)

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "OWNER",
    "TREASURY",
    "STARTING_NATIVE",
    "STARTING_TOKENS",
    # Factories
    "SMALL_POOL_CONFIG",
    "approve_router",
    "enable_tax",
    "make_exchange",
    "make_small_exchange",
    "seed_pool",
]
