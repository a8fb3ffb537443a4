"""Protocol constants for the SPC/ETH exchange.

Centralizes well-known addresses and protocol parameters.
"""

from spaceswap.models.types import is_valid_address

# 18 decimals for both SPC and ETH
DECIMALS = 18
ONE = 10**DECIMALS

# SPC is minted once at deployment: 500k tokens
TOTAL_SUPPLY = 500_000 * ONE

# Shares locked forever on the first deposit
MINIMUM_LIQUIDITY = 10**3

# Swap fee retained by the pool: amount_in * 99 / 100 counts towards k
FEE_NUMERATOR = 99
FEE_DENOMINATOR = 100

# Transfer tax routed to the treasury when enabled: 2%
TAX_NUMERATOR = 2
TAX_DENOMINATOR = 100


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Validated at import time to catch typos early
BURN_ADDRESS = _validate_address("burn", "0xdead000000000000000042069420694206942069")
ZERO_ADDRESS = _validate_address("zero", "0x0000000000000000000000000000000000000000")
