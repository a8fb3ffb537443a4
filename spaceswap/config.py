"""Configuration for the pair, the token and the API server."""

import os
from dataclasses import dataclass, field

from spaceswap.constants import (
    BURN_ADDRESS,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    MINIMUM_LIQUIDITY,
    TAX_DENOMINATOR,
    TAX_NUMERATOR,
    TOTAL_SUPPLY,
)


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for pool and token math.

    Holding these as one frozen value makes it easy to deploy an exchange
    with different parameters in tests (e.g. a small minimum liquidity so
    hand-sized deposits can mint shares) while keeping every component of
    one deployment consistent.

    Attributes:
        fee_numerator: Share of each swap input counted towards k (99)
        fee_denominator: Fee denominator (100), so the fee is 1%
        minimum_liquidity: Shares locked to the burn address on first deposit
        burn_address: Non-redeemable holder of the locked shares
        tax_numerator: Transfer tax numerator (2)
        tax_denominator: Transfer tax denominator (100)
        total_supply: Token supply minted at deployment
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    minimum_liquidity: int = MINIMUM_LIQUIDITY
    burn_address: str = BURN_ADDRESS
    tax_numerator: int = TAX_NUMERATOR
    tax_denominator: int = TAX_DENOMINATOR
    total_supply: int = TOTAL_SUPPLY

    def __post_init__(self) -> None:
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}]: {self.fee_numerator}"
            )
        if not 0 <= self.tax_numerator < self.tax_denominator:
            raise ValueError(
                f"tax_numerator must be in [0, {self.tax_denominator}): {self.tax_numerator}"
            )
        if self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity cannot be negative: {self.minimum_liquidity}")


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ApiSettings:
    """API server settings, read from environment variables.

    - SPACESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - SPACESWAP_PORT: Port to bind to (default: 8000)
    - SPACESWAP_DEBUG: Enable debug/reload mode (default: false)
    - SPACESWAP_FAUCET_ENABLED: Allow POST /faucet native credits (default: false)
    - SPACESWAP_OWNER / SPACESWAP_TREASURY: Deployment accounts
    """

    host: str = field(default_factory=lambda: os.environ.get("SPACESWAP_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("SPACESWAP_PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_flag("SPACESWAP_DEBUG", "false"))
    faucet_enabled: bool = field(
        default_factory=lambda: _env_flag("SPACESWAP_FAUCET_ENABLED", "false")
    )
    owner: str = field(
        default_factory=lambda: os.environ.get(
            "SPACESWAP_OWNER", "0x1000000000000000000000000000000000000001"
        ).lower()
    )
    treasury: str = field(
        default_factory=lambda: os.environ.get(
            "SPACESWAP_TREASURY", "0x2000000000000000000000000000000000000002"
        ).lower()
    )
