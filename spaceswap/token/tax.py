"""Owner-controlled transfer tax switch.

The flag lives in its own contract so the token only asks "how much tax on
this amount", and the AMM never sees the flag at all: it only observes how
much actually arrived.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from spaceswap.chain.contract import Contract, external
from spaceswap.chain.events import TaxToggled
from spaceswap.constants import TAX_DENOMINATOR, TAX_NUMERATOR
from spaceswap.errors import UnauthorizedCaller
from spaceswap.models.types import normalize_address
from spaceswap.safe_int import S

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain

logger = structlog.get_logger()


@dataclass
class TaxState:
    enabled: bool = False


class TaxPolicy(Contract):
    """Transfer tax rate plus the owner-gated on/off flag (off at deployment)."""

    def __init__(
        self,
        chain: Chain,
        address: str,
        owner: str,
        numerator: int = TAX_NUMERATOR,
        denominator: int = TAX_DENOMINATOR,
    ) -> None:
        super().__init__(chain, address)
        self.owner = normalize_address(owner)
        self.numerator = numerator
        self.denominator = denominator
        chain.init_storage(address, TaxState())

    @property
    def state(self) -> TaxState:
        return self.chain.storage(self.address)

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    def tax_on(self, amount: int) -> int:
        """Tax withheld from a transfer of amount (floor), 0 when disabled."""
        if not self.state.enabled:
            return 0
        return (S(amount) * S(self.numerator) // S(self.denominator)).value

    @external
    def toggle(self, sender: str) -> bool:
        """Flip the tax flag.

        Returns:
            The new flag value

        Raises:
            UnauthorizedCaller: If sender is not the owner
        """
        if normalize_address(sender) != self.owner:
            raise UnauthorizedCaller(f"Caller {sender} is not the owner")
        self.state.enabled = not self.state.enabled
        self._emit(TaxToggled, enabled=self.state.enabled)
        logger.info("tax_toggled", enabled=self.state.enabled, policy=self.address)
        return self.state.enabled
