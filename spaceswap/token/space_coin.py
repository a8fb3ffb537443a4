"""SPC: the fungible token traded against ETH, with an optional transfer tax."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from spaceswap.chain.events import Transfer
from spaceswap.constants import TOTAL_SUPPLY
from spaceswap.models.types import normalize_address
from spaceswap.safe_int import S
from spaceswap.token.ledger import FungibleLedger

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain
    from spaceswap.token.tax import TaxPolicy

logger = structlog.get_logger()


class SpaceCoin(FungibleLedger):
    """Fixed-supply token whose transfers may be taxed.

    When the injected TaxPolicy is enabled, every transfer routes
    floor(amount * 2 / 100) to the treasury and delivers the rest. The whole
    supply is minted to `initial_holder` at construction, so the sum of all
    balances (treasury included) always equals the total supply.
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        tax_policy: TaxPolicy,
        treasury: str,
        initial_holder: str,
        total_supply: int = TOTAL_SUPPLY,
    ) -> None:
        super().__init__(chain, address, name="SpaceCoin", symbol="SPC")
        self.tax_policy = tax_policy
        self.treasury = normalize_address(treasury)
        self._mint(initial_holder, S(total_supply).to_uint256())

    def _deliver(self, sender: str, to: str, amount: int) -> int:
        tax = self.tax_policy.tax_on(amount)
        if tax == 0:
            return super()._deliver(sender, to, amount)

        delivered = (S(amount) - S(tax)).value
        self._credit(self.treasury, tax)
        self._emit(Transfer, sender=sender, recipient=self.treasury, amount=tax)
        self._credit(to, delivered)
        self._emit(Transfer, sender=sender, recipient=to, amount=delivered)
        logger.debug("transfer_taxed", sender=sender, recipient=to, amount=amount, tax=tax)
        return delivered
