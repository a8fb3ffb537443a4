"""SPC token, its tax switch and the shared fungible ledger."""

from spaceswap.token.ledger import FungibleLedger, LedgerState
from spaceswap.token.space_coin import SpaceCoin
from spaceswap.token.tax import TaxPolicy

__all__ = ["FungibleLedger", "LedgerState", "SpaceCoin", "TaxPolicy"]
