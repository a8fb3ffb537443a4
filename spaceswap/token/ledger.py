"""Fungible balance ledger with allowances.

Shared by the SPC token and by the pair's pool-share ledger. Movements go
through `_deliver`, which subclasses override to change what the recipient
actually gets (the sender is always debited the full amount). Callers must
therefore use the returned amount rather than assume the requested one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from spaceswap.chain.contract import Contract, external
from spaceswap.chain.events import Approval, Transfer
from spaceswap.constants import ZERO_ADDRESS
from spaceswap.errors import InsufficientAllowance, InsufficientBalance
from spaceswap.models.types import normalize_address
from spaceswap.safe_int import UINT256_MAX, S

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain


@dataclass
class LedgerState:
    balances: dict[str, int] = field(default_factory=dict)
    # (owner, spender) -> amount
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0


class FungibleLedger(Contract):
    """Balances, allowances and supply for one fungible asset.

    An allowance of max uint256 is treated as unlimited and never
    decremented.
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str,
        symbol: str,
        state: LedgerState | None = None,
    ) -> None:
        super().__init__(chain, address)
        self.name = name
        self.symbol = symbol
        chain.init_storage(address, state if state is not None else LedgerState())

    @property
    def state(self) -> LedgerState:
        return self.chain.storage(self.address)

    # --- Views ---

    @property
    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, account: str) -> int:
        return self.state.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (normalize_address(owner), normalize_address(spender))
        return self.state.allowances.get(key, 0)

    # --- Entry points ---

    @external
    def approve(self, sender: str, spender: str, amount: int) -> bool:
        """Let spender move up to amount of sender's balance."""
        amount = S(amount).to_uint256()
        owner = normalize_address(sender)
        spender = normalize_address(spender)
        self.state.allowances[(owner, spender)] = amount
        self._emit(Approval, owner=owner, spender=spender, amount=amount)
        return True

    @external
    def transfer(self, sender: str, to: str, amount: int) -> int:
        """Move amount from sender to `to`.

        Returns:
            Amount actually delivered to `to`

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        return self._transfer(sender, to, amount)

    @external
    def transfer_from(self, sender: str, owner: str, to: str, amount: int) -> int:
        """Move amount from owner to `to`, spending sender's allowance.

        Returns:
            Amount actually delivered to `to`

        Raises:
            InsufficientAllowance: If sender may not move that much of owner's balance
            InsufficientBalance: If owner holds less than amount
        """
        self._spend_allowance(owner, sender, amount)
        return self._transfer(owner, to, amount)

    # --- Internals ---

    def _spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        key = (normalize_address(owner), normalize_address(spender))
        current = self.state.allowances.get(key, 0)
        if current == UINT256_MAX:
            return
        if current < amount:
            raise InsufficientAllowance(
                f"{self.symbol} allowance of {key[1]} over {key[0]} is {current}, needs {amount}"
            )
        self.state.allowances[key] = current - amount

    def _transfer(self, sender: str, to: str, amount: int) -> int:
        amount = S(amount).to_uint256()
        sender = normalize_address(sender)
        to = normalize_address(to)
        self._debit(sender, amount)
        return self._deliver(sender, to, amount)

    def _deliver(self, sender: str, to: str, amount: int) -> int:
        """Credit a debited amount; returns what `to` received."""
        self._credit(to, amount)
        self._emit(Transfer, sender=sender, recipient=to, amount=amount)
        return amount

    def _debit(self, account: str, amount: int) -> None:
        balance = self.state.balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol} balance of {account} is {balance}, needs {amount}"
            )
        self.state.balances[account] = balance - amount

    def _credit(self, account: str, amount: int) -> None:
        self.state.balances[account] = self.state.balances.get(account, 0) + amount

    def _mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        self.state.total_supply += amount
        self._credit(to, amount)
        self._emit(Transfer, sender=ZERO_ADDRESS, recipient=to, amount=amount)

    def _burn(self, owner: str, amount: int) -> None:
        owner = normalize_address(owner)
        self._debit(owner, amount)
        self.state.total_supply -= amount
        self._emit(Transfer, sender=owner, recipient=ZERO_ADDRESS, amount=amount)
