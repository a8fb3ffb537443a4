"""Events emitted by contracts and by native-asset transfers.

Events are appended to the chain's event log, which is rolled back together
with every other piece of state when a call fails.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Event:
    """Base class for log entries. `emitter` is the emitting contract's address."""

    emitter: str

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class NativeTransfer(Event):
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Transfer(Event):
    """Ledger movement. For taxed transfers `amount` is what `recipient` got."""

    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    spender: str
    amount: int


@dataclass(frozen=True)
class TaxToggled(Event):
    enabled: bool


@dataclass(frozen=True)
class Mint(Event):
    sender: str
    recipient: str
    token_amount: int
    native_amount: int
    shares: int


@dataclass(frozen=True)
class Burn(Event):
    sender: str
    recipient: str
    token_amount: int
    native_amount: int
    shares: int


@dataclass(frozen=True)
class Swap(Event):
    sender: str
    recipient: str
    token_in: int
    native_in: int
    token_out: int
    native_out: int


@dataclass(frozen=True)
class Sync(Event):
    reserve_token: int
    reserve_native: int
