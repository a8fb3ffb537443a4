"""In-process execution environment for the exchange contracts.

The Chain owns every piece of durable state: native-asset balances, one
storage object per contract and the event log. Contracts never keep state on
themselves; they read and write their storage through the Chain. That is
what lets `atomic()` give every external call all-or-nothing semantics: the
outermost call snapshots the whole state and a failure restores it.

Calls are sequential. Callers that share a Chain across threads (the HTTP
API) serialize access themselves.
"""

from __future__ import annotations

import copy
import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from spaceswap.chain.events import Event, NativeTransfer
from spaceswap.errors import InsufficientBalance
from spaceswap.models.types import normalize_address

if TYPE_CHECKING:
    from spaceswap.chain.contract import Contract

logger = structlog.get_logger()

C = TypeVar("C", bound="Contract")
E = TypeVar("E", bound=Event)


@dataclass
class _Snapshot:
    native: dict[str, int]
    storage: dict[str, Any]
    event_count: int


class Chain:
    """Native ledger, contract storage and event log with atomic calls."""

    def __init__(self) -> None:
        self._native: dict[str, int] = {}
        self._storage: dict[str, Any] = {}
        self._events: list[Event] = []
        self._contracts: dict[str, Contract] = {}
        self._nonces: dict[str, int] = {}
        self._depth = 0

    # --- Contracts ---

    def deploy(self, contract_cls: type[C], deployer: str, *args: Any, **kwargs: Any) -> C:
        """Create a contract at an address derived from (deployer, nonce).

        Raises:
            RuntimeError: If called from inside a contract call
        """
        if self._depth:
            raise RuntimeError("Contracts cannot be deployed inside a call")
        deployer = normalize_address(deployer)
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        address = "0x" + hashlib.sha256(f"{deployer}:{nonce}".encode()).hexdigest()[:40]

        contract = contract_cls(self, address, *args, **kwargs)
        self._contracts[address] = contract
        logger.info(
            "contract_deployed",
            contract=contract_cls.__name__,
            address=address,
            deployer=deployer,
        )
        return contract

    def is_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    def contract_at(self, address: str) -> Contract | None:
        return self._contracts.get(normalize_address(address))

    def init_storage(self, address: str, state: Any) -> None:
        """Attach a contract's initial storage. Only valid during deployment."""
        if address in self._storage:
            raise RuntimeError(f"Storage already initialized for {address}")
        self._storage[address] = state

    def storage(self, address: str) -> Any:
        return self._storage[address]

    # --- Atomic calls ---

    @property
    def in_call(self) -> bool:
        return self._depth > 0

    @contextmanager
    def atomic(self, label: str = "call") -> Iterator[None]:
        """Run a block as one all-or-nothing state transition.

        Nested blocks join the outermost one; only the outermost snapshots
        and, on any exception, restores native balances, storage and events
        before re-raising.
        """
        snapshot = self._snapshot() if self._depth == 0 else None
        self._depth += 1
        try:
            yield
        except Exception as exc:
            if snapshot is not None:
                self._restore(snapshot)
                logger.warning(
                    "call_reverted",
                    call=label,
                    error=type(exc).__name__,
                    detail=str(exc),
                )
            raise
        finally:
            self._depth -= 1

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            native=dict(self._native),
            storage=copy.deepcopy(self._storage),
            # The log is append-only inside a call, its length marks the rollback point
            event_count=len(self._events),
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        self._native = snapshot.native
        self._storage = snapshot.storage
        del self._events[snapshot.event_count :]

    # --- Native asset ---

    def native_balance(self, address: str) -> int:
        return self._native.get(normalize_address(address), 0)

    def fund(self, address: str, amount: int) -> None:
        """Credit native value out of thin air (genesis allocation / faucet)."""
        if amount < 0:
            raise ValueError(f"Funding amount cannot be negative: {amount}")
        address = normalize_address(address)
        self._native[address] = self._native.get(address, 0) + amount
        logger.debug("native_funded", address=address, amount=amount)

    def attach_value(self, sender: str, recipient: str, value: int) -> None:
        """Move value attached to a payable call into the called contract.

        Unlike transfer_native this does not invoke the recipient's
        receive_native hook: the value arrives as part of the call itself.
        """
        with self.atomic("attach_value"):
            self._move_native(sender, recipient, value)

    def transfer_native(self, sender: str, recipient: str, amount: int) -> None:
        """Send native value, invoking receive_native if recipient is a contract.

        Raises:
            InsufficientBalance: If sender holds less than amount
            UnauthorizedCaller: If the receiving contract rejects the sender
        """
        with self.atomic("transfer_native"):
            if not self._move_native(sender, recipient, amount):
                return
            contract = self.contract_at(recipient)
            if contract is not None:
                contract.receive_native(normalize_address(sender), amount)

    def _move_native(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0:
            raise ValueError(f"Native amount cannot be negative: {amount}")
        if amount == 0:
            return False
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self._native.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Native balance of {sender} is {balance}, needs {amount}"
            )
        self._native[sender] = balance - amount
        self._native[recipient] = self._native.get(recipient, 0) + amount
        self.emit(NativeTransfer(emitter=sender, sender=sender, recipient=recipient, amount=amount))
        return True

    # --- Events ---

    def emit(self, event: Event) -> None:
        self._events.append(event)
        logger.debug("event_emitted", log_name=event.name, **asdict(event))

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def events_of(self, event_cls: type[E]) -> list[E]:
        """All logged events of one type, oldest first."""
        return [e for e in self._events if isinstance(e, event_cls)]

    def drain_events(self) -> list[Event]:
        """Remove and return every logged event, oldest first.

        Long-running callers drain after each call so the log stays bounded.

        Raises:
            RuntimeError: If called from inside a contract call
        """
        if self._depth:
            raise RuntimeError("Events cannot be drained inside a call")
        events, self._events = self._events, []
        return events
