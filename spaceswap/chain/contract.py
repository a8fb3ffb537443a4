"""Base class for contracts living on a Chain."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from spaceswap.chain.events import Event
from spaceswap.errors import UnauthorizedCaller

if TYPE_CHECKING:
    from spaceswap.chain.chain import Chain

F = TypeVar("F", bound=Callable[..., Any])


def external(method: F) -> F:
    """Mark a contract method as an entry point that runs atomically.

    If the method (or anything it calls) raises, every state change made
    since the outermost entry point started is undone.
    """

    @functools.wraps(method)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.chain.atomic(f"{type(self).__name__}.{method.__name__}"):
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Contract:
    """A contract: an address plus behavior, with its state held by the Chain.

    Subclasses attach their initial storage in __init__ via
    `chain.init_storage` and read it back through a typed `state` property.
    """

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = address

    def receive_native(self, sender: str, amount: int) -> None:
        """Hook run when native value is sent to this contract.

        Contracts refuse unsolicited value unless they override this.
        """
        raise UnauthorizedCaller(
            f"{type(self).__name__} does not accept native transfers from {sender}"
        )

    def _emit(self, event_cls: type[Event], **fields: Any) -> None:
        self.chain.emit(event_cls(emitter=self.address, **fields))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"
