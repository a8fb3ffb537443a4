"""Execution environment: native ledger, contract storage, events."""

from spaceswap.chain.chain import Chain
from spaceswap.chain.contract import Contract, external

__all__ = ["Chain", "Contract", "external"]
