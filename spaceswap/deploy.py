"""Deployment of a complete SPC/ETH exchange onto a Chain."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import structlog

from spaceswap.amm.pair import Pair
from spaceswap.amm.router import Router
from spaceswap.chain.chain import Chain
from spaceswap.config import DEFAULT_POOL_CONFIG, PoolConfig
from spaceswap.models.types import normalize_address
from spaceswap.token.space_coin import SpaceCoin
from spaceswap.token.tax import TaxPolicy

logger = structlog.get_logger()


@dataclass
class Exchange:
    """Handles to every deployed component of one exchange.

    `lock` serializes calls for callers that share the exchange across
    threads (the HTTP API); the contracts themselves are not thread-safe.
    """

    chain: Chain
    tax_policy: TaxPolicy
    token: SpaceCoin
    router: Router
    owner: str
    treasury: str
    config: PoolConfig = DEFAULT_POOL_CONFIG
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def pair(self) -> Pair:
        return self.router.pair

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the lock for one state-changing call, then drain its events.

        Events are logged as they are emitted. A long-running server does
        not keep them, so the log does not grow from one call to the next.
        """
        with self.lock:
            try:
                yield
            finally:
                drained = self.chain.drain_events()
                logger.debug("events_drained", count=len(drained))


def deploy_exchange(
    owner: str,
    treasury: str,
    *,
    chain: Chain | None = None,
    initial_holder: str | None = None,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Exchange:
    """Deploy tax policy, token and router (which deploys its pair).

    Args:
        owner: Deployer, and owner of the tax switch
        treasury: Receiver of the transfer tax
        chain: Chain to deploy on (a fresh one by default)
        initial_holder: Receiver of the whole token supply (default: owner)
        config: Pool and token parameters

    Returns:
        The deployed Exchange
    """
    chain = chain if chain is not None else Chain()
    owner = normalize_address(owner, validate=True)
    treasury = normalize_address(treasury, validate=True)
    holder = normalize_address(initial_holder or owner, validate=True)

    tax_policy = chain.deploy(
        TaxPolicy, owner, owner, config.tax_numerator, config.tax_denominator
    )
    token = chain.deploy(SpaceCoin, owner, tax_policy, treasury, holder, config.total_supply)
    router = chain.deploy(Router, owner, token, config)

    logger.info(
        "exchange_deployed",
        token=token.address,
        router=router.address,
        pair=router.pair.address,
        tax_policy=tax_policy.address,
        treasury=treasury,
    )
    return Exchange(
        chain=chain,
        tax_policy=tax_policy,
        token=token,
        router=router,
        owner=owner,
        treasury=treasury,
        config=config,
    )
