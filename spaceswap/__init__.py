"""SpaceSwap - constant-product SPC/ETH exchange."""

from spaceswap.deploy import Exchange, deploy_exchange

__version__ = "0.1.0"
__all__ = ["Exchange", "deploy_exchange", "__version__"]
