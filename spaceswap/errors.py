"""AMM error classes.

Every error aborts the whole call: the chain restores its snapshot before the
exception reaches the caller, so no partial effects survive.
"""


class AMMError(Exception):
    """Base error for pair, router and token operations."""

    pass


class InsufficientOutputAmount(AMMError):
    """Output is below the caller's minimum, or no output leg was requested."""

    pass


class InsufficientInputAmount(AMMError):
    """No input, or the pair did not receive the input it was told about."""

    pass


class InsufficientLiquidity(AMMError):
    """Requested output would drain a reserve, or the pool is empty."""

    pass


class InvariantViolation(AMMError):
    """Constant-product check failed: the pool would be underpaid."""

    pass


class InsufficientInitialLiquidity(AMMError):
    """First deposit too small to mint shares above the locked minimum."""

    pass


class InsufficientLiquidityMinted(AMMError):
    """Deposit rounds down to zero shares."""

    pass


class InsufficientLiquidityBurned(AMMError):
    """Withdrawal rounds down to zero of both assets."""

    pass


class InsufficientShares(AMMError):
    """Caller holds fewer pool shares than it tried to burn."""

    pass


class InsufficientAllowance(AMMError):
    """Spender was not approved for the amount it tried to move."""

    pass


class InsufficientBalance(AMMError):
    """Account holds less than it tried to send."""

    pass


class UnauthorizedCaller(AMMError):
    """Caller is not allowed to use this entry point."""

    pass
