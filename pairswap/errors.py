"""Exchange error classes.

Each error carries a stable ``code`` that the API returns verbatim, so callers
can tell a slippage failure from a bad routing target without parsing messages.
Ledger failures (balance/allowance) live in pairswap.ledger.errors and
propagate through pair operations unchanged.
"""


class ExchangeError(Exception):
    """Base error for pair and registry operations."""

    code = "ExchangeError"


class InvalidReserves(ExchangeError):
    """A reserve is zero where a ratio has to be computed."""

    code = "InvalidReserves"


class InvalidInput(ExchangeError):
    """Quote input is zero or otherwise malformed."""

    code = "InvalidInput"


class InvalidAmount(ExchangeError):
    """Deposit, withdrawal or swap amount is zero or malformed."""

    code = "InvalidAmount"


class InsufficientAssetAmount(ExchangeError):
    """Deposit ceiling is below the proportional asset amount."""

    code = "InsufficientAssetAmount"


class SlippageExceeded(ExchangeError):
    """Computed output is below the caller's minimum."""

    code = "SlippageExceeded"


class NoSuchPair(ExchangeError):
    """The registry has no pair for the requested asset."""

    code = "NoSuchPair"


class SelfRoutingNotAllowed(ExchangeError):
    """A routed swap resolved to the pair it started from."""

    code = "SelfRoutingNotAllowed"


class AlreadyExists(ExchangeError):
    """The registry already maps this asset to a pair."""

    code = "AlreadyExists"


class InvalidAsset(ExchangeError):
    """Asset identifier is the null address or malformed."""

    code = "InvalidAsset"


class InvalidRecipient(ExchangeError):
    """Output recipient is the null address or the pair itself."""

    code = "InvalidRecipient"


class NotPayable(ExchangeError):
    """Native value was attached to an entry point that does not accept it."""

    code = "NotPayable"


class InvalidFee(ExchangeError):
    """Fee is outside [0, 10000) basis points."""

    code = "InvalidFee"
