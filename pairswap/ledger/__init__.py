"""Balance ledgers: the shared balance book and the native currency."""

from pairswap.ledger.book import BalanceBook
from pairswap.ledger.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    LedgerError,
    Unauthorized,
)
from pairswap.ledger.native import NativeLedger

__all__ = [
    "BalanceBook",
    "NativeLedger",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Unauthorized",
]
