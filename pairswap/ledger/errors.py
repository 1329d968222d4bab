"""Ledger error classes.

Raised by the native ledger, the reference token and the share ledger. Pair
operations let them propagate unchanged.
"""


class LedgerError(Exception):
    """Base error for ledger operations."""

    code = "LedgerError"


class InsufficientBalance(LedgerError):
    """Owner holds less than the amount being moved or burned."""

    code = "InsufficientBalance"


class InsufficientAllowance(LedgerError):
    """Spender's allowance is below the amount being pulled."""

    code = "InsufficientAllowance"


class Unauthorized(LedgerError):
    """Caller may not perform this ledger operation."""

    code = "Unauthorized"
