"""Journaled balance mapping shared by every ledger in the system."""

from __future__ import annotations

from collections.abc import Iterator

from pairswap.ledger.errors import InsufficientBalance
from pairswap.safe_int import S


def _check_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Amount must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")
    return amount


class BalanceBook:
    """Owner -> balance mapping with a tracked total supply.

    The sum of all balances always equals total_supply. Entries are created on
    the first credit and removed when they reach zero, so holders() only ever
    lists owners with a positive balance.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, owner: str) -> int:
        return self._balances.get(owner, 0)

    def holders(self) -> Iterator[tuple[str, int]]:
        return iter(sorted(self._balances.items()))

    def __len__(self) -> int:
        return len(self._balances)

    def mint(self, to: str, amount: int) -> None:
        _check_amount(amount)
        if amount == 0:
            return
        self._balances[to] = self._balances.get(to, 0) + amount
        self._total_supply += amount

    def burn(self, owner: str, amount: int) -> None:
        """Destroy amount from owner's balance.

        Raises:
            InsufficientBalance: If owner holds less than amount
        """
        _check_amount(amount)
        self._debit(owner, amount)
        self._total_supply = (S(self._total_supply) - S(amount)).value

    def move(self, source: str, destination: str, amount: int) -> None:
        """Move amount between owners; supply is unchanged.

        Raises:
            InsufficientBalance: If source holds less than amount
        """
        _check_amount(amount)
        self._debit(source, amount)
        if amount:
            self._balances[destination] = self._balances.get(destination, 0) + amount

    def _debit(self, owner: str, amount: int) -> None:
        balance = self._balances.get(owner, 0)
        if balance < amount:
            raise InsufficientBalance(f"{owner} holds {balance}, needs {amount}")
        remaining = balance - amount
        if remaining == 0:
            self._balances.pop(owner, None)
        else:
            self._balances[owner] = remaining

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), self._total_supply

    def restore(self, state: tuple[dict[str, int], int]) -> None:
        balances, total_supply = state
        self._balances = dict(balances)
        self._total_supply = total_supply
