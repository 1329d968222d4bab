"""Reference fungible token.

The pair only relies on balance_of, transfer and transfer_from; this
implementation exists so the system runs end to end on a local Chain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pairswap.chain import Contract, external
from pairswap.constants import ZERO_ADDRESS
from pairswap.ledger.book import BalanceBook
from pairswap.ledger.errors import InsufficientAllowance, Unauthorized
from pairswap.models.events import Transfer
from pairswap.models.types import normalize_address

if TYPE_CHECKING:
    from pairswap.chain import Chain

logger = structlog.get_logger()


class Token(Contract):
    """Fungible token with allowances.

    The deployer is the minter and receives initial_supply.
    """

    def __init__(
        self,
        chain: Chain,
        deployer: str,
        symbol: str,
        initial_supply: int = 0,
        decimals: int = 18,
    ) -> None:
        self.symbol = symbol
        self.decimals = decimals
        self.minter = normalize_address(deployer, validate=True)
        self._book = BalanceBook()
        self._allowances: dict[tuple[str, str], int] = {}
        with chain.lock:
            super().__init__(chain, deployer)
            if initial_supply:
                self._book.mint(self.minter, initial_supply)
                self.chain.emit(
                    Transfer(
                        emitter=self.address,
                        from_address=ZERO_ADDRESS,
                        to_address=self.minter,
                        amount=initial_supply,
                    )
                )

    @property
    def total_supply(self) -> int:
        return self._book.total_supply

    def balance_of(self, owner: str) -> int:
        return self._book.balance_of(normalize_address(owner))

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    @external
    def transfer(self, to: str, amount: int) -> bool:
        """Move amount from the caller to ``to``.

        Raises:
            InsufficientBalance: If the caller holds less than amount
        """
        self._move(self.chain.msg.sender, normalize_address(to, validate=True), amount)
        return True

    @external
    def approve(self, spender: str, amount: int) -> bool:
        """Let spender pull up to amount of the caller's balance."""
        key = (self.chain.msg.sender, normalize_address(spender, validate=True))
        if amount < 0:
            raise ValueError(f"Allowance cannot be negative: {amount}")
        self._allowances[key] = amount
        return True

    @external
    def transfer_from(self, owner: str, to: str, amount: int) -> bool:
        """Move amount from owner to ``to`` on the caller's allowance.

        Raises:
            InsufficientAllowance: If the caller's allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        owner = normalize_address(owner, validate=True)
        key = (owner, self.chain.msg.sender)
        allowed = self._allowances.get(key, 0)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{self.chain.msg.sender} may spend {allowed} of {owner}'s {self.symbol}, needs {amount}"
            )
        self._allowances[key] = allowed - amount
        self._move(owner, normalize_address(to, validate=True), amount)
        return True

    @external
    def mint(self, to: str, amount: int) -> None:
        if self.chain.msg.sender != self.minter:
            raise Unauthorized(f"Only {self.minter} can mint {self.symbol}")
        to = normalize_address(to, validate=True)
        self._book.mint(to, amount)
        self.chain.emit(
            Transfer(emitter=self.address, from_address=ZERO_ADDRESS, to_address=to, amount=amount)
        )

    def _move(self, source: str, destination: str, amount: int) -> None:
        self._book.move(source, destination, amount)
        self.chain.emit(
            Transfer(
                emitter=self.address,
                from_address=source,
                to_address=destination,
                amount=amount,
            )
        )

    def snapshot(self) -> tuple[object, dict[tuple[str, str], int]]:
        return self._book.snapshot(), dict(self._allowances)

    def restore(self, state: tuple[object, dict[tuple[str, str], int]]) -> None:
        book, allowances = state
        self._book.restore(book)  # type: ignore[arg-type]
        self._allowances = dict(allowances)

    def __repr__(self) -> str:
        return f"Token({self.symbol}, {self.address})"
