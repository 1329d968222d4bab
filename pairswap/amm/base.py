"""Base classes for pricing engines."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SwapQuote:
    """Read-only result of quoting a swap against a pair's live reserves."""

    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int
    fee_bps: int

    @property
    def price_impact_bps(self) -> int:
        """How far the execution price falls short of the spot price, in bps.

        Spot price is reserve_out / reserve_in; the shortfall includes the fee.
        """
        # spot_out = amount_in * reserve_out / reserve_in, compared by cross-multiplying
        spot = self.amount_in * self.reserve_out
        executed = self.amount_out * self.reserve_in
        if spot == 0:
            return 0
        return (spot - executed) * 10_000 // spot


class AMM(ABC):
    """Abstract base class for pricing engines.

    Implementations are pure: every input is passed in and nothing is cached.
    """

    @abstractmethod
    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input amount
            reserve_in: Pre-trade reserve of the input asset
            reserve_out: Pre-trade reserve of the output asset

        Returns:
            Output amount
        """
        ...

    @abstractmethod
    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output amount
            reserve_in: Pre-trade reserve of the input asset
            reserve_out: Pre-trade reserve of the output asset

        Returns:
            Required input amount
        """
        ...
