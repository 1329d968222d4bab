"""Constant-product pricing with a proportional input fee.

The pool prices trades so that reserve_in * reserve_out is preserved net of
fees. The fee is taken from the input before the curve is applied, so the pool
keeps it as extra reserve, and every division truncates toward zero, which
always favors the pool.
"""

from __future__ import annotations

from pairswap.amm.base import AMM, SwapQuote
from pairswap.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS, PRICE_RATIO_SCALE
from pairswap.errors import InvalidFee, InvalidInput, InvalidReserves
from pairswap.safe_int import S, mul_div, mul_div_up


def _check_reserves(*reserves: int) -> None:
    for reserve in reserves:
        if reserve <= 0:
            raise InvalidReserves(f"Reserves must be positive, got {reserves}")


class ConstantProduct(AMM):
    """Constant-product AMM math.

    Formula: amount_out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))

    At the default 100 bps this is the same curve as
    (in * 99 * res_out) / (res_in * 100 + in * 99).
    """

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        if not 0 <= fee_bps < BPS_DENOMINATOR:
            raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOMINATOR}), got {fee_bps}")
        self.fee_bps = fee_bps

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier (10000 - fee_bps). 9900 for the default 1%."""
        return BPS_DENOMINATOR - self.fee_bps

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using the constant product formula.

        Raises:
            InvalidReserves: If either reserve is zero
            InvalidInput: If amount_in is not positive

        Returns:
            Output amount, always strictly less than reserve_out
        """
        _check_reserves(reserve_in, reserve_out)
        if amount_in <= 0:
            raise InvalidInput(f"Input amount must be positive, got {amount_in}")

        amount_in_with_fee = (S(amount_in) * S(self.fee_multiplier)).to_uint256()
        denominator = (S(reserve_in) * S(BPS_DENOMINATOR) + S(amount_in_with_fee)).to_uint256()
        return mul_div(amount_in_with_fee, reserve_out, denominator)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the input needed to receive at least amount_out.

        Formula: amount_in = ceil((res_in * out * 10000) / ((res_out - out) * (10000 - fee)))

        Raises:
            InvalidReserves: If either reserve is zero
            InvalidInput: If amount_out is not positive or not below reserve_out
        """
        _check_reserves(reserve_in, reserve_out)
        if amount_out <= 0:
            raise InvalidInput(f"Output amount must be positive, got {amount_out}")
        if amount_out >= reserve_out:
            raise InvalidInput(f"Output {amount_out} must be below reserve {reserve_out}")

        numerator = (S(reserve_in) * S(BPS_DENOMINATOR)).to_uint256()
        denominator = ((S(reserve_out) - S(amount_out)) * S(self.fee_multiplier)).to_uint256()
        return mul_div_up(numerator, amount_out, denominator)

    def quote(self, amount_in: int, reserve_in: int, reserve_out: int) -> SwapQuote:
        """Quote a swap and keep the inputs alongside the result."""
        return SwapQuote(
            amount_in=amount_in,
            amount_out=self.get_amount_out(amount_in, reserve_in, reserve_out),
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            fee_bps=self.fee_bps,
        )


def quote_price_ratio(reserve_a: int, reserve_b: int) -> int:
    """Price of b in units of a, scaled by PRICE_RATIO_SCALE.

    For display only; settlement never uses it.

    Raises:
        InvalidReserves: If either reserve is zero
    """
    _check_reserves(reserve_a, reserve_b)
    return mul_div(reserve_a, PRICE_RATIO_SCALE, reserve_b)


# Default-fee instance
constant_product = ConstantProduct()


__all__ = [
    "ConstantProduct",
    "constant_product",
    "quote_price_ratio",
]
