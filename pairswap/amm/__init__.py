"""Pricing engines."""

from pairswap.amm.base import AMM, SwapQuote
from pairswap.amm.constant_product import ConstantProduct, constant_product, quote_price_ratio

__all__ = [
    "AMM",
    "SwapQuote",
    "ConstantProduct",
    "constant_product",
    "quote_price_ratio",
]
