"""Pydantic models for pairswap events and API payloads."""

from pairswap.models.events import (
    AssetPurchase,
    Event,
    LiquidityAdded,
    LiquidityRemoved,
    NativePurchase,
    PairCreated,
    Transfer,
)
from pairswap.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "Event",
    "PairCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "AssetPurchase",
    "NativePurchase",
    "Transfer",
]
