"""Event records emitted by contracts.

Events are for observability only; nothing in settlement reads them back.
Each record can render its arguments as ABI-encoded log data, the same layout
a contract log would carry.
"""

from __future__ import annotations

from typing import Any, ClassVar

from eth_abi import encode  # type: ignore[attr-defined]
from pydantic import BaseModel, ConfigDict

from pairswap.models.types import Address, Uint256


def _abi_value(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return bytes.fromhex(value[2:])
    return value


class Event(BaseModel):
    """Base class for emitted records.

    Subclasses declare their arguments as fields and list the matching ABI
    types, in field order, in ABI_TYPES.
    """

    model_config = ConfigDict(frozen=True)

    ABI_TYPES: ClassVar[tuple[str, ...]] = ()

    emitter: Address

    @property
    def name(self) -> str:
        return type(self).__name__

    def args(self) -> dict[str, Any]:
        return self.model_dump(exclude={"emitter"})

    def encode_data(self) -> str:
        """ABI-encode the event arguments as 0x-prefixed hex."""
        values = [
            _abi_value(abi_type, value)
            for abi_type, value in zip(self.ABI_TYPES, self.args().values(), strict=True)
        ]
        return "0x" + encode(list(self.ABI_TYPES), values).hex()


class PairCreated(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address")

    asset: Address
    pair: Address


class LiquidityAdded(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    provider: Address
    native_amount: Uint256
    asset_amount: Uint256
    shares: Uint256


class LiquidityRemoved(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    provider: Address
    native_amount: Uint256
    asset_amount: Uint256
    shares: Uint256


class AssetPurchase(Event):
    """Native sold for the pair's asset."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256", "uint256")

    buyer: Address
    recipient: Address
    native_sold: Uint256
    asset_bought: Uint256


class NativePurchase(Event):
    """The pair's asset sold for native."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256", "uint256")

    buyer: Address
    recipient: Address
    asset_sold: Uint256
    native_bought: Uint256


class Transfer(Event):
    """Token or share balance moved, minted (from zero) or burned (to zero)."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256")

    from_address: Address
    to_address: Address
    amount: Uint256


__all__ = [
    "Event",
    "PairCreated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "AssetPurchase",
    "NativePurchase",
    "Transfer",
]
