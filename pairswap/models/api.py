"""Pydantic models for the devnet HTTP API.

Amounts are accepted as ints or decimal strings and returned as decimal
strings.
"""

from enum import Enum

from pydantic import BaseModel, Field

from pairswap.models.types import Address, Uint256


class SwapSide(str, Enum):
    """Direction of a single-hop swap."""

    NATIVE_TO_ASSET = "native_to_asset"
    ASSET_TO_NATIVE = "asset_to_native"


class ErrorResponse(BaseModel):
    error: str = Field(description="Stable error code, e.g. SlippageExceeded")
    detail: str


class FundRequest(BaseModel):
    amount: Uint256


class AccountResponse(BaseModel):
    address: Address
    native: Uint256
    tokens: dict[str, Uint256] = Field(
        default_factory=dict, description="Balances keyed by token address"
    )
    shares: dict[str, Uint256] = Field(
        default_factory=dict, description="Liquidity shares keyed by pair address"
    )


class DeployTokenRequest(BaseModel):
    symbol: str = Field(min_length=1, max_length=16)
    owner: Address
    initial_supply: Uint256 = 0


class TokenResponse(BaseModel):
    address: Address
    symbol: str
    decimals: int
    total_supply: Uint256


class ApproveRequest(BaseModel):
    owner: Address
    spender: Address
    amount: Uint256


class CreatePairRequest(BaseModel):
    sender: Address
    asset: Address


class PairResponse(BaseModel):
    address: Address
    asset: Address
    registry: Address
    fee_bps: int
    native_reserve: Uint256
    asset_reserve: Uint256
    share_supply: Uint256
    spot_price: Uint256 | None = Field(
        default=None,
        description="Native per asset scaled by 1000; omitted for an unfunded pair",
    )


class QuoteResponse(BaseModel):
    side: SwapSide
    amount_in: Uint256
    amount_out: Uint256
    fee_bps: int
    price_impact_bps: int


class DepositRequest(BaseModel):
    sender: Address
    native_amount: Uint256
    asset_amount_max: Uint256


class DepositResponse(BaseModel):
    shares: Uint256
    share_supply: Uint256


class WithdrawRequest(BaseModel):
    sender: Address
    shares: Uint256


class WithdrawResponse(BaseModel):
    native_amount: Uint256
    asset_amount: Uint256


class SwapRequest(BaseModel):
    sender: Address
    side: SwapSide
    amount_in: Uint256
    min_out: Uint256 = 0
    recipient: Address | None = None


class SwapResponse(BaseModel):
    side: SwapSide
    amount_in: Uint256
    amount_out: Uint256
    recipient: Address


class RouteRequest(BaseModel):
    sender: Address
    asset_sold: Uint256
    min_asset_out: Uint256 = 0
    target_asset: Address


class RouteResponse(BaseModel):
    asset_sold: Uint256
    amount_out: Uint256
    target_pair: Address
