"""API endpoints for the pairswap devnet."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from pairswap.devnet import Devnet, get_default_devnet
from pairswap.models.api import (
    AccountResponse,
    ApproveRequest,
    CreatePairRequest,
    DeployTokenRequest,
    DepositRequest,
    DepositResponse,
    ErrorResponse,
    FundRequest,
    PairResponse,
    QuoteResponse,
    RouteRequest,
    RouteResponse,
    SwapRequest,
    SwapResponse,
    SwapSide,
    TokenResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from pairswap.models.types import is_valid_address, normalize_address, validate_uint256
from pairswap.pair import Pair
from pairswap.token import Token

logger = structlog.get_logger()

router = APIRouter()

# Domain errors are translated to 400 by the handlers in main.py
DOMAIN_ERRORS: dict[int | str, dict[str, Any]] = {400: {"model": ErrorResponse}}


def get_devnet() -> Devnet:
    """Dependency provider for the devnet.

    Override this in tests to inject a fresh chain:
        app.dependency_overrides[get_devnet] = lambda: Devnet()
    """
    return get_default_devnet()


def _path_address(value: str) -> str:
    if not is_valid_address(normalize_address(value)):
        raise HTTPException(status_code=422, detail=f"Invalid address: {value}")
    return normalize_address(value)


def _require_pair(devnet: Devnet, asset: str) -> Pair:
    pair = devnet.pair_for(_path_address(asset))
    if pair is None:
        raise HTTPException(status_code=404, detail=f"No pair for asset {asset}")
    return pair


def _require_token(devnet: Devnet, address: str) -> Token:
    token = devnet.token(_path_address(address))
    if token is None:
        raise HTTPException(status_code=404, detail=f"No token at {address}")
    return token


def _pair_response(pair: Pair) -> PairResponse:
    native_reserve, asset_reserve = pair.get_reserves()
    return PairResponse(
        address=pair.address,
        asset=pair.asset,
        registry=pair.registry,
        fee_bps=pair.fee_bps,
        native_reserve=native_reserve,
        asset_reserve=asset_reserve,
        share_supply=pair.share_supply,
        spot_price=pair.spot_price() if pair.share_supply else None,
    )


# --- Accounts and tokens ---


@router.post("/accounts/{address}/fund", response_model=AccountResponse, responses=DOMAIN_ERRORS)
def fund_account(
    address: str, request: FundRequest, devnet: Devnet = Depends(get_devnet)
) -> AccountResponse:
    """Faucet: mint native currency to an account."""
    account = _path_address(address)
    devnet.chain.fund(account, request.amount)
    return get_account(account, devnet)


@router.get("/accounts/{address}", response_model=AccountResponse)
def get_account(address: str, devnet: Devnet = Depends(get_devnet)) -> AccountResponse:
    """Native, token and share balances of an account."""
    account = _path_address(address)
    with devnet.chain.lock:
        tokens = {
            token.address: token.balance_of(account)
            for token in devnet.chain.contracts(Token)
            if token.balance_of(account)
        }
        shares = {
            pair.address: pair.share_balance_of(account)
            for pair in devnet.chain.contracts(Pair)
            if pair.share_balance_of(account)
        }
        native = devnet.chain.native.balance_of(account)
    return AccountResponse(address=account, native=native, tokens=tokens, shares=shares)


@router.post("/tokens", response_model=TokenResponse, responses=DOMAIN_ERRORS)
def deploy_token(
    request: DeployTokenRequest, devnet: Devnet = Depends(get_devnet)
) -> TokenResponse:
    """Deploy a reference token, minting the initial supply to its owner."""
    token = devnet.deploy_token(request.symbol, request.owner, request.initial_supply)
    return TokenResponse(
        address=token.address,
        symbol=token.symbol,
        decimals=token.decimals,
        total_supply=token.total_supply,
    )


@router.post("/tokens/{token_address}/approve", responses=DOMAIN_ERRORS)
def approve(
    token_address: str, request: ApproveRequest, devnet: Devnet = Depends(get_devnet)
) -> dict[str, str]:
    token = _require_token(devnet, token_address)
    token.approve(request.spender, request.amount, sender=request.owner)
    return {"allowance": str(token.allowance(request.owner, request.spender))}


# --- Pairs ---


@router.post("/pairs", response_model=PairResponse, responses=DOMAIN_ERRORS)
def create_pair(request: CreatePairRequest, devnet: Devnet = Depends(get_devnet)) -> PairResponse:
    """Create the pair for an asset through the registry."""
    devnet.registry.create_pair(request.asset, sender=request.sender)
    return _pair_response(_require_pair(devnet, request.asset))


@router.get("/pairs/{asset}", response_model=PairResponse, response_model_exclude_none=True)
def get_pair(asset: str, devnet: Devnet = Depends(get_devnet)) -> PairResponse:
    return _pair_response(_require_pair(devnet, asset))


@router.get("/pairs/{asset}/quote", response_model=QuoteResponse, responses=DOMAIN_ERRORS)
def quote(
    asset: str,
    side: SwapSide,
    amount: str = Query(description="Input amount as a decimal string"),
    devnet: Devnet = Depends(get_devnet),
) -> QuoteResponse:
    """Quote a single-hop swap against live reserves without executing it."""
    pair = _require_pair(devnet, asset)
    try:
        amount_in = validate_uint256(amount)
    except ValueError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err

    if side is SwapSide.NATIVE_TO_ASSET:
        result = pair.quote_native_for_asset(amount_in)
    else:
        result = pair.quote_asset_for_native(amount_in)
    return QuoteResponse(
        side=side,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
        fee_bps=result.fee_bps,
        price_impact_bps=result.price_impact_bps,
    )


@router.post("/pairs/{asset}/deposit", response_model=DepositResponse, responses=DOMAIN_ERRORS)
def deposit(
    asset: str, request: DepositRequest, devnet: Devnet = Depends(get_devnet)
) -> DepositResponse:
    pair = _require_pair(devnet, asset)
    shares = pair.deposit(
        request.asset_amount_max, sender=request.sender, value=request.native_amount
    )
    return DepositResponse(shares=shares, share_supply=pair.share_supply)


@router.post("/pairs/{asset}/withdraw", response_model=WithdrawResponse, responses=DOMAIN_ERRORS)
def withdraw(
    asset: str, request: WithdrawRequest, devnet: Devnet = Depends(get_devnet)
) -> WithdrawResponse:
    pair = _require_pair(devnet, asset)
    native_amount, asset_amount = pair.withdraw(request.shares, sender=request.sender)
    return WithdrawResponse(native_amount=native_amount, asset_amount=asset_amount)


@router.post("/pairs/{asset}/swap", response_model=SwapResponse, responses=DOMAIN_ERRORS)
def swap(asset: str, request: SwapRequest, devnet: Devnet = Depends(get_devnet)) -> SwapResponse:
    """Execute a single-hop swap in either direction."""
    pair = _require_pair(devnet, asset)
    recipient = request.recipient or request.sender
    if request.side is SwapSide.NATIVE_TO_ASSET:
        amount_out = pair.swap_native_for_asset(
            request.min_out, recipient, sender=request.sender, value=request.amount_in
        )
    else:
        amount_out = pair.swap_asset_for_native(
            request.amount_in, request.min_out, recipient, sender=request.sender
        )
    return SwapResponse(
        side=request.side,
        amount_in=request.amount_in,
        amount_out=amount_out,
        recipient=recipient,
    )


@router.post("/pairs/{asset}/route", response_model=RouteResponse, responses=DOMAIN_ERRORS)
def route(asset: str, request: RouteRequest, devnet: Devnet = Depends(get_devnet)) -> RouteResponse:
    """Sell this pair's asset for target_asset through the native currency."""
    pair = _require_pair(devnet, asset)
    amount_out = pair.routed_swap(
        request.asset_sold,
        request.min_asset_out,
        request.target_asset,
        sender=request.sender,
    )
    logger.info(
        "route_executed",
        source_asset=pair.asset,
        target_asset=request.target_asset,
        asset_sold=request.asset_sold,
        amount_out=amount_out,
    )
    return RouteResponse(
        asset_sold=request.asset_sold,
        amount_out=amount_out,
        target_pair=devnet.registry.pair_of(request.target_asset),
    )
