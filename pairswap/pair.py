"""Exchange pair: one asset traded against the native currency.

A pair holds two reserves and never stores them: the native reserve is the
pair's native balance and the asset reserve is the asset ledger's balance for
the pair. Liquidity providers own the pool through shares, minted
proportionally on deposit and burned on withdrawal.

Every mutating entry point follows the same order: validate, update the
pair's own state, then move funds. A native transfer can call back into the
pair, so by the time it happens the share ledger already reflects the
operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pairswap.amm.base import SwapQuote
from pairswap.amm.constant_product import ConstantProduct, quote_price_ratio
from pairswap.chain import Contract, external
from pairswap.constants import DEFAULT_FEE_BPS, ZERO_ADDRESS
from pairswap.errors import (
    InsufficientAssetAmount,
    InvalidAmount,
    InvalidAsset,
    InvalidRecipient,
    InvalidReserves,
    NoSuchPair,
    SelfRoutingNotAllowed,
    SlippageExceeded,
)
from pairswap.ledger.book import BalanceBook
from pairswap.models.events import (
    AssetPurchase,
    LiquidityAdded,
    LiquidityRemoved,
    NativePurchase,
    Transfer,
)
from pairswap.models.types import is_valid_address, normalize_address
from pairswap.safe_int import mul_div

if TYPE_CHECKING:
    from pairswap.chain import Chain
    from pairswap.registry import Registry
    from pairswap.token import Token

logger = structlog.get_logger()


class Pair(Contract):
    """Constant-product pair of the native currency and one asset.

    Args:
        chain: Chain to deploy on
        deployer: Deploying account or contract (the registry, normally)
        asset: Address of the asset ledger this pair trades; immutable
        registry: Address of the registry used for routed swaps, or None for a
                  standalone pair
        fee_bps: Input fee in basis points, fixed for the pair's lifetime
    """

    def __init__(
        self,
        chain: Chain,
        deployer: str,
        asset: str,
        registry: str | None = None,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> None:
        if not is_valid_address(asset) or normalize_address(asset) == ZERO_ADDRESS:
            raise InvalidAsset(f"Invalid asset address: {asset}")
        self.asset = normalize_address(asset)
        self.registry = normalize_address(registry) if registry is not None else ZERO_ADDRESS
        self.amm = ConstantProduct(fee_bps)
        self._shares = BalanceBook()
        super().__init__(chain, deployer)

    @property
    def fee_bps(self) -> int:
        return self.amm.fee_bps

    @property
    def asset_token(self) -> Token:
        token = self.chain.contract_at(self.asset)
        if token is None:
            raise InvalidAsset(f"No asset ledger deployed at {self.asset}")
        return token  # type: ignore[return-value]

    # --- Reserve accounting ---

    def asset_reserve(self) -> int:
        """Live balance of the bound asset held by the pair."""
        return self.asset_token.balance_of(self.address)

    def native_reserve(self) -> int:
        """Live native balance of the pair.

        Inside a value-bearing call this already includes msg.value; use
        _native_reserve_before_call() for the pre-call reserve.
        """
        return self.native_balance

    def get_reserves(self) -> tuple[int, int]:
        """(native_reserve, asset_reserve), both live."""
        return self.native_reserve(), self.asset_reserve()

    def _native_reserve_before_call(self) -> int:
        # The call frame credits msg.value before the body runs
        return self.native_balance - self.chain.msg.value

    # --- Pricing ---

    def quote(self, input_amount: int, input_reserve: int, output_reserve: int) -> int:
        """Constant-product output for input_amount at the pair's fee."""
        return self.amm.get_amount_out(input_amount, input_reserve, output_reserve)

    def quote_price_ratio(self, reserve_a: int, reserve_b: int) -> int:
        return quote_price_ratio(reserve_a, reserve_b)

    def get_asset_amount(self, native_sold: int) -> int:
        """Asset received for native_sold at current reserves."""
        native_reserve, asset_reserve = self.get_reserves()
        return self.quote(native_sold, native_reserve, asset_reserve)

    def get_native_amount(self, asset_sold: int) -> int:
        """Native received for asset_sold at current reserves."""
        native_reserve, asset_reserve = self.get_reserves()
        return self.quote(asset_sold, asset_reserve, native_reserve)

    def quote_native_for_asset(self, native_sold: int) -> SwapQuote:
        native_reserve, asset_reserve = self.get_reserves()
        return self.amm.quote(native_sold, native_reserve, asset_reserve)

    def quote_asset_for_native(self, asset_sold: int) -> SwapQuote:
        native_reserve, asset_reserve = self.get_reserves()
        return self.amm.quote(asset_sold, asset_reserve, native_reserve)

    def spot_price(self) -> int:
        """Native per asset, scaled by PRICE_RATIO_SCALE."""
        native_reserve, asset_reserve = self.get_reserves()
        return self.quote_price_ratio(native_reserve, asset_reserve)

    # --- Liquidity shares ---

    @property
    def share_supply(self) -> int:
        return self._shares.total_supply

    def share_balance_of(self, owner: str) -> int:
        return self._shares.balance_of(normalize_address(owner))

    def share_holders(self) -> list[tuple[str, int]]:
        return list(self._shares.holders())

    @external
    def transfer_shares(self, to: str, amount: int) -> bool:
        """Move liquidity shares from the caller to ``to``.

        Raises:
            InsufficientBalance: If the caller holds fewer shares than amount
        """
        sender = self.chain.msg.sender
        to = normalize_address(to, validate=True)
        self._shares.move(sender, to, amount)
        self.chain.emit(
            Transfer(emitter=self.address, from_address=sender, to_address=to, amount=amount)
        )
        return True

    @external(payable=True)
    def deposit(self, asset_amount_max: int) -> int:
        """Add liquidity: the attached native value plus a matching asset amount.

        The first deposit sets the price: all of asset_amount_max is taken and
        the provider receives one share per native unit. Later deposits take
        exactly the asset amount that keeps the reserve ratio, and mint shares
        in proportion to the native added.

        Returns:
            Shares minted to the caller

        Raises:
            InvalidAmount: If no native value is attached, the first deposit has
                           no asset, or a later deposit would mint no shares
            InsufficientAssetAmount: If asset_amount_max is below the
                                     proportional amount
        """
        msg = self.chain.msg
        provider = msg.sender
        native_amount = msg.value
        if native_amount <= 0:
            raise InvalidAmount("Deposit requires attached native value")

        supply = self._shares.total_supply
        if supply == 0:
            if asset_amount_max <= 0:
                raise InvalidAmount("First deposit requires a positive asset amount")
            asset_amount = asset_amount_max
            shares = native_amount
        else:
            native_before = self._native_reserve_before_call()
            if native_before <= 0:
                raise InvalidReserves("Funded pair has no native reserve")
            asset_amount = mul_div(native_amount, self.asset_reserve(), native_before)
            if asset_amount_max < asset_amount:
                raise InsufficientAssetAmount(
                    f"Deposit needs {asset_amount} asset, ceiling is {asset_amount_max}"
                )
            shares = mul_div(supply, native_amount, native_before)
            if shares == 0:
                raise InvalidAmount(f"Deposit of {native_amount} native mints no shares")

        self._shares.mint(provider, shares)
        self.chain.emit(
            Transfer(emitter=self.address, from_address=ZERO_ADDRESS, to_address=provider, amount=shares)
        )
        self.asset_token.transfer_from(provider, self.address, asset_amount, sender=self.address)

        self.chain.emit(
            LiquidityAdded(
                emitter=self.address,
                provider=provider,
                native_amount=native_amount,
                asset_amount=asset_amount,
                shares=shares,
            )
        )
        logger.info(
            "liquidity_added",
            pair=self.address,
            provider=provider,
            native_amount=native_amount,
            asset_amount=asset_amount,
            shares=shares,
            first_deposit=supply == 0,
        )
        return shares

    @external
    def withdraw(self, share_amount: int) -> tuple[int, int]:
        """Burn shares and pay out the matching fraction of both reserves.

        Shares are burned before either payout so a callback triggered by the
        native transfer sees the reduced supply.

        Returns:
            (native_out, asset_out)

        Raises:
            InvalidAmount: If share_amount is not positive
            InsufficientBalance: If the caller holds fewer shares
        """
        provider = self.chain.msg.sender
        if share_amount <= 0:
            raise InvalidAmount(f"Withdrawal must burn a positive share amount, got {share_amount}")

        supply = self._shares.total_supply
        self._shares.burn(provider, share_amount)
        native_reserve, asset_reserve = self.get_reserves()
        native_out = mul_div(native_reserve, share_amount, supply)
        asset_out = mul_div(asset_reserve, share_amount, supply)

        self.chain.emit(
            Transfer(emitter=self.address, from_address=provider, to_address=ZERO_ADDRESS, amount=share_amount)
        )
        if native_out:
            self.chain.send_native(self.address, provider, native_out)
        if asset_out:
            self.asset_token.transfer(provider, asset_out, sender=self.address)

        self.chain.emit(
            LiquidityRemoved(
                emitter=self.address,
                provider=provider,
                native_amount=native_out,
                asset_amount=asset_out,
                shares=share_amount,
            )
        )
        logger.info(
            "liquidity_removed",
            pair=self.address,
            provider=provider,
            native_amount=native_out,
            asset_amount=asset_out,
            shares=share_amount,
        )
        return native_out, asset_out

    # --- Swaps ---

    def _resolve_recipient(self, recipient: str | None) -> str:
        if recipient is None:
            return self.chain.msg.sender
        if not is_valid_address(recipient):
            raise InvalidRecipient(f"Invalid recipient address: {recipient}")
        recipient = normalize_address(recipient)
        if recipient in (ZERO_ADDRESS, self.address):
            raise InvalidRecipient(f"Recipient cannot be {recipient}")
        return recipient

    @external(payable=True)
    def swap_native_for_asset(self, min_out: int, recipient: str | None = None) -> int:
        """Sell the attached native value for the pair's asset.

        Args:
            min_out: Slippage floor on the asset received
            recipient: Receiver of the asset; defaults to the caller

        Returns:
            Asset amount delivered

        Raises:
            SlippageExceeded: If the output is below min_out
        """
        msg = self.chain.msg
        recipient = self._resolve_recipient(recipient)
        native_before = self._native_reserve_before_call()
        asset_bought = self.quote(msg.value, native_before, self.asset_reserve())
        if asset_bought < min_out:
            raise SlippageExceeded(f"Output {asset_bought} below minimum {min_out}")

        self.asset_token.transfer(recipient, asset_bought, sender=self.address)

        self.chain.emit(
            AssetPurchase(
                emitter=self.address,
                buyer=msg.sender,
                recipient=recipient,
                native_sold=msg.value,
                asset_bought=asset_bought,
            )
        )
        logger.info(
            "swap_native_for_asset",
            pair=self.address,
            buyer=msg.sender,
            recipient=recipient,
            native_sold=msg.value,
            asset_bought=asset_bought,
        )
        return asset_bought

    @external
    def swap_asset_for_native(
        self, asset_sold: int, min_out: int, recipient: str | None = None
    ) -> int:
        """Sell asset_sold of the pair's asset for native.

        The caller must have approved the pair for asset_sold.

        Returns:
            Native amount delivered

        Raises:
            SlippageExceeded: If the output is below min_out
        """
        buyer = self.chain.msg.sender
        recipient = self._resolve_recipient(recipient)
        native_bought = self.quote(asset_sold, self.asset_reserve(), self.native_reserve())
        if native_bought < min_out:
            raise SlippageExceeded(f"Output {native_bought} below minimum {min_out}")

        self.asset_token.transfer_from(buyer, self.address, asset_sold, sender=self.address)
        self.chain.send_native(self.address, recipient, native_bought)

        self.chain.emit(
            NativePurchase(
                emitter=self.address,
                buyer=buyer,
                recipient=recipient,
                asset_sold=asset_sold,
                native_bought=native_bought,
            )
        )
        logger.info(
            "swap_asset_for_native",
            pair=self.address,
            buyer=buyer,
            recipient=recipient,
            asset_sold=asset_sold,
            native_bought=native_bought,
        )
        return native_bought

    @external
    def routed_swap(self, asset_sold: int, min_asset_out: int, target_asset: str) -> int:
        """Exchange this pair's asset for target_asset through native.

        Hop 1 sells asset_sold into this pair for native. Hop 2 spends that
        native on the target asset's pair, delivering to the caller. Either
        hop failing reverts both.

        Returns:
            Target asset amount delivered to the caller

        Raises:
            NoSuchPair: If the registry has no pair for target_asset
            SelfRoutingNotAllowed: If target_asset resolves to this pair
            SlippageExceeded: If the second hop delivers less than min_asset_out
        """
        caller = self.chain.msg.sender
        target = self._routing_target(target_asset)

        native_bought = self.quote(asset_sold, self.asset_reserve(), self.native_reserve())
        self.asset_token.transfer_from(caller, self.address, asset_sold, sender=self.address)

        logger.debug(
            "routed_swap_first_hop",
            pair=self.address,
            caller=caller,
            asset_sold=asset_sold,
            native_bought=native_bought,
            target_pair=target.address,
        )
        asset_bought = target.swap_native_for_asset(
            min_asset_out, recipient=caller, sender=self.address, value=native_bought
        )

        self.chain.emit(
            NativePurchase(
                emitter=self.address,
                buyer=caller,
                recipient=target.address,
                asset_sold=asset_sold,
                native_bought=native_bought,
            )
        )
        logger.info(
            "routed_swap",
            pair=self.address,
            caller=caller,
            asset_sold=asset_sold,
            native_routed=native_bought,
            target_asset=target.asset,
            asset_bought=asset_bought,
        )
        return asset_bought

    def _routing_target(self, target_asset: str) -> Pair:
        if self.registry == ZERO_ADDRESS:
            raise NoSuchPair("Pair was not created by a registry")
        registry: Registry = self.chain.contract_at(self.registry)  # type: ignore[assignment]
        if registry is None:
            raise NoSuchPair(f"No registry deployed at {self.registry}")

        target_address = registry.pair_of(target_asset)
        if target_address == ZERO_ADDRESS:
            raise NoSuchPair(f"No pair for asset {target_asset}")
        if target_address == self.address:
            raise SelfRoutingNotAllowed(f"Asset {target_asset} is traded by this pair")
        return self.chain.contract_at(target_address)  # type: ignore[return-value]

    # --- Journaling ---

    def snapshot(self) -> object:
        return self._shares.snapshot()

    def restore(self, state: object) -> None:
        self._shares.restore(state)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"Pair({self.asset}, {self.address})"
