"""Registry of pairs, one per asset.

The registry deploys pairs and remembers which pair trades which asset. An
entry is written once and never replaced, so a pair address obtained from
the registry stays valid for the life of the chain. Pairs keep the address
of the registry that created them and use it to find the second hop of a
routed swap.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import structlog

from pairswap.amm.constant_product import ConstantProduct
from pairswap.chain import Contract, external
from pairswap.constants import DEFAULT_FEE_BPS, ZERO_ADDRESS
from pairswap.errors import AlreadyExists, InvalidAsset
from pairswap.models.events import PairCreated
from pairswap.models.types import is_valid_address, normalize_address
from pairswap.pair import Pair

if TYPE_CHECKING:
    from pairswap.chain import Chain

logger = structlog.get_logger()


class Registry(Contract):
    """Create-once mapping from asset address to pair address.

    Args:
        chain: Chain to deploy on
        deployer: Deploying account
        fee_bps: Fee given to every pair this registry creates

    Raises:
        InvalidFee: If fee_bps is outside [0, 10000)
    """

    def __init__(self, chain: Chain, deployer: str, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        self.amm = ConstantProduct(fee_bps)
        self._pairs: dict[str, str] = {}
        super().__init__(chain, deployer)

    @property
    def fee_bps(self) -> int:
        return self.amm.fee_bps

    @external
    def create_pair(self, asset: str) -> str:
        """Deploy a pair for asset and record it.

        Returns:
            Address of the new pair

        Raises:
            InvalidAsset: If asset is the null address or not an address
            AlreadyExists: If the asset already has a pair
        """
        if not is_valid_address(asset):
            raise InvalidAsset(f"Invalid asset address: {asset}")
        asset = normalize_address(asset)
        if asset == ZERO_ADDRESS:
            raise InvalidAsset("Asset cannot be the null address")
        if asset in self._pairs:
            raise AlreadyExists(f"Asset {asset} already trades at {self._pairs[asset]}")

        pair = Pair(
            self.chain,
            deployer=self.address,
            asset=asset,
            registry=self.address,
            fee_bps=self.fee_bps,
        )
        self._pairs[asset] = pair.address

        self.chain.emit(PairCreated(emitter=self.address, asset=asset, pair=pair.address))
        logger.info(
            "pair_created",
            registry=self.address,
            asset=asset,
            pair=pair.address,
            creator=self.chain.msg.sender,
            fee_bps=self.fee_bps,
        )
        return pair.address

    def pair_of(self, asset: str) -> str:
        """Pair address for asset, or the null address if there is none."""
        if not is_valid_address(asset):
            return ZERO_ADDRESS
        return self._pairs.get(normalize_address(asset), ZERO_ADDRESS)

    def get_pair(self, asset: str) -> Pair | None:
        """Pair object for asset, or None."""
        address = self.pair_of(asset)
        if address == ZERO_ADDRESS:
            return None
        return self.chain.contract_at(address)  # type: ignore[return-value]

    @property
    def pair_count(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """(asset, pair) entries in creation order."""
        return iter(list(self._pairs.items()))

    def snapshot(self) -> dict[str, str]:
        return dict(self._pairs)

    def restore(self, state: dict[str, str]) -> None:
        self._pairs = dict(state)
