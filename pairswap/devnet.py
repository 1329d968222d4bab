"""Process-wide local chain used by the HTTP API.

A Devnet bundles a Chain, an operator account and a Registry deployed by that
operator. There is no signing: API callers name the account they act as.
"""

from __future__ import annotations

import structlog

from pairswap.chain import Chain
from pairswap.constants import DEFAULT_FEE_BPS
from pairswap.pair import Pair
from pairswap.registry import Registry
from pairswap.token import Token

logger = structlog.get_logger()


class Devnet:
    """A chain with a registry ready to create pairs."""

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        self.chain = Chain()
        self.operator = self.chain.create_account("operator")
        self.registry = Registry(self.chain, self.operator, fee_bps=fee_bps)

    def deploy_token(self, symbol: str, owner: str, initial_supply: int = 0) -> Token:
        token = Token(self.chain, owner, symbol, initial_supply=initial_supply)
        logger.info(
            "token_deployed",
            symbol=symbol,
            address=token.address,
            owner=owner,
            initial_supply=initial_supply,
        )
        return token

    def token(self, address: str) -> Token | None:
        contract = self.chain.contract_at(address)
        return contract if isinstance(contract, Token) else None

    def pair_for(self, asset: str) -> Pair | None:
        return self.registry.get_pair(asset)


def _create_default_devnet() -> Devnet:
    devnet = Devnet()
    logger.info(
        "devnet_started",
        registry=devnet.registry.address,
        operator=devnet.operator,
        fee_bps=devnet.registry.fee_bps,
    )
    return devnet


_default_devnet: Devnet | None = None


def get_default_devnet() -> Devnet:
    """Get the shared Devnet, creating it on first use."""
    global _default_devnet
    if _default_devnet is None:
        _default_devnet = _create_default_devnet()
    return _default_devnet
