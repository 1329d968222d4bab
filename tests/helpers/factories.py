"""Factory functions for deploying and funding test contracts.

Usage:
    from tests.helpers import make_token, seed_pair

    token = make_token(chain, alice, "TKA")
    seed_pair(pair, token, alice, native=SEED_NATIVE, asset=SEED_ASSET)
"""

from pairswap.chain import Chain
from pairswap.pair import Pair
from pairswap.token import Token
from tests.helpers.constants import STARTING_SUPPLY


def make_token(
    chain: Chain,
    owner: str,
    symbol: str = "TKN",
    initial_supply: int = STARTING_SUPPLY,
    holders: list[str] | None = None,
) -> Token:
    """Deploy a token owned by owner and hand an equal share to each holder.

    Args:
        chain: Chain to deploy on
        owner: Minter, receives initial_supply
        symbol: Token symbol
        initial_supply: Amount minted to owner at deployment
        holders: Accounts that each receive initial_supply // 10 from owner

    Returns:
        Deployed Token
    """
    token = Token(chain, owner, symbol, initial_supply=initial_supply)
    for holder in holders or []:
        token.transfer(holder, initial_supply // 10, sender=owner)
    return token


def seed_pair(pair: Pair, token: Token, provider: str, native: int, asset: int) -> int:
    """Approve and deposit liquidity, returning the shares minted."""
    token.approve(pair.address, asset, sender=provider)
    return pair.deposit(asset, sender=provider, value=native)


def snapshot_balances(pair: Pair, token: Token, *accounts: str) -> dict[str, tuple[int, int]]:
    """(native, token) balance of each account and of the pair itself.

    Handy for asserting that a failed call left everything untouched.
    """
    native = pair.chain.native
    owners = [pair.address, *accounts]
    return {owner: (native.balance_of(owner), token.balance_of(owner)) for owner in owners}
