"""Pytest configuration and fixtures."""

import pytest

from pairswap.chain import Chain
from pairswap.pair import Pair
from pairswap.registry import Registry
from pairswap.token import Token
from tests.helpers import (
    SEED_ASSET,
    SEED_NATIVE,
    STARTING_NATIVE,
    TARGET_SEED_ASSET,
    TARGET_SEED_NATIVE,
    make_token,
    seed_pair,
)


@pytest.fixture
def chain() -> Chain:
    """A fresh chain for each test."""
    return Chain()


@pytest.fixture
def operator(chain: Chain) -> str:
    """Account that deploys the registry."""
    return chain.create_account("operator", balance=STARTING_NATIVE)


@pytest.fixture
def alice(chain: Chain) -> str:
    """Liquidity provider; owns every test token."""
    return chain.create_account("alice", balance=STARTING_NATIVE)


@pytest.fixture
def bob(chain: Chain) -> str:
    """Trader."""
    return chain.create_account("bob", balance=STARTING_NATIVE)


@pytest.fixture
def carol(chain: Chain) -> str:
    """Unfunded bystander, used as a swap recipient."""
    return chain.create_account("carol")


@pytest.fixture
def registry(chain: Chain, operator: str) -> Registry:
    """Registry with the default 1% fee."""
    return Registry(chain, operator)


@pytest.fixture
def zero_fee_registry(chain: Chain, operator: str) -> Registry:
    """Registry whose pairs charge no fee."""
    return Registry(chain, operator, fee_bps=0)


@pytest.fixture
def token_a(chain: Chain, alice: str, bob: str) -> Token:
    return make_token(chain, alice, "TKA", holders=[bob])


@pytest.fixture
def token_c(chain: Chain, alice: str, bob: str) -> Token:
    return make_token(chain, alice, "TKC", holders=[bob])


def _create(registry: Registry, token: Token, sender: str) -> Pair:
    registry.create_pair(token.address, sender=sender)
    pair = registry.get_pair(token.address)
    assert pair is not None
    return pair


@pytest.fixture
def pair_a(registry: Registry, token_a: Token, operator: str) -> Pair:
    """Unfunded pair for token_a."""
    return _create(registry, token_a, operator)


@pytest.fixture
def seeded_pair_a(pair_a: Pair, token_a: Token, alice: str) -> Pair:
    """pair_a seeded by alice with (1000, 2000) whole units."""
    seed_pair(pair_a, token_a, alice, native=SEED_NATIVE, asset=SEED_ASSET)
    return pair_a


@pytest.fixture
def seeded_pair_c(registry: Registry, token_c: Token, alice: str, operator: str) -> Pair:
    """Routing target seeded by alice with (500, 4000) whole units."""
    pair = _create(registry, token_c, operator)
    seed_pair(pair, token_c, alice, native=TARGET_SEED_NATIVE, asset=TARGET_SEED_ASSET)
    return pair


@pytest.fixture
def zero_fee_pair(zero_fee_registry: Registry, token_a: Token, alice: str, operator: str) -> Pair:
    """Fee-free pair for token_a seeded with (1000, 2000) whole units."""
    pair = _create(zero_fee_registry, token_a, operator)
    seed_pair(pair, token_a, alice, native=SEED_NATIVE, asset=SEED_ASSET)
    return pair


@pytest.fixture
def starting_native() -> int:
    """Native balance every funded test account starts with."""
    return STARTING_NATIVE
