"""Test helpers module for shared test utilities.

- constants: Common amounts and addresses
- factories: Token deployment and pair seeding
"""

from tests.helpers.constants import (
    NULL,
    SEED_ASSET,
    SEED_NATIVE,
    STARTING_NATIVE,
    STARTING_SUPPLY,
    TARGET_SEED_ASSET,
    TARGET_SEED_NATIVE,
    UNDEPLOYED,
)
from tests.helpers.factories import make_token, seed_pair, snapshot_balances

__all__ = [
    # Constants
    "NULL",
    "UNDEPLOYED",
    "STARTING_NATIVE",
    "STARTING_SUPPLY",
    "SEED_NATIVE",
    "SEED_ASSET",
    "TARGET_SEED_NATIVE",
    "TARGET_SEED_ASSET",
    # Factories
    "make_token",
    "seed_pair",
    "snapshot_balances",
]
