#!/usr/bin/env python3
"""Simulate a routed swap on a local chain.

Deploys two tokens, creates and seeds a pair for each through a registry, then
sells the first asset for the second via the native currency and reports the
reserves before and after.

Run with: python scripts/simulate_routed_swap.py --sell 10 --fee-bps 30
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pairswap.chain import Chain  # noqa: E402
from pairswap.constants import UNIT  # noqa: E402
from pairswap.errors import ExchangeError  # noqa: E402
from pairswap.ledger.errors import LedgerError  # noqa: E402
from pairswap.pair import Pair  # noqa: E402
from pairswap.registry import Registry  # noqa: E402
from pairswap.token import Token  # noqa: E402

logger = structlog.get_logger()


def seed(pair: Pair, token: Token, provider: str, native: int, asset: int) -> None:
    token.approve(pair.address, asset, sender=provider)
    pair.deposit(asset, sender=provider, value=native)


def log_reserves(label: str, *pairs: Pair) -> None:
    for pair in pairs:
        native, asset = pair.get_reserves()
        logger.info(
            label,
            pair=pair.address,
            asset=pair.asset_token.symbol,
            native_reserve=native,
            asset_reserve=asset,
            spot_price=pair.spot_price(),
        )


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate a routed swap between two pairs")
    parser.add_argument(
        "--sell",
        type=int,
        default=10,
        help="Whole units of the first asset to sell (default: 10)",
    )
    parser.add_argument(
        "--min-out",
        type=int,
        default=0,
        help="Minimum base units of the second asset to accept (default: 0)",
    )
    parser.add_argument(
        "--fee-bps",
        type=int,
        default=100,
        help="Pair fee in basis points (default: 100)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (call frames, events)",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    chain = Chain()
    operator = chain.create_account("operator")
    provider = chain.create_account("provider", balance=10_000 * UNIT)
    trader = chain.create_account("trader")

    registry = Registry(chain, operator, fee_bps=args.fee_bps)
    source = Token(chain, provider, "SRC", initial_supply=1_000_000 * UNIT)
    target = Token(chain, provider, "DST", initial_supply=1_000_000 * UNIT)
    source.transfer(trader, args.sell * UNIT, sender=provider)

    source_pair: Pair = chain.contract_at(registry.create_pair(source.address, sender=operator))  # type: ignore[assignment]
    target_pair: Pair = chain.contract_at(registry.create_pair(target.address, sender=operator))  # type: ignore[assignment]
    seed(source_pair, source, provider, native=1000 * UNIT, asset=2000 * UNIT)
    seed(target_pair, target, provider, native=500 * UNIT, asset=4000 * UNIT)
    log_reserves("reserves_before", source_pair, target_pair)

    source.approve(source_pair.address, args.sell * UNIT, sender=trader)
    try:
        bought = source_pair.routed_swap(
            args.sell * UNIT, args.min_out, target.address, sender=trader
        )
    except (ExchangeError, LedgerError) as err:
        logger.error("routed_swap_failed", error=type(err).__name__, detail=str(err))
        log_reserves("reserves_unchanged", source_pair, target_pair)
        return 1

    log_reserves("reserves_after", source_pair, target_pair)
    logger.info(
        "routed_swap_complete",
        sold=args.sell * UNIT,
        bought=bought,
        trader_source_balance=source.balance_of(trader),
        trader_target_balance=target.balance_of(trader),
        events=len(chain.events),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
