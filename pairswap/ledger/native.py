"""Native-currency ledger."""

from __future__ import annotations

import structlog

from pairswap.ledger.book import BalanceBook

logger = structlog.get_logger()


class NativeLedger(BalanceBook):
    """Balances of the chain's native asset.

    Value moves only as part of a call frame (see Chain.call) or through
    Chain.send_native; Chain.fund wraps fund() as the devnet faucet.
    """

    def fund(self, account: str, amount: int) -> None:
        self.mint(account, amount)
        logger.debug("native_funded", account=account, amount=amount)
