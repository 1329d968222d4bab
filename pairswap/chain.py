"""In-process execution environment for pairs, tokens and the registry.

The Chain plays the role of the host platform:
- Addresses for accounts and contracts
- A native-currency ledger, credited to the callee before a call body runs
- Call frames exposing msg.sender and msg.value to contract code
- All-or-nothing frames: state is snapshotted on entry and restored if the
  frame raises, so a failed top-level call leaves no trace
- An event log

Execution is single-threaded per top-level call. Nested calls run
synchronously on the same thread; the chain's re-entrant lock serializes
top-level calls and faucet funding from different threads.
"""

from __future__ import annotations

import functools
import hashlib
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog
from eth_abi import encode  # type: ignore[attr-defined]

from pairswap.constants import ZERO_ADDRESS
from pairswap.errors import NotPayable
from pairswap.ledger.native import NativeLedger
from pairswap.models.events import Event
from pairswap.models.types import normalize_address

logger = structlog.get_logger()

R = TypeVar("R")
C = TypeVar("C", bound="Contract")


@dataclass(frozen=True)
class CallFrame:
    """The message of an in-flight call."""

    sender: str
    target: str
    value: int = 0


def derive_address(deployer: str, nonce: int) -> str:
    """Deterministic contract address from deployer and deployment nonce."""
    encoded = encode(["address", "uint256"], [bytes.fromhex(deployer[2:]), nonce])
    return "0x" + hashlib.sha3_256(encoded).hexdigest()[-40:]


def account_address(label: str) -> str:
    """Deterministic externally-owned account address for a label."""
    return "0x" + hashlib.sha3_256(label.encode()).hexdigest()[-40:]


class Contract:
    """Base class for code deployed on a Chain.

    Subclasses hold their state in attributes and override snapshot() and
    restore() so that a failed frame can roll it back. A contract that
    defines receive() is notified when native value is sent to it.
    """

    def __init__(self, chain: Chain, deployer: str) -> None:
        self.chain = chain
        self.address = chain.deploy(self, deployer)

    @property
    def native_balance(self) -> int:
        return self.chain.native.balance_of(self.address)

    def snapshot(self) -> Any:
        return None

    def restore(self, state: Any) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"


def external(
    func: Callable[..., R] | None = None, *, payable: bool = False
) -> Any:
    """Mark a Contract method as an entry point.

    The wrapped method takes keyword-only ``sender`` and (for payable methods)
    ``value`` arguments and runs inside a Chain call frame. Inside the body the
    message is available as ``self.chain.msg``.

    Usage:
        class Pair(Contract):
            @external(payable=True)
            def deposit(self, asset_amount_max: int) -> int: ...

        pair.deposit(1000, sender=alice, value=500)
    """

    def decorator(fn: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(fn)
        def wrapper(self: Contract, *args: Any, sender: str, value: int = 0, **kwargs: Any) -> R:
            if value and not payable:
                raise NotPayable(f"{fn.__name__} does not accept native value")
            with self.chain.call(sender, self.address, value):
                return fn(self, *args, **kwargs)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


class Chain:
    """Host state: native ledger, deployed contracts, call stack and events."""

    def __init__(self) -> None:
        self.native = NativeLedger()
        self.events: list[Event] = []
        self._contracts: dict[str, Contract] = {}
        self._nonces: dict[str, int] = {}
        self._frames: list[CallFrame] = []
        self._lock = threading.RLock()

    # --- Accounts and contracts ---

    def create_account(self, label: str, balance: int = 0) -> str:
        """Create (or reuse) a labelled account, optionally funding it."""
        address = account_address(label)
        if balance:
            self.fund(address, balance)
        return address

    def fund(self, account: str, amount: int) -> None:
        """Faucet: mint native value to account outside any call frame."""
        with self._lock:
            self.native.fund(normalize_address(account, validate=True), amount)

    def deploy(self, contract: Contract, deployer: str) -> str:
        """Assign an address to a new contract and start tracking its state."""
        deployer = normalize_address(deployer, validate=True)
        with self._lock:
            nonce = self._nonces.get(deployer, 0)
            self._nonces[deployer] = nonce + 1
            address = derive_address(deployer, nonce)
            self._contracts[address] = contract
        logger.debug(
            "contract_deployed",
            kind=type(contract).__name__,
            address=address,
            deployer=deployer,
        )
        return address

    def contract_at(self, address: str) -> Contract | None:
        return self._contracts.get(normalize_address(address))

    def is_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    def contracts(self, kind: type[C]) -> list[C]:
        """Deployed contracts of the given type, in deployment order."""
        with self._lock:
            return [c for c in self._contracts.values() if isinstance(c, kind)]

    # --- Call frames ---

    @property
    def msg(self) -> CallFrame:
        """The innermost in-flight call.

        Raises:
            RuntimeError: If no call is in flight
        """
        if not self._frames:
            raise RuntimeError("No call in flight")
        return self._frames[-1]

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def lock(self) -> threading.RLock:
        """Lock held by every call frame; hold it for consistent multi-contract reads."""
        return self._lock

    @contextmanager
    def call(self, sender: str, target: str, value: int = 0) -> Iterator[CallFrame]:
        """Run a call frame from sender to target carrying value.

        The value is credited to target before the body runs. If the body
        raises, every journaled change made inside the frame (including the
        value transfer and emitted events) is rolled back and the exception
        propagates.
        """
        sender = normalize_address(sender, validate=True)
        target = normalize_address(target, validate=True)
        with self._lock:
            saved = self._snapshot()
            frame = CallFrame(sender=sender, target=target, value=value)
            self._frames.append(frame)
            try:
                if value:
                    self.native.move(sender, target, value)
                yield frame
            except BaseException:
                self._restore(saved)
                logger.debug(
                    "call_reverted",
                    sender=sender,
                    target=target,
                    value=value,
                    depth=len(self._frames),
                )
                raise
            finally:
                self._frames.pop()

    def send_native(self, sender: str, recipient: str, amount: int) -> None:
        """Transfer native value, notifying the recipient if it is a contract.

        A contract recipient's receive() runs inside the transfer frame and
        may call back into the sender.
        """
        if normalize_address(recipient) == ZERO_ADDRESS:
            raise ValueError("Cannot send native value to the null address")
        with self.call(sender, recipient, amount):
            contract = self.contract_at(recipient)
            receive = getattr(contract, "receive", None)
            if receive is not None:
                receive()

    # --- Events ---

    def emit(self, event: Event) -> None:
        self.events.append(event)
        logger.debug(
            "event_emitted", event_name=event.name, emitter=event.emitter, args=event.args()
        )

    def events_of(self, kind: type[Event], emitter: str | None = None) -> list[Event]:
        return [
            e
            for e in self.events
            if isinstance(e, kind) and (emitter is None or e.emitter == normalize_address(emitter))
        ]

    # --- Journaling ---

    def _snapshot(self) -> tuple[Any, dict[str, Any], dict[str, int], int]:
        contracts = {address: c.snapshot() for address, c in self._contracts.items()}
        return self.native.snapshot(), contracts, dict(self._nonces), len(self.events)

    def _restore(self, saved: tuple[Any, dict[str, Any], dict[str, int], int]) -> None:
        native, contracts, nonces, event_count = saved
        self.native.restore(native)
        # Contracts deployed inside the failed frame are discarded
        for address in list(self._contracts):
            if address not in contracts:
                del self._contracts[address]
        for address, state in contracts.items():
            self._contracts[address].restore(state)
        self._nonces = nonces
        del self.events[event_count:]
