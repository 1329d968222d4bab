"""Tests for call frames, native value and rollback on the local chain."""

import threading

import pytest
from structlog.testing import capture_logs

from pairswap.chain import CallFrame, Chain, Contract, account_address, derive_address, external
from pairswap.constants import ZERO_ADDRESS
from pairswap.errors import InvalidAmount, NotPayable
from pairswap.ledger import InsufficientBalance
from pairswap.models.events import Transfer
from pairswap.token import Token


class Recorder(Contract):
    """Minimal contract with journaled state, used to observe frames."""

    def __init__(self, chain: Chain, deployer: str) -> None:
        self.counter = 0
        self.received: list[CallFrame] = []
        super().__init__(chain, deployer)

    @external(payable=True)
    def bump(self, fail: bool = False) -> CallFrame:
        self.counter += 1
        if fail:
            raise InvalidAmount("bump failed")
        return self.chain.msg

    @external
    def bump_and_swallow(self, other: "Recorder") -> int:
        """Bump self, then call a failing bump on other and catch the error."""
        self.counter += 1
        try:
            other.bump(fail=True, sender=self.address)
        except InvalidAmount:
            pass
        return self.counter

    @external
    def deploy_and_fail(self) -> None:
        Token(self.chain, self.address, "GHOST", initial_supply=1)
        raise InvalidAmount("deployment reverted")

    def receive(self) -> None:
        self.received.append(self.chain.msg)

    def snapshot(self) -> tuple[int, list[CallFrame]]:
        return self.counter, list(self.received)

    def restore(self, state: tuple[int, list[CallFrame]]) -> None:
        self.counter, received = state
        self.received = list(received)



class Stalling(Contract):
    """Holds its call frame open until released, then reverts."""

    def __init__(self, chain: Chain, deployer: str) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()
        super().__init__(chain, deployer)

    @external
    def fail_later(self) -> None:
        self.entered.set()
        self.release.wait(timeout=5)
        raise InvalidAmount("stalled call reverted")


@pytest.fixture
def recorder(chain, operator) -> Recorder:
    return Recorder(chain, operator)


class TestAddresses:
    def test_account_address_is_deterministic(self, chain):
        assert chain.create_account("dave") == chain.create_account("dave") == account_address("dave")
        assert chain.create_account("dave") != chain.create_account("erin")

    def test_create_account_funds(self, chain):
        dave = chain.create_account("dave", balance=5)
        assert chain.native.balance_of(dave) == 5

    def test_contract_addresses_follow_nonce(self, chain, operator):
        first = Recorder(chain, operator)
        second = Recorder(chain, operator)
        assert first.address == derive_address(operator, 0)
        assert second.address == derive_address(operator, 1)
        assert len(first.address) == 42

    def test_contract_lookup(self, chain, recorder, alice):
        assert chain.contract_at(recorder.address) is recorder
        assert chain.contract_at(recorder.address.upper().replace("0X", "0x")) is recorder
        assert chain.is_contract(recorder.address)
        assert not chain.is_contract(alice)
        assert chain.contracts(Recorder) == [recorder]
        assert chain.contracts(Token) == []

    def test_invalid_deployer(self, chain):
        with pytest.raises(ValueError):
            Recorder(chain, "not-an-address")


class TestCallFrames:
    def test_msg_outside_call(self, chain):
        with pytest.raises(RuntimeError):
            chain.msg
        assert chain.depth == 0

    def test_msg_inside_call(self, recorder, alice):
        frame = recorder.bump(sender=alice, value=7)
        assert frame == CallFrame(sender=alice, target=recorder.address, value=7)

    def test_value_credited_to_callee(self, chain, recorder, alice, starting_native):
        recorder.bump(sender=alice, value=7)
        assert recorder.native_balance == 7
        assert chain.native.balance_of(alice) == starting_native - 7

    def test_value_not_payable(self, chain, recorder, alice, starting_native):
        """Non-payable entry points reject value before any frame opens."""
        with pytest.raises(NotPayable):
            recorder.bump_and_swallow(recorder, sender=alice, value=1)
        assert chain.native.balance_of(alice) == starting_native
        assert recorder.counter == 0

    def test_value_beyond_balance(self, chain, recorder, carol):
        with pytest.raises(InsufficientBalance):
            recorder.bump(sender=carol, value=1)
        assert recorder.counter == 0

    def test_frames_pop_after_call(self, chain, recorder, alice):
        recorder.bump(sender=alice)
        assert chain.depth == 0


class TestRollback:
    def test_failed_call_restores_state(self, chain, recorder, alice, starting_native):
        """Value transfer and contract state are both undone."""
        with pytest.raises(InvalidAmount):
            recorder.bump(fail=True, sender=alice, value=10)
        assert recorder.counter == 0
        assert recorder.native_balance == 0
        assert chain.native.balance_of(alice) == starting_native
        assert chain.depth == 0

    def test_caught_nested_failure_rolls_back_inner_only(self, chain, operator, alice):
        outer = Recorder(chain, operator)
        inner = Recorder(chain, operator)
        assert outer.bump_and_swallow(inner, sender=alice) == 1
        assert outer.counter == 1
        assert inner.counter == 0

    def test_failed_frame_discards_deployments(self, chain, operator, recorder, alice):
        """Contracts deployed in a reverted frame vanish, and so do their events."""
        events_before = len(chain.events)
        with pytest.raises(InvalidAmount):
            recorder.deploy_and_fail(sender=alice)
        assert chain.contracts(Token) == []
        assert len(chain.events) == events_before

        # The deployer's nonce was restored, so the address is reused
        token = Token(chain, recorder.address, "REAL")
        assert token.address == derive_address(recorder.address, 0)

    def test_events_rolled_back(self, chain, alice, bob):
        token = Token(chain, alice, "TKA", initial_supply=10)
        with pytest.raises(InsufficientBalance):
            token.transfer(bob, 11, sender=alice)
        assert len(chain.events_of(Transfer, emitter=token.address)) == 1


class TestSendNative:
    def test_plain_account(self, chain, alice, carol):
        chain.send_native(alice, carol, 3)
        assert chain.native.balance_of(carol) == 3

    def test_contract_receive_hook(self, chain, recorder, alice):
        chain.send_native(alice, recorder.address, 4)
        assert recorder.received == [CallFrame(sender=alice, target=recorder.address, value=4)]
        assert recorder.native_balance == 4

    def test_null_recipient(self, chain, alice):
        with pytest.raises(ValueError):
            chain.send_native(alice, ZERO_ADDRESS, 1)


class TestEvents:
    def test_emit_logs_event_arguments(self, chain, alice, bob):
        token = Token(chain, alice, "TKA", initial_supply=10)
        with capture_logs() as logs:
            assert token.transfer(bob, 4, sender=alice)

        assert len(chain.events_of(Transfer, emitter=token.address)) == 2
        (entry,) = [log for log in logs if log["event"] == "event_emitted"]
        assert entry["event_name"] == "Transfer"
        assert entry["emitter"] == token.address
        assert entry["args"] == {"from_address": alice, "to_address": bob, "amount": 4}

    def test_emit_outside_a_frame(self, chain, alice, bob):
        event = Transfer(emitter=alice, from_address=alice, to_address=bob, amount=1)
        chain.emit(event)
        assert chain.events_of(Transfer) == [event]


class TestConcurrency:
    """A failing frame on one thread must not erase another thread's writes."""

    def _start_failing_call(
        self, stalling: Stalling, sender: str, errors: list[Exception]
    ) -> threading.Thread:
        def run() -> None:
            try:
                stalling.fail_later(sender=sender)
            except InvalidAmount as exc:
                errors.append(exc)

        worker = threading.Thread(target=run)
        worker.start()
        assert stalling.entered.wait(timeout=5)
        return worker

    def test_fund_waits_for_open_frame(self, chain, operator, carol):
        stalling = Stalling(chain, operator)
        errors: list[Exception] = []
        worker = self._start_failing_call(stalling, operator, errors)

        funder = threading.Thread(target=chain.fund, args=(carol, 777))
        funder.start()
        funder.join(timeout=0.2)
        assert funder.is_alive()

        stalling.release.set()
        worker.join(timeout=5)
        funder.join(timeout=5)
        assert len(errors) == 1
        assert chain.native.balance_of(carol) == 777

    def test_token_deploy_waits_for_open_frame(self, chain, operator, alice):
        stalling = Stalling(chain, operator)
        errors: list[Exception] = []
        worker = self._start_failing_call(stalling, operator, errors)

        deployed: list[Token] = []
        deployer = threading.Thread(
            target=lambda: deployed.append(Token(chain, alice, "LATE", initial_supply=50))
        )
        deployer.start()
        deployer.join(timeout=0.2)
        assert deployer.is_alive()

        stalling.release.set()
        worker.join(timeout=5)
        deployer.join(timeout=5)
        assert len(errors) == 1
        (token,) = deployed
        assert chain.contract_at(token.address) is token
        assert token.balance_of(alice) == 50

    def test_create_account_funds_through_lock(self, chain):
        with chain.lock:
            dave = chain.create_account("dave", balance=5)
        assert chain.native.balance_of(dave) == 5
