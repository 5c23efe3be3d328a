import pytest

from nft_raffle.award import AwardIssuer
from nft_raffle.cycle import Cycle, RaffleState
from nft_raffle.errors import (
    CycleNotOpen,
    EmptyPool,
    IndexOutOfRange,
    InsufficientPayment,
    RequestAlreadyPending,
    UnknownRequest,
    UnknownToken,
)
from nft_raffle.gate import AutomationGate
from nft_raffle.ledger import EntryLedger
from nft_raffle.selector import pick
from nft_raffle.tracker import RandomnessRequestTracker

A = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
B = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


@pytest.fixture
def cycle():
    return Cycle(entrance_fee=100, interval=60)


@pytest.fixture
def ledger(cycle):
    return EntryLedger(cycle)


def test_ledger_preserves_order(ledger):
    callers = [A, B, A, B, B]
    for i, who in enumerate(callers):
        assert ledger.enter(who, 100) == i
    assert ledger.count() == len(callers)
    assert [ledger.entrant_at(i) for i in range(ledger.count())] == callers
    assert ledger.balance == 500


def test_ledger_rejects_underpayment(ledger):
    ledger.enter(A, 100)
    with pytest.raises(InsufficientPayment) as exc:
        ledger.enter(B, 99)
    assert exc.value.required == 100
    assert ledger.count() == 1
    assert ledger.balance == 100


def test_ledger_rejects_entries_while_calculating(cycle, ledger):
    cycle.state = RaffleState.CALCULATING
    with pytest.raises(CycleNotOpen):
        ledger.enter(A, 100)
    assert ledger.count() == 0


def test_underpayment_wins_over_closed_state(cycle, ledger):
    cycle.state = RaffleState.CALCULATING
    with pytest.raises(InsufficientPayment):
        ledger.enter(A, 1)


@pytest.mark.parametrize("index", [0, 1, -1])
def test_entrant_at_out_of_range(ledger, index):
    if index == 1:
        ledger.enter(A, 100)
    with pytest.raises(IndexOutOfRange):
        ledger.entrant_at(index)


def test_ledger_reset(ledger):
    ledger.enter(A, 100)
    ledger.enter(B, 150)
    ledger.reset()
    assert ledger.count() == 0
    assert ledger.balance == 0


def test_gate(cycle, ledger):
    gate = AutomationGate(cycle, ledger)
    assert not gate.evaluate(10_000)  # empty pool
    ledger.enter(A, 100)
    assert not gate.evaluate(59)
    assert gate.evaluate(60)
    cycle.state = RaffleState.CALCULATING
    assert not gate.evaluate(10_000)


def test_gate_needs_balance(cycle, ledger):
    gate = AutomationGate(cycle, ledger)
    ledger.enter(A, 100)
    cycle.balance = 0
    assert not gate.evaluate(61)


def test_gate_is_read_only(cycle, ledger):
    gate = AutomationGate(cycle, ledger)
    ledger.enter(A, 100)
    before = (cycle.state, cycle.balance, cycle.started_at, ledger.count())
    for now in (0, 59, 60, 600):
        gate.evaluate(now)
    assert (cycle.state, cycle.balance, cycle.started_at, ledger.count()) == before


def test_tracker_single_slot(cycle):
    tracker = RandomnessRequestTracker()
    r1 = tracker.issue(cycle)
    assert r1 == 1
    with pytest.raises(RequestAlreadyPending):
        tracker.issue(cycle)
    assert tracker.resolve(r1) is cycle
    with pytest.raises(UnknownRequest):
        tracker.resolve(r1)
    assert tracker.issue(cycle) == 2


def test_tracker_uses_allocated_ids(cycle):
    tracker = RandomnessRequestTracker()
    assert tracker.issue(cycle, allocate=lambda: 42) == 42
    assert tracker.pending_id() == 42
    assert tracker.peek(42) is cycle
    assert len(tracker) == 1


def test_tracker_allocation_failure_leaves_no_request(cycle):
    tracker = RandomnessRequestTracker()

    def boom():
        raise RuntimeError("coordinator down")

    with pytest.raises(RuntimeError):
        tracker.issue(cycle, allocate=boom)
    assert len(tracker) == 0


@pytest.mark.parametrize(
    "random_value, pool_size, expected",
    [(7, 3, 1), (9, 3, 0), (42, 1, 0), (2**256 - 1, 10, 5)],
)
def test_pick(random_value, pool_size, expected):
    assert pick(random_value, pool_size) == expected


def test_pick_empty_pool():
    with pytest.raises(EmptyPool):
        pick(7, 0)


def test_award_counter():
    issuer = AwardIssuer("ipfs://base/")
    first = issuer.mint(A)
    second = issuer.mint(A)
    assert (first.token_id, second.token_id) == (0, 1)
    assert issuer.locator_of(1) == "ipfs://base/1"
    assert issuer.owner_of(0) == A
    assert issuer.balance_of(A) == 2
    assert issuer.balance_of(B) == 0
    assert issuer.token_counter == 2
    with pytest.raises(UnknownToken):
        issuer.locator_of(2)
