"""
NFT raffle driven by VRF randomness and automation upkeep.

A round runs OPEN -> CALCULATING -> OPEN:

1. Players call `enter_raffle` paying at least the entrance fee.
2. An automation caller polls `check_upkeep`; once the interval has passed
   and there is at least one paid entry it calls `perform_upkeep`, which
   flips the raffle to CALCULATING and requests random words.
3. The VRF coordinator later calls `fulfill_random_words`. The winner gets
   the whole pool and an NFT; the raffle then reopens empty.

Request and callback are separate entry points tied together by the
request tracker; nothing blocks while randomness is outstanding. Every
mutating call runs inside a `Chain.transaction`, so racing callers are
serialised and a failed call leaves no trace.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .award import Award, AwardIssuer
from .chain import Chain
from .config import RaffleConfig
from .cycle import Cycle, RaffleState
from .errors import InvariantGuard, LookupMiss, OnlyCoordinatorCanFulfill, UpkeepNotNeeded
from .events import AwardIssued, CycleStarted, EntryAccepted, EventLog
from .gate import AutomationGate
from .ledger import EntryLedger
from .selector import pick
from .tracker import RandomnessRequestTracker
from .vrf import RandomnessProvider

logger = logging.getLogger(__name__)


class Raffle:
    def __init__(self, chain: Chain, config: RaffleConfig, coordinator: RandomnessProvider):
        self.chain = chain
        self.config = config
        self.coordinator = coordinator
        self.address = chain.generate_address()
        self.events = EventLog()

        self.cycle = Cycle(entrance_fee=config.entrance_fee, interval=config.interval)
        self.ledger = EntryLedger(self.cycle)
        self.gate = AutomationGate(self.cycle, self.ledger)
        self.tracker = RandomnessRequestTracker()
        self.awards = AwardIssuer(config.base_uri, name=config.name, symbol=config.symbol)

        self.recent_winner: Optional[str] = None
        self._initialized = False

    def initialize(self) -> None:
        """Open the first round at the current chain time. Called once, by `deploy`."""
        if self._initialized:
            raise RuntimeError("raffle already initialized")
        self.cycle.restart(self.chain.timestamp)
        self._initialized = True
        logger.info(
            "raffle %s opened: fee=%d interval=%ds",
            self.address, self.config.entrance_fee, self.config.interval,
        )

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("raffle not initialized")

    # --- players --------------------------------------------------------------

    def enter_raffle(self, value: int) -> None:
        """Buy one entry for the current caller, paying `value` from its balance."""
        self._require_initialized()
        participant = self.chain.msg_sender
        if participant is None:
            raise ValueError("enter_raffle needs a pranked sender")
        with self.chain.transaction():
            self.ledger.check(value)
            self.chain.transfer(participant, self.address, value)
            self.ledger.enter(participant, value)
            self.events.emit(EntryAccepted(participant))
        logger.info("%s entered raffle (%d entries)", participant, self.ledger.count())

    # --- automation -----------------------------------------------------------

    def check_upkeep(self, check_data: bytes = b"") -> Tuple[bool, bytes]:
        """Read-only eligibility check for automation callers."""
        self._require_initialized()
        return self.gate.evaluate(self.chain.timestamp), b""

    def perform_upkeep(self, perform_data: bytes = b"") -> int:
        return self.begin_cycle(perform_data)

    request_winner = perform_upkeep

    def begin_cycle(self, perform_data: bytes = b"") -> int:
        """
        Close entries and request randomness. The gate is re-checked here, so
        of several racing callers only the first succeeds; the rest get
        `UpkeepNotNeeded`. Returns the request id.
        """
        self._require_initialized()
        with self.chain.transaction():
            if not self.gate.evaluate(self.chain.timestamp):
                logger.debug("upkeep not needed (state=%s)", self.cycle.state.name)
                raise UpkeepNotNeeded(self.cycle.balance, self.ledger.count(), int(self.cycle.state))
            request_id = self.tracker.issue(self.cycle, allocate=self._request_random_words)
            self.cycle.state = RaffleState.CALCULATING
            self.events.emit(CycleStarted(request_id))
        logger.info("requested random words: request_id=%d", request_id)
        return request_id

    def _request_random_words(self) -> int:
        with self.chain.prank(self.address):
            return self.coordinator.request_random_words(
                self.config.key_hash,
                self.config.subscription_id,
                self.config.request_confirmations,
                self.config.callback_gas_limit,
                self.config.num_words,
            )

    # --- randomness callback --------------------------------------------------

    def fulfill_random_words(self, request_id: int, random_words: List[int]) -> Award:
        """Coordinator callback. Only the configured coordinator may call it."""
        self._require_coordinator(request_id)
        if not random_words:
            raise ValueError("no random words delivered")
        return self.complete_cycle(request_id, random_words[0])

    def complete_cycle(self, request_id: int, random_value: int) -> Award:
        """
        Pick the winner for `request_id`, pay out the pool, mint the award and
        reopen. Only the coordinator may call it. Every check runs before the
        first write, so a rejected call (wrong sender, unknown request, empty
        pool) changes nothing.
        """
        self._require_initialized()
        self._require_coordinator(request_id)
        with self.chain.transaction():
            try:
                self.tracker.peek(request_id)
                winner = self.ledger.entrant_at(pick(random_value, self.ledger.count()))
            except (InvariantGuard, LookupMiss) as e:
                logger.warning("rejected randomness callback for request %d: %s", request_id, e)
                raise
            prize = self.cycle.balance
            self.chain.transfer(self.address, winner, prize)

            self.tracker.resolve(request_id)
            self.ledger.reset()
            award = self.awards.mint(winner)
            self.cycle.restart(self.chain.timestamp)
            self.recent_winner = winner
            self.events.emit(AwardIssued(winner, award.token_id))
        logger.info("winner %s took %d and token %d", winner, prize, award.token_id)
        return award

    def _require_coordinator(self, request_id: int) -> None:
        sender = self.chain.msg_sender
        if sender != self.coordinator.address:
            logger.warning("rejected randomness from %s for request %d", sender, request_id)
            raise OnlyCoordinatorCanFulfill(sender, self.coordinator.address)

    # --- views ----------------------------------------------------------------

    def get_entrance_fee(self) -> int:
        return self.config.entrance_fee

    def get_interval(self) -> int:
        return self.config.interval

    def get_player(self, index: int) -> str:
        return self.ledger.entrant_at(index)

    def get_player_count(self) -> int:
        return self.ledger.count()

    get_number_players = get_player_count

    def get_raffle_state(self) -> int:
        return int(self.cycle.state)

    def get_recent_winner(self) -> Optional[str]:
        return self.recent_winner

    def get_last_timestamp(self) -> int:
        return self.cycle.started_at

    def get_balance(self) -> int:
        return self.cycle.balance

    def get_request_confirmations(self) -> int:
        return self.config.request_confirmations

    def get_num_words(self) -> int:
        return self.config.num_words

    def get_pending_request_id(self) -> Optional[int]:
        return self.tracker.pending_id()

    def get_token_counter(self) -> int:
        return self.awards.token_counter

    def token_uri(self, token_id: int) -> str:
        return self.awards.locator_of(token_id)

    def owner_of(self, token_id: int) -> str:
        return self.awards.owner_of(token_id)

    def balance_of(self, owner: str) -> int:
        return self.awards.balance_of(owner)

    @property
    def name(self) -> str:
        return self.awards.name

    @property
    def symbol(self) -> str:
        return self.awards.symbol


def deploy(config: RaffleConfig, coordinator: RandomnessProvider, chain: Chain) -> Raffle:
    raffle = Raffle(chain, config, coordinator)
    raffle.initialize()
    return raffle
