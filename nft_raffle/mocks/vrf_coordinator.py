"""
Local stand-in for a Chainlink VRF v2 coordinator.

Requests are recorded and answered later by an explicit
`fulfill_random_words` call, the way the coordinator mock behaves on a
development chain: nothing is delivered until a test (or script) asks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

from eth_utils import keccak, to_checksum_address

from ..chain import Chain
from ..errors import InsufficientFunds, RaffleError, UnknownRequest

logger = logging.getLogger(__name__)

BASE_FEE = 250_000_000_000_000_000  # 0.25 LINK per request
GAS_PRICE_LINK = 1_000_000_000  # LINK per gas


class InvalidSubscription(RaffleError):
    pass


class InvalidConsumer(RaffleError):
    pass


@dataclass
class Subscription:
    owner: Optional[str]
    balance: int = 0
    consumers: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class Request:
    subscription_id: int
    callback_gas_limit: int
    num_words: int
    consumer: str


class MockVRFCoordinator:
    def __init__(self, chain: Chain, base_fee: int = BASE_FEE, gas_price_link: int = GAS_PRICE_LINK):
        self.chain = chain
        self.address = chain.generate_address()
        self.base_fee = base_fee
        self.gas_price_link = gas_price_link
        self._subscriptions: Dict[int, Subscription] = {}
        self._requests: Dict[int, Request] = {}
        self._contracts: Dict[str, Any] = {}
        self._next_sub_id = 1
        self._next_request_id = 1

    # --- subscriptions --------------------------------------------------------

    def create_subscription(self) -> int:
        sub_id = self._next_sub_id
        self._next_sub_id += 1
        self._subscriptions[sub_id] = Subscription(owner=self.chain.msg_sender)
        logger.info("created subscription %d", sub_id)
        return sub_id

    def fund_subscription(self, sub_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._subscription(sub_id).balance += amount

    def add_consumer(self, sub_id: int, consumer: Any) -> None:
        """Register `consumer` (a contract object with an `address`) on `sub_id`."""
        sub = self._subscription(sub_id)
        address = to_checksum_address(consumer.address)
        sub.consumers.add(address)
        self._contracts[address] = consumer
        logger.info("added consumer %s to subscription %d", address, sub_id)

    def remove_consumer(self, sub_id: int, consumer: Union[str, Any]) -> None:
        sub = self._subscription(sub_id)
        address = self._address_of(consumer)
        if address not in sub.consumers:
            raise InvalidConsumer(f"{address} is not a consumer of subscription {sub_id}")
        sub.consumers.discard(address)

    def get_subscription(self, sub_id: int) -> Subscription:
        return self._subscription(sub_id)

    # --- requests -------------------------------------------------------------

    def request_random_words(
        self,
        key_hash: bytes,
        sub_id: int,
        minimum_request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int:
        """Record a request from the calling consumer and return its id."""
        consumer = self.chain.msg_sender
        sub = self._subscription(sub_id)
        if consumer is None or consumer not in sub.consumers:
            raise InvalidConsumer(f"{consumer} is not a consumer of subscription {sub_id}")
        request_id = self._next_request_id
        self._next_request_id += 1
        self._requests[request_id] = Request(sub_id, callback_gas_limit, num_words, consumer)
        logger.info("random words requested: id=%d consumer=%s", request_id, consumer)
        return request_id

    def last_request_id(self) -> int:
        return self._next_request_id - 1

    def consumer_of(self, request_id: int) -> str:
        try:
            return self._requests[request_id].consumer
        except KeyError:
            raise UnknownRequest(request_id) from None

    def fulfill_random_words(self, request_id: int, consumer: Union[str, Any, None] = None) -> int:
        """Answer `request_id` with words derived from the id. Returns the LINK charged."""
        request = self._request(request_id)
        words = [
            int.from_bytes(keccak(request_id.to_bytes(32, "big") + i.to_bytes(32, "big")), "big")
            for i in range(request.num_words)
        ]
        return self.fulfill_random_words_with_override(request_id, consumer, words)

    def fulfill_random_words_with_override(
        self, request_id: int, consumer: Union[str, Any, None], words: List[int]
    ) -> int:
        request = self._request(request_id)
        if consumer is None:
            consumer = request.consumer
        target = self._contract_of(consumer)
        sub = self._subscription(request.subscription_id)
        payment = self.base_fee + self.gas_price_link * request.callback_gas_limit
        if sub.balance < payment:
            raise InsufficientFunds(f"subscription:{request.subscription_id}", sub.balance, payment)

        with self.chain.prank(self.address):
            target.fulfill_random_words(request_id, list(words))

        del self._requests[request_id]
        sub.balance -= payment
        logger.info("fulfilled request %d (charged %d)", request_id, payment)
        return payment

    def call_back_with_randomness(self, value: int) -> int:
        """Answer the most recent request with a single fixed word."""
        return self.fulfill_random_words_with_override(self.last_request_id(), None, [value])

    # --- helpers --------------------------------------------------------------

    def _subscription(self, sub_id: int) -> Subscription:
        try:
            return self._subscriptions[sub_id]
        except KeyError:
            raise InvalidSubscription(f"subscription {sub_id} does not exist") from None

    def _request(self, request_id: int) -> Request:
        request = self._requests.get(request_id)
        if request is None:
            raise UnknownRequest(request_id)
        return request

    @staticmethod
    def _address_of(consumer: Union[str, Any]) -> str:
        if isinstance(consumer, str):
            return to_checksum_address(consumer)
        return to_checksum_address(consumer.address)

    def _contract_of(self, consumer: Union[str, Any]) -> Any:
        if not isinstance(consumer, str):
            return consumer
        address = to_checksum_address(consumer)
        try:
            return self._contracts[address]
        except KeyError:
            raise InvalidConsumer(f"no contract registered at {address}") from None
