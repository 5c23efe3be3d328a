"""Interface the raffle expects from a VRF coordinator."""

from __future__ import annotations

from typing import Protocol


class RandomnessProvider(Protocol):
    address: str

    def request_random_words(
        self,
        key_hash: bytes,
        sub_id: int,
        minimum_request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
    ) -> int: ...
