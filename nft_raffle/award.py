"""Collectible issued to each cycle's winner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from .errors import UnknownToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Award:
    token_id: int
    owner: str
    token_uri: str


class AwardIssuer:
    """
    Mints sequentially numbered tokens. The locator of a token is the base
    URI followed by its id, ERC-721 style; the referenced metadata is never
    read here.
    """

    def __init__(self, base_uri: str, name: str = "Dogie", symbol: str = "DOG"):
        self.base_uri = base_uri
        self.name = name
        self.symbol = symbol
        self._awards: Dict[int, Award] = {}
        self._counter = 0

    @property
    def token_counter(self) -> int:
        """Number of tokens minted so far, which is also the next token id."""
        return self._counter

    def mint(self, owner: str) -> Award:
        token_id = self._counter
        award = Award(token_id, owner, f"{self.base_uri}{token_id}")
        self._awards[token_id] = award
        self._counter += 1
        logger.info("minted token %d to %s", token_id, owner)
        return award

    def locator_of(self, token_id: int) -> str:
        return self._get(token_id).token_uri

    def owner_of(self, token_id: int) -> str:
        return self._get(token_id).owner

    def balance_of(self, owner: str) -> int:
        return sum(1 for a in self._awards.values() if a.owner == owner)

    def tokens_of(self, owner: str) -> List[int]:
        return [a.token_id for a in self._awards.values() if a.owner == owner]

    def _get(self, token_id: int) -> Award:
        try:
            return self._awards[token_id]
        except KeyError:
            raise UnknownToken(token_id) from None
