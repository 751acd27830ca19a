"""
The card pool: every valid card of the loaded decks, merged and read-only.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .exceptions import DuplicateDeckNameError, UnknownDeckError
from .models import Card, Deck

logger = logging.getLogger(__name__)


class CardPool:
    """
    Immutable collection of cards drawn from one or more decks.

    Serves both as the source of questions and as the source of
    distractors. Build it once per session; it is never mutated.
    """

    def __init__(self, decks: Iterable[Deck]):
        """
        Raises:
            DuplicateDeckNameError: If two decks share a name.
        """
        self._decks: Tuple[Deck, ...] = tuple(decks)
        seen_names: Set[str] = set()
        for deck in self._decks:
            if deck.name in seen_names:
                raise DuplicateDeckNameError(
                    "At least two decks in the pool have the same name.",
                    deck_name=deck.name,
                    source=deck.source,
                )
            seen_names.add(deck.name)
        self._cards: Tuple[Card, ...] = tuple(
            card for deck in self._decks for card in deck.cards
        )

    @classmethod
    def from_decks(cls, decks: Iterable[Deck]) -> "CardPool":
        pool = cls(decks)
        logger.debug(
            "Built card pool with %s cards from %s decks.",
            pool.card_count,
            pool.deck_count,
        )
        return pool

    @property
    def decks(self) -> Tuple[Deck, ...]:
        return self._decks

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def deck_names(self) -> List[str]:
        return [deck.name for deck in self._decks]

    @property
    def deck_count(self) -> int:
        return len(self._decks)

    @property
    def card_count(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def scoped(self, deck_names: Optional[Sequence[str]]) -> "CardPool":
        """
        Return a pool restricted to the named decks.

        Parameters:
            deck_names (Optional[Sequence[str]]): Decks to keep. None or an
                empty sequence keeps every deck.

        Raises:
            UnknownDeckError: If a name does not match any deck in the pool.
        """
        if not deck_names:
            return self
        known = set(self.deck_names)
        unknown = [name for name in deck_names if name not in known]
        if unknown:
            raise UnknownDeckError(unknown)
        wanted = set(deck_names)
        return CardPool(deck for deck in self._decks if deck.name in wanted)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"CardPool(decks={self.deck_count}, cards={self.card_count})"
