"""Cards and card piles for the Pandemic simulation engine.

Cards are immutable values. A CardPile is an ordered sequence stored
bottom to top: drawing and putting happen at the top (the end of the
underlying list). Piles are split and merged to seed epidemics and to
recycle the infection discard pile after an epidemic.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import ClassVar, Generic, Iterable, Iterator, Optional, TypeVar, Union

from .board import CityName
from .constants import CardType, DiseaseColor
from .exceptions import RuleViolation


@dataclass(frozen=True)
class PlayerCard:
    """A card held in a player's hand.

    City cards carry both a city and its disease color.

    Attributes:
        card_id: Unique identifier for this card.
        city: City named on the card, if any.
        color: Disease color of the card, if any.
    """

    card_id: str
    city: Optional[CityName] = None
    color: Optional[DiseaseColor] = None

    card_type: ClassVar[CardType] = CardType.PLAYER

    def __str__(self) -> str:
        return self.city if self.city is not None else self.card_id


@dataclass(frozen=True)
class InfectionCard:
    """A card from the infection pile naming a city and the color to place there."""

    card_id: str
    city: CityName
    color: DiseaseColor

    card_type: ClassVar[CardType] = CardType.INFECTION

    def __str__(self) -> str:
        return f"{self.city} ({self.color.value})"


@dataclass(frozen=True)
class EpidemicCard:
    """An epidemic card, shuffled into the player draw pile at setup."""

    card_id: str

    card_type: ClassVar[CardType] = CardType.EPIDEMIC

    def __str__(self) -> str:
        return "epidemic"


Card = Union[PlayerCard, InfectionCard, EpidemicCard]
PlayerPileCard = Union[PlayerCard, EpidemicCard]

T = TypeVar("T")


class CardPile(Generic[T]):
    """A shuffleable, splittable, mergeable pile of cards.

    The pile is stored bottom to top. ``draw`` and ``put`` operate on the
    top. Every pile carries a random generator so a seeded match shuffles
    reproducibly; piles produced by ``split`` and ``merge`` share it.
    """

    def __init__(
        self,
        cards: Optional[Iterable[T]] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize a pile.

        Args:
            cards: Initial cards, bottom first.
            rng: Random generator used by shuffle(). A fresh unseeded
                generator is used if None.
        """
        self._cards: list[T] = list(cards) if cards is not None else []
        self._rng = rng if rng is not None else random.Random()

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[T]:
        """Iterate from bottom to top."""
        return iter(list(self._cards))

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __repr__(self) -> str:
        return f"CardPile(size={len(self._cards)})"

    @property
    def size(self) -> int:
        """Number of cards in the pile."""
        return len(self._cards)

    @property
    def rng(self) -> random.Random:
        """The random generator used for shuffling."""
        return self._rng

    def is_empty(self) -> bool:
        """Check if the pile has no cards."""
        return not self._cards

    @property
    def contents(self) -> tuple[T, ...]:
        """Read-only view of the cards, bottom first."""
        return tuple(self._cards)

    def peek(self) -> Optional[T]:
        """Return the top card without removing it."""
        return self._cards[-1] if self._cards else None

    # -------------------------------------------------------------------------
    # Drawing and putting
    # -------------------------------------------------------------------------

    def draw(self, n: int = 1) -> list[T]:
        """Remove up to n cards from the top.

        Never raises on shortage: callers must compare the number of
        cards returned with the number requested.

        Args:
            n: Number of cards to draw.

        Returns:
            The drawn cards in draw order (former top card first).
        """
        if n <= 0:
            return []
        drawn: list[T] = []
        for _ in range(n):
            if not self._cards:
                break
            drawn.append(self._cards.pop())
        return drawn

    def draw_bottom(self) -> Optional[T]:
        """Remove and return the bottom card, or None if the pile is empty."""
        if not self._cards:
            return None
        return self._cards.pop(0)

    def put(self, card: T) -> None:
        """Push a card onto the top of the pile."""
        self._cards.append(card)

    def remove(self, card: T) -> None:
        """Remove a specific card from anywhere in the pile.

        Raises:
            ValueError: If the card is not in the pile.
        """
        self._cards.remove(card)

    def clear(self) -> None:
        """Remove all cards."""
        self._cards.clear()

    def shuffle(self) -> None:
        """Shuffle the pile in place (uniform random permutation)."""
        self._rng.shuffle(self._cards)

    # -------------------------------------------------------------------------
    # Split and merge
    # -------------------------------------------------------------------------

    def split(self, n: int) -> list[CardPile[T]]:
        """Partition this pile into exactly n piles, draining it.

        Each pile receives a consecutive run of ceil(size / n) cards,
        starting from the bottom. Trailing piles may be shorter or empty
        when the cards run out.

        Args:
            n: Number of piles to produce (at least 1).

        Returns:
            The new piles, ordered from the bottom of this pile upward.

        Raises:
            RuleViolation: If n is less than 1.
        """
        if n < 1:
            raise RuleViolation(
                f"Cannot split a pile into {n} parts. Number of parts must be at least 1"
            )
        chunk = math.ceil(len(self._cards) / n)
        piles = [
            CardPile(self._cards[i * chunk:(i + 1) * chunk], rng=self._rng)
            for i in range(n)
        ]
        self._cards = []
        return piles

    @staticmethod
    def merge(*piles: CardPile[T]) -> CardPile[T]:
        """Drain piles into one new pile.

        The first pile forms the bottom of the result and each later pile
        is stacked on top of the previous one. Card order within each
        source is preserved, so ``merge(*pile.split(n))`` reproduces
        the original order.

        Args:
            *piles: Source piles, bottom-most first. They are left empty.

        Returns:
            The merged pile, sharing the first source's random generator.
        """
        rng = piles[0].rng if piles else None
        merged: CardPile[T] = CardPile(rng=rng)
        for pile in piles:
            merged._cards.extend(pile._cards)
            pile._cards = []
        return merged


def seed_epidemics(
    draw_pile: CardPile[PlayerPileCard],
    epidemic_cards: list[EpidemicCard],
) -> CardPile[PlayerPileCard]:
    """Seed one epidemic card into each segment of the player draw pile.

    The pile is split into len(epidemic_cards) piles, one epidemic card
    is put into each, each pile is shuffled on its own, and the piles are
    merged back in split order. Exactly one epidemic surfaces within each
    segment of the final pile.

    Args:
        draw_pile: The shuffled player draw pile. It is drained.
        epidemic_cards: One epidemic card per segment.

    Returns:
        The new player draw pile.
    """
    segments = draw_pile.split(len(epidemic_cards))
    for segment, epidemic in zip(segments, epidemic_cards):
        segment.put(epidemic)
        segment.shuffle()
    return CardPile.merge(*segments)


def recycle_discards(
    draw_pile: CardPile[InfectionCard],
    discard_pile: CardPile[InfectionCard],
) -> CardPile[InfectionCard]:
    """Shuffle the discard pile and stack it on top of the draw pile.

    Both source piles are left empty; the returned pile replaces the
    draw pile, so the recycled cards are drawn first.
    """
    discard_pile.shuffle()
    return CardPile.merge(draw_pile, discard_pile)
