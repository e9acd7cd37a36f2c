# Cards, the deck, and the append/insert/remove-only Hand.
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum
import random

from .config import MAX_CARD_VALUE, MAX_PLAYERS, MIN_PLAYERS
from .errors import EmptyHand, IndexOutOfBounds, InvalidPlayerCount, InvalidRange


class Facing(Enum):
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class Card:
    front: int
    back: int
    facing: Facing = Facing.FRONT

    def __post_init__(self):
        for v in (self.front, self.back):
            if not 0 <= v <= MAX_CARD_VALUE:
                raise ValueError(f"Card value out of range: {v}")
        if self.front == self.back:
            raise ValueError(f"Card faces must differ: {self.front}")

    @property
    def value(self) -> int:
        return self.front if self.facing is Facing.FRONT else self.back

    @property
    def hidden_value(self) -> int:
        return self.back if self.facing is Facing.FRONT else self.front

    @property
    def identity(self) -> tuple[int, int]:
        # The physical card, regardless of which side is up.
        return (self.front, self.back)

    def flipped(self) -> "Card":
        facing = Facing.BACK if self.facing is Facing.FRONT else Facing.FRONT
        return replace(self, facing=facing)

    def __str__(self):
        return f"{self.value}/{self.hidden_value}"


def build_deck(num_players: int) -> list[Card]:
    # The full deck is every pair of distinct values in 0-9, ie 45 cards:
    # [(0,1), (0,2), ..., (1,2), ..., (7,9), (8,9)]. Which cards are used
    # depends on the number of players, so that every hand gets the same size.
    if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
        raise InvalidPlayerCount(num_players)
    full_deck = [(i, j) for i in range(0, MAX_CARD_VALUE)
                 for j in range(i + 1, MAX_CARD_VALUE + 1)]
    if num_players == 3:
        # 36 cards, skip the 9s -> 12 cards/player
        pairs = [p for p in full_deck if p[1] != MAX_CARD_VALUE]
    elif num_players == 4:
        # skip (8,9) -> 11 cards/player
        pairs = full_deck[:-1]
    else:
        # 45 cards -> 9 cards/player
        pairs = full_deck
    return [Card(front, back) for (front, back) in pairs]


def deal_hands(num_players: int, rng: random.Random | None = None) -> list["Hand"]:
    # Shuffle the deck for num_players, turn each card randomly, and serve
    # equal hands. Pass a seeded random.Random for reproducible deals.
    rng = rng or random.Random()
    deck = build_deck(num_players)
    deck = [c.flipped() if rng.random() < 0.5 else c for c in deck]
    rng.shuffle(deck)
    n = len(deck) // num_players
    return [Hand(deck[i * n:(i + 1) * n]) for i in range(num_players)]


class Hand:
    # A player's cards, in the order they were dealt. Hands cannot be
    # reordered: the only ways to change one are taking a card off either
    # end, inserting a single card, and removing a contiguous range. Each of
    # these returns a new Hand.
    __slots__ = ("_cards",)

    def __init__(self, cards=()):
        self._cards = tuple(cards)

    def __len__(self):
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __getitem__(self, index: int) -> Card:
        return self._cards[index]

    def __eq__(self, other):
        if not isinstance(other, Hand):
            return NotImplemented
        return self._cards == other._cards

    def __hash__(self):
        return hash(self._cards)

    def __repr__(self):
        return f"Hand({list(self._cards)!r})"

    def __str__(self):
        return " ".join(str(c) for c in self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        return self._cards

    def values(self) -> tuple[int, ...]:
        return tuple(c.value for c in self._cards)

    def scout_from(self, left: bool) -> tuple[Card, "Hand"]:
        if not self._cards:
            raise EmptyHand("Cannot take a card from an empty hand")
        if left:
            return self._cards[0], Hand(self._cards[1:])
        return self._cards[-1], Hand(self._cards[:-1])

    def insert_at(self, index: int, card: Card, flip: bool = False) -> "Hand":
        if index < 0 or index > len(self._cards):
            raise IndexOutOfBounds(
                f"Insert position {index} outside 0..{len(self._cards)}")
        if flip:
            card = card.flipped()
        return Hand(self._cards[:index] + (card,) + self._cards[index:])

    def remove_range(self, start: int, stop: int) -> tuple[tuple[Card, ...], "Hand"]:
        # stop is inclusive.
        if start < 0 or start > stop or stop >= len(self._cards):
            raise InvalidRange(
                f"Range {start}..{stop} invalid for a hand of {len(self._cards)}")
        removed = self._cards[start:stop + 1]
        return removed, Hand(self._cards[:start] + self._cards[stop + 1:])

    def flipped(self) -> "Hand":
        # Turning the whole hand over keeps the order of the cards.
        return Hand(c.flipped() for c in self._cards)
