"""Card, set key and hand models."""

from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel, computed_field, model_validator

from literature_server.errors import InvalidSetKey, UnknownCard


class Suit(str, Enum):
    """Card suit. Jokers carry a colour instead of a suit."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"
    RED = "red"
    BLACK = "black"


class Rank(str, Enum):
    """Card rank (value shown on the card)."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    JOKER = "JOKER"


# Deck order for suits and jokers
PLAYING_SUITS = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)
JOKER_COLOURS = (Suit.RED, Suit.BLACK)

LOW_RANKS = (Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN)
HIGH_RANKS = (Rank.NINE, Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE)

SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class SetKind(str, Enum):
    """Family a set belongs to."""

    LOW = "low"
    HIGH = "high"
    EIGHTS_JOKERS = "eights-jokers"


class SetKey(str, Enum):
    """The nine declarable sets. Values are the wire names."""

    LOW_HEARTS = "low-hearts"
    LOW_DIAMONDS = "low-diamonds"
    LOW_CLUBS = "low-clubs"
    LOW_SPADES = "low-spades"
    HIGH_HEARTS = "high-hearts"
    HIGH_DIAMONDS = "high-diamonds"
    HIGH_CLUBS = "high-clubs"
    HIGH_SPADES = "high-spades"
    EIGHTS_JOKERS = "eights-jokers"

    @property
    def kind(self) -> SetKind:
        return _SET_LAYOUT[self][0]

    @property
    def suit(self) -> Suit | None:
        """Suit of a low/high set, None for eights-jokers."""
        return _SET_LAYOUT[self][1]

    @classmethod
    def of(cls, kind: SetKind, suit: Suit | None = None) -> "SetKey":
        """Get the set key for a kind and suit.

        Raises:
            InvalidSetKey: If a low/high set is requested without a playing suit.
        """
        if kind == SetKind.EIGHTS_JOKERS:
            return cls.EIGHTS_JOKERS
        if suit not in PLAYING_SUITS:
            raise InvalidSetKey(f"{kind.value} set needs a playing suit, got {suit}")
        return cls(f"{kind.value}-{suit.value}")

    @classmethod
    def parse(cls, value: "SetKey | str") -> "SetKey":
        """Parse a wire set name.

        Raises:
            InvalidSetKey: If the name matches none of the nine sets.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSetKey(f"Unknown set: {value!r}") from None

    def __str__(self) -> str:
        return self.value


_SET_LAYOUT: dict[SetKey, tuple[SetKind, Suit | None]] = {
    SetKey.LOW_HEARTS: (SetKind.LOW, Suit.HEARTS),
    SetKey.LOW_DIAMONDS: (SetKind.LOW, Suit.DIAMONDS),
    SetKey.LOW_CLUBS: (SetKind.LOW, Suit.CLUBS),
    SetKey.LOW_SPADES: (SetKind.LOW, Suit.SPADES),
    SetKey.HIGH_HEARTS: (SetKind.HIGH, Suit.HEARTS),
    SetKey.HIGH_DIAMONDS: (SetKind.HIGH, Suit.DIAMONDS),
    SetKey.HIGH_CLUBS: (SetKind.HIGH, Suit.CLUBS),
    SetKey.HIGH_SPADES: (SetKind.HIGH, Suit.SPADES),
    SetKey.EIGHTS_JOKERS: (SetKind.EIGHTS_JOKERS, None),
}


class Card(BaseModel, frozen=True):
    """Single card representation."""

    rank: Rank
    suit: Suit

    @model_validator(mode="after")
    def _check_suit(self) -> "Card":
        if self.is_joker != (self.suit in JOKER_COLOURS):
            raise ValueError(f"Invalid suit {self.suit.value} for rank {self.rank.value}")
        return self

    @property
    def is_joker(self) -> bool:
        """Check if this card is a joker."""
        return self.rank == Rank.JOKER

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        """Stable card id, e.g. ``"10-hearts"`` or ``"joker-red"``."""
        if self.is_joker:
            return f"joker-{self.suit.value}"
        return f"{self.rank.value}-{self.suit.value}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def set_key(self) -> SetKey:
        """Set this card belongs to."""
        if self.rank in (Rank.EIGHT, Rank.JOKER):
            return SetKey.EIGHTS_JOKERS
        kind = SetKind.LOW if self.rank in LOW_RANKS else SetKind.HIGH
        return SetKey.of(kind, self.suit)

    def __str__(self) -> str:
        if self.is_joker:
            return f"{self.suit.value.capitalize()} Joker"
        return f"{SUIT_SYMBOLS[self.suit]}{self.rank.value}"

    def __repr__(self) -> str:
        return str(self)


def _make_deck() -> tuple[Card, ...]:
    cards: list[Card] = []

    for suit in PLAYING_SUITS:
        for rank in LOW_RANKS:
            cards.append(Card(rank=rank, suit=suit))

    for suit in PLAYING_SUITS:
        for rank in HIGH_RANKS:
            cards.append(Card(rank=rank, suit=suit))

    for suit in PLAYING_SUITS:
        cards.append(Card(rank=Rank.EIGHT, suit=suit))
    for colour in JOKER_COLOURS:
        cards.append(Card(rank=Rank.JOKER, suit=colour))

    return tuple(cards)


_DECK = _make_deck()
_CARDS_BY_ID: dict[str, Card] = {card.id: card for card in _DECK}
_CARDS_BY_SET: dict[SetKey, tuple[Card, ...]] = {
    key: tuple(c for c in _DECK if c.set_key == key) for key in SetKey
}


def build_deck() -> list[Card]:
    """Create the full 54-card deck in its canonical order."""
    return list(_DECK)


def cards_in_set(set_key: SetKey | str) -> list[Card]:
    """Get the six cards of a set.

    Args:
        set_key: Set key or its wire name.

    Returns:
        The set's cards in deck order.

    Raises:
        InvalidSetKey: If the key names no known set.
    """
    return list(_CARDS_BY_SET[SetKey.parse(set_key)])


def card_by_id(card_id: str) -> Card:
    """Look up a card by id.

    Raises:
        UnknownCard: If no card in the deck has this id.
    """
    try:
        return _CARDS_BY_ID[card_id]
    except KeyError:
        raise UnknownCard(f"Unknown card: {card_id!r}") from None


class Hand:
    """Cards held by one player, kept in the order they were received."""

    def __init__(self, cards: Iterable[Card] | None = None):
        """Initialize hand.

        Args:
            cards: Initial cards.
        """
        self._cards: dict[str, Card] = {}
        for card in cards or ():
            self.add(card)

    def add(self, card: Card) -> None:
        """Add a card to the hand."""
        self._cards[card.id] = card

    def remove(self, card: Card | str) -> Card | None:
        """Remove a card (or card id) and return it, None if absent."""
        card_id = card if isinstance(card, str) else card.id
        return self._cards.pop(card_id, None)

    def contains(self, card: Card | str) -> bool:
        """Check if a card (or card id) is in the hand."""
        card_id = card if isinstance(card, str) else card.id
        return card_id in self._cards

    def count(self) -> int:
        """Get number of cards."""
        return len(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def ids(self) -> set[str]:
        """Get the ids of all held cards."""
        return set(self._cards)

    def cards_in_set(self, set_key: SetKey) -> list[Card]:
        """Get held cards belonging to a set."""
        return [c for c in self._cards.values() if c.set_key == set_key]

    def has_set(self, set_key: SetKey) -> bool:
        """Check if at least one card of the set is held."""
        return any(c.set_key == set_key for c in self._cards.values())

    def remove_set(self, set_key: SetKey) -> list[Card]:
        """Remove and return every held card of a set."""
        removed = self.cards_in_set(set_key)
        for card in removed:
            del self._cards[card.id]
        return removed

    def to_list(self) -> list[Card]:
        """Get cards in the order they were received."""
        return list(self._cards.values())

    def copy(self) -> "Hand":
        """Create a copy of this hand."""
        return Hand(self._cards.values())

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card: object) -> bool:
        if isinstance(card, (Card, str)):
            return self.contains(card)
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return self.ids() == other.ids()

    def __str__(self) -> str:
        if not self._cards:
            return "[]"
        return "[" + ", ".join(str(c) for c in self._cards.values()) + "]"

    def __repr__(self) -> str:
        return f"Hand({self.to_list()!r})"
