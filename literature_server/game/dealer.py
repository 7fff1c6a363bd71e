"""Shuffling and dealing."""

import logging
import random
from typing import Sequence

from literature_server.config import RemainderPolicy
from literature_server.models.card import Card, Hand

logger = logging.getLogger(__name__)


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a shuffled copy of the deck.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every permutation
    is equally likely.

    Args:
        deck: Cards to shuffle (left untouched).
        rng: Random source. Tests pass a seeded ``random.Random``.

    Returns:
        New list with the cards in random order.
    """
    cards = list(deck)
    (rng or random.Random()).shuffle(cards)
    return cards


def deal(
    player_ids: Sequence[str],
    deck: Sequence[Card],
    rng: random.Random | None = None,
    remainder: RemainderPolicy = RemainderPolicy.ROUND_ROBIN,
) -> dict[str, Hand]:
    """Shuffle the deck and deal it to the players.

    Every player gets ``len(deck) // len(player_ids)`` cards in seat order.
    Leftover cards follow ``remainder``: with ``ROUND_ROBIN`` they are handed
    out one each starting from the first seat, with ``DROP`` they are not
    dealt at all.

    Args:
        player_ids: Player IDs in seat order.
        deck: Cards to deal.
        rng: Random source for the shuffle.
        remainder: Policy for leftover cards.

    Returns:
        Dict of player_id -> hand.

    Raises:
        ValueError: If there are no players or duplicate player IDs.
    """
    if not player_ids:
        raise ValueError("Cannot deal to zero players")
    if len(set(player_ids)) != len(player_ids):
        raise ValueError("Duplicate player IDs")

    cards = shuffle_deck(deck, rng)
    num_players = len(player_ids)
    per_player = len(cards) // num_players

    hands = {
        pid: Hand(cards[i * per_player:(i + 1) * per_player])
        for i, pid in enumerate(player_ids)
    }

    leftover = cards[num_players * per_player:]
    if leftover:
        if remainder == RemainderPolicy.ROUND_ROBIN:
            for i, card in enumerate(leftover):
                hands[player_ids[i % num_players]].add(card)
        else:
            logger.warning(f"{len(leftover)} cards left out of the deal")

    logger.debug(f"Dealt {per_player} cards to each of {num_players} players")
    return hands
