"""Deck construction, shuffling and the opening deal."""
from __future__ import annotations

import random
from typing import Any, Iterable, List, Sequence

from spider.board import Board
from spider.cards import RANKS, Card
from spider.rules import DECK_SIZE, RuleProfile, resolve_profile

# Piles 0-3 open with six cards, piles 4-7 with five: 54 dealt, 50 in stock.
OPENING_PILE_SIZES = (6, 6, 6, 6, 5, 5, 5, 5)


def build_deck(difficulty: Any = None) -> List[Card]:
    """Return the unshuffled, face-down deck for *difficulty*.

    Every difficulty yields 104 cards: the profile's suits are repeated
    until they fill eight complete King-to-Ace sets.
    """

    profile = resolve_profile(difficulty)
    return [
        Card(rank, suit)
        for _ in range(profile.copies_per_suit)
        for suit in profile.suits
        for rank in RANKS
    ]


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> List[Card]:
    """Return a uniformly shuffled copy of *deck* (Fisher-Yates).

    *rng* supplies the randomness; pass a seeded ``random.Random`` for
    reproducible deals.
    """

    rng = rng if rng is not None else random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal(deck: Iterable[Card], profile: RuleProfile | None = None) -> Board:
    """Lay out the opening tableau from *deck* and return the new board.

    Cards are taken from the head of *deck*; only the last card dealt to each
    pile is face up. The rest of the deck becomes the stock, in deck order.
    """

    profile = resolve_profile(profile)
    cards = list(deck)
    if len(cards) != DECK_SIZE:
        raise ValueError(f"Expected a {DECK_SIZE} card deck, got {len(cards)}")

    piles: List[List[Card]] = []
    position = 0
    for size in OPENING_PILE_SIZES:
        pile = [card.turned_down() for card in cards[position:position + size]]
        pile[-1] = pile[-1].turned_up()
        piles.append(pile)
        position += size

    stock = [card.turned_down() for card in cards[position:]]
    return Board(piles=piles, stock=stock, score=profile.starting_score)


__all__ = ["OPENING_PILE_SIZES", "build_deck", "deal", "shuffle_deck"]
