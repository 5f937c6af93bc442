"""Detection and removal of completed King-to-Ace sets."""
from __future__ import annotations

import logging
from typing import Sequence

from spider.board import SET_SIZE, Board
from spider.cards import KING, Card
from spider.rules import SET_COUNT

LOGGER = logging.getLogger(__name__)


def is_completed_set(cards: Sequence[Card]) -> bool:
    """Return ``True`` for 13 face-up cards of one suit reading K down to A."""

    if len(cards) != SET_SIZE:
        return False
    suit = cards[0].suit
    for offset, card in enumerate(cards):
        if not card.face_up or card.suit != suit or card.rank != KING - offset:
            return False
    return True


def remove_completed_sets(board: Board, set_bonus: int = 100) -> int:
    """Retire every completed set sitting on top of a pile.

    All piles are scanned in one pass and every match found is applied
    together. Returns the number of sets removed.
    """

    removed = 0
    for index, pile in enumerate(board.piles):
        if len(pile) < SET_SIZE:
            continue
        if not is_completed_set(pile[-SET_SIZE:]):
            continue
        suit = pile[-1].suit
        del pile[-SET_SIZE:]
        board.flip_top(index)
        removed += 1
        LOGGER.info("Completed a %s set on pile %d", suit, index)

    if removed:
        board.completed_sets += removed
        board.adjust_score(set_bonus * removed)
        if board.completed_sets >= SET_COUNT:
            board.won = True
            LOGGER.info("All %d sets completed; game won with score %d", SET_COUNT, board.score)
    return removed


__all__ = ["is_completed_set", "remove_completed_sets"]
