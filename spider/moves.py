"""Move validation and the state transitions of Spider play."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from spider.board import Board
from spider.cards import Card, is_sequence
from spider.completion import remove_completed_sets
from spider.history import History
from spider.rules import PILE_COUNT, RuleProfile, resolve_profile

LOGGER = logging.getLogger(__name__)

SAME_PILE = "same_pile"
INVALID_INDEX = "invalid_index"
NOT_DRAGGABLE = "not_draggable"
ILLEGAL_DROP = "illegal_drop"
NOT_REVEALABLE = "not_revealable"
EMPTY_PILE = "empty_pile"
EMPTY_STOCK = "empty_stock"
EMPTY_HISTORY = "empty_history"
NO_PENDING_MOVE = "no_pending_move"


@dataclass(frozen=True)
class Move:
    """A run of cards lifted from the top of ``source`` starting at ``start_index``."""

    source: int
    start_index: int
    cards: tuple[Card, ...]

    @property
    def bottom(self) -> Card:
        return self.cards[0]

    def __len__(self) -> int:
        return len(self.cards)


@dataclass
class ActionResult:
    """Outcome of an engine operation.

    ``applied`` is ``False`` when a precondition failed; the board is then
    unchanged and ``reason`` names the failed check.
    """

    applied: bool
    board: Board
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"applied": self.applied, "board": self.board.to_dict()}
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


def draggable_run(board: Board, pile_index: int) -> List[int]:
    """Return the indices of the longest movable run at the top of a pile.

    Walks down from the top card while cards are face up and each card below
    is one rank higher in the same suit.
    """

    if not board.has_pile(pile_index):
        return []
    pile = board.piles[pile_index]
    if not pile or not pile[-1].face_up:
        return []
    start = len(pile) - 1
    while start > 0 and is_sequence(pile[start - 1], pile[start]):
        start -= 1
    return list(range(start, len(pile)))


def can_drop(cards: Sequence[Card], target: Sequence[Card]) -> bool:
    """Return whether *cards* may be placed on the *target* pile.

    Any run may go to an empty pile; otherwise the target's top card must be
    exactly one rank above the run's bottom card, whatever its suit.
    """

    if not cards:
        return False
    if not target:
        return True
    return target[-1].rank == cards[0].rank + 1


def _in_pile(pile: Sequence[Card], index: Any) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(pile)


def pick_up(board: Board, pile_index: int, start_index: int) -> Move | None:
    """Return the :class:`Move` lifting ``pile[start_index:]``.

    Any face-up card may start a selection; ``None`` is returned when the
    index is out of range or a card in the selection is face down.
    """

    if not board.has_pile(pile_index):
        return None
    pile = board.piles[pile_index]
    if not _in_pile(pile, start_index):
        return None
    cards = tuple(pile[start_index:])
    if not all(card.face_up for card in cards):
        return None
    return Move(source=pile_index, start_index=start_index, cards=cards)


def apply_move(
    board: Board,
    source: int,
    start_index: int,
    target: int,
    *,
    profile: RuleProfile | None = None,
    history: History | None = None,
) -> Optional[str]:
    """Move the run ``source[start_index:]`` onto *target*.

    Returns ``None`` on success or the reason the move was refused. A refused
    move leaves *board* and *history* untouched.
    """

    profile = resolve_profile(profile)
    if not board.has_pile(source) or not board.has_pile(target):
        return INVALID_INDEX
    if source == target:
        return SAME_PILE
    if not _in_pile(board.piles[source], start_index):
        return INVALID_INDEX
    move = pick_up(board, source, start_index)
    if move is None:
        return NOT_DRAGGABLE
    if not can_drop(move.cards, board.piles[target]):
        return ILLEGAL_DROP

    if history is not None:
        history.snapshot(board)
    board.place_run(target, board.take_run(source, start_index))
    board.flip_top(source)
    board.adjust_score(-profile.move_penalty)
    LOGGER.debug(
        "Moved %d card(s) from pile %d to pile %d", len(move), source, target
    )
    remove_completed_sets(board, profile.set_bonus)
    return None


def reveal_card(
    board: Board,
    pile_index: int,
    card_index: int,
    *,
    history: History | None = None,
) -> Optional[str]:
    """Turn over the face-down top card of a pile."""

    if not board.has_pile(pile_index):
        return INVALID_INDEX
    pile = board.piles[pile_index]
    if not pile or card_index != len(pile) - 1 or pile[-1].face_up:
        return NOT_REVEALABLE
    if history is not None:
        history.snapshot(board)
    board.flip_top(pile_index)
    LOGGER.debug("Revealed %s on pile %d", pile[-1].label(), pile_index)
    return None


def deal_from_stock(
    board: Board,
    *,
    profile: RuleProfile | None = None,
    history: History | None = None,
) -> Optional[str]:
    """Deal one face-up card from the stock onto every pile.

    Dealing is refused while the stock is empty or any pile is empty.
    """

    profile = resolve_profile(profile)
    if not board.stock:
        return EMPTY_STOCK
    if board.has_empty_pile():
        return EMPTY_PILE

    if history is not None:
        history.snapshot(board)
    dealt = 0
    for index in range(PILE_COUNT):
        if not board.stock:
            break
        board.piles[index].append(board.stock.pop().turned_up())
        dealt += 1
    board.adjust_score(-profile.deal_penalty)
    LOGGER.debug("Dealt %d card(s) from stock; %d left", dealt, len(board.stock))
    remove_completed_sets(board, profile.set_bonus)
    return None


__all__ = [
    "ActionResult",
    "EMPTY_HISTORY",
    "EMPTY_PILE",
    "EMPTY_STOCK",
    "ILLEGAL_DROP",
    "INVALID_INDEX",
    "Move",
    "NOT_DRAGGABLE",
    "NOT_REVEALABLE",
    "NO_PENDING_MOVE",
    "SAME_PILE",
    "apply_move",
    "can_drop",
    "deal_from_stock",
    "draggable_run",
    "pick_up",
    "reveal_card",
]
