"""Greedy hint engine.

The engine never mutates the board.  Every legal run transfer is scored with
a small set of additive weights and the best one is suggested; when nothing
can move, the first pile showing a face-down top card is suggested for a flip.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from spider.board import Board
from spider.cards import KING, Card, is_sequence
from spider.moves import Move, can_drop

EXPOSE_BONUS = 50
EMPTY_TARGET_KING_BONUS = 30
EMPTY_TARGET_BONUS = 10
SEQUENCE_WEIGHT = 5
KING_SEQUENCE_WEIGHT = 10
SUIT_MATCH_BONUS = 20


@dataclass(frozen=True)
class MoveHint:
    source: int
    start_index: int
    target: int
    cards: tuple[Card, ...] = field(compare=False)
    score: int = 0

    kind = "move"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "source": self.source,
            "start_index": self.start_index,
            "target": self.target,
            "cards": [card.to_dict() for card in self.cards],
            "score": self.score,
        }


@dataclass(frozen=True)
class FlipHint:
    pile_index: int
    card_index: int

    kind = "flip"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "pile_index": self.pile_index, "card_index": self.card_index}


@dataclass(frozen=True)
class NoHint:
    message: str = "No hint available"

    kind = "none"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


def sequence_length(cards: Sequence[Card]) -> int:
    """Return how many cards from the bottom of *cards* descend in one suit."""

    if not cards:
        return 0
    length = 1
    for lower, upper in zip(cards, cards[1:]):
        if upper.suit != lower.suit or upper.rank != lower.rank - 1:
            break
        length += 1
    return length


def run_starts(pile: Sequence[Card]) -> List[int]:
    """Return where each same-suit descending run begins, topmost run first.

    Walks down from the top card through the face-up cards and records a new
    start every time the chain breaks.
    """

    starts: List[int] = []
    index = len(pile) - 1
    while index >= 0 and pile[index].face_up:
        start = index
        while start > 0 and is_sequence(pile[start - 1], pile[start]):
            start -= 1
        starts.append(start)
        index = start - 1
    return starts


def candidate_runs(board: Board, pile_index: int) -> List[Move]:
    """Return the selections the hint engine tries for one pile."""

    pile = board.piles[pile_index]
    return [
        Move(source=pile_index, start_index=start, cards=tuple(pile[start:]))
        for start in run_starts(pile)
    ]


def legal_moves(board: Board) -> List[tuple[Move, int]]:
    """Enumerate ``(move, target)`` pairs in pile order."""

    found: List[tuple[Move, int]] = []
    for source, pile in enumerate(board.piles):
        if not pile:
            continue
        for move in candidate_runs(board, source):
            for target, target_pile in enumerate(board.piles):
                if target == source:
                    continue
                if can_drop(move.cards, target_pile):
                    found.append((move, target))
    return found


def score_move(board: Board, move: Move, target: int) -> int:
    source_pile = board.piles[move.source]
    target_pile = board.piles[target]
    bottom = move.bottom
    score = 0

    if move.start_index > 0 and not source_pile[move.start_index - 1].face_up:
        score += EXPOSE_BONUS

    if not target_pile:
        score += EMPTY_TARGET_KING_BONUS if bottom.rank == KING else EMPTY_TARGET_BONUS

    length = sequence_length(move.cards)
    score += SEQUENCE_WEIGHT * length
    if bottom.rank == KING and length > 1:
        score += KING_SEQUENCE_WEIGHT * length

    if target_pile and target_pile[-1].suit == bottom.suit:
        score += SUIT_MATCH_BONUS
    return score


def compute_hint(board: Board) -> MoveHint | FlipHint | NoHint:
    """Return the best move, else a card to flip, else :class:`NoHint`."""

    best: MoveHint | None = None
    for move, target in legal_moves(board):
        score = score_move(board, move, target)
        # Strictly greater keeps the first move found on ties.
        if best is None or score > best.score:
            best = MoveHint(
                source=move.source,
                start_index=move.start_index,
                target=target,
                cards=move.cards,
                score=score,
            )
    if best is not None:
        return best

    for index, pile in enumerate(board.piles):
        if pile and not pile[-1].face_up:
            return FlipHint(pile_index=index, card_index=len(pile) - 1)
    return NoHint()


__all__ = [
    "FlipHint",
    "MoveHint",
    "NoHint",
    "candidate_runs",
    "compute_hint",
    "legal_moves",
    "run_starts",
    "score_move",
    "sequence_length",
]
