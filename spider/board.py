"""Board model: eight tableau piles, the stock and the running score."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping

from spider.cards import Card
from spider.rules import PILE_COUNT

SET_SIZE = 13


@dataclass(eq=False)
class Board:
    """Mutable game state shared between the engine operations.

    ``piles[i]`` is ordered bottom to top; ``stock`` is dealt from its tail.
    Equality compares every card including its orientation.
    """

    piles: List[List[Card]] = field(default_factory=lambda: [[] for _ in range(PILE_COUNT)])
    stock: List[Card] = field(default_factory=list)
    score: int = 500
    completed_sets: int = 0
    won: bool = False

    def __post_init__(self) -> None:
        if len(self.piles) != PILE_COUNT:
            raise ValueError(f"A board needs exactly {PILE_COUNT} piles, got {len(self.piles)}")
        self.piles = [list(pile) for pile in self.piles]
        self.stock = list(self.stock)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------
    def copy(self) -> "Board":
        return Board(
            piles=[list(pile) for pile in self.piles],
            stock=list(self.stock),
            score=self.score,
            completed_sets=self.completed_sets,
            won=self.won,
        )

    def state_key(self) -> tuple:
        """Return a hashable representation of the complete board."""

        return (
            tuple(tuple(card.state() for card in pile) for pile in self.piles),
            tuple(card.state() for card in self.stock),
            self.score,
            self.completed_sets,
            self.won,
        )

    def layout_key(self) -> tuple:
        """Like :meth:`state_key` but without the score."""

        piles, stock, _score, completed, won = self.state_key()
        return (piles, stock, completed, won)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.state_key() == other.state_key()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def has_pile(self, index: Any) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < PILE_COUNT

    def top(self, index: int) -> Card | None:
        pile = self.piles[index]
        return pile[-1] if pile else None

    def has_empty_pile(self) -> bool:
        return any(not pile for pile in self.piles)

    def card_count(self) -> int:
        return (
            sum(len(pile) for pile in self.piles)
            + len(self.stock)
            + SET_SIZE * self.completed_sets
        )

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------
    def adjust_score(self, delta: int) -> None:
        self.score = max(0, self.score + delta)

    def flip_top(self, index: int) -> bool:
        """Turn the top card of pile *index* face up; return whether it flipped."""

        pile = self.piles[index]
        if pile and not pile[-1].face_up:
            pile[-1] = pile[-1].turned_up()
            return True
        return False

    def take_run(self, index: int, start: int) -> list[Card]:
        pile = self.piles[index]
        run = pile[start:]
        del pile[start:]
        return run

    def place_run(self, index: int, cards: Iterable[Card]) -> None:
        self.piles[index].extend(cards)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "piles": [[card.to_dict() for card in pile] for pile in self.piles],
            "stock": [card.to_dict() for card in self.stock],
            "score": self.score,
            "completed_sets": self.completed_sets,
            "won": self.won,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Board":
        return cls(
            piles=[[Card.from_dict(card) for card in pile] for pile in data["piles"]],
            stock=[Card.from_dict(card) for card in data.get("stock", [])],
            score=int(data.get("score", 500)),
            completed_sets=int(data.get("completed_sets", 0)),
            won=bool(data.get("won", False)),
        )


__all__ = ["Board", "SET_SIZE"]
