"""Card values and rank helpers for the Spider engine."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

SUITS = ("spades", "hearts", "diamonds", "clubs")
SUIT_SYMBOLS = {
    "spades": "♠",
    "hearts": "♥",
    "diamonds": "♦",
    "clubs": "♣",
}
RANKS = tuple(range(1, 14))
ACE = 1
KING = 13

_RANK_LABELS = {1: "A", 11: "J", 12: "Q", 13: "K"}
_LABEL_RANKS = {label: rank for rank, label in _RANK_LABELS.items()}


def rank_value(label: Any) -> int:
    """Return the numeric rank (Ace=1 .. King=13) for *label*.

    Accepts the printed labels (``"A"``, ``"7"``, ``"10"``, ``"K"``) in any
    case as well as integers already inside the rank range.
    """

    if isinstance(label, bool):
        raise TypeError("Boolean values are not valid ranks")
    if isinstance(label, int):
        if label in RANKS:
            return label
        raise ValueError(f"Rank out of range: {label}")
    if isinstance(label, str):
        token = label.strip().upper()
        if token in _LABEL_RANKS:
            return _LABEL_RANKS[token]
        try:
            parsed = int(token, 10)
        except ValueError as exc:
            raise ValueError(f"Unknown rank label: {label!r}") from exc
        if parsed in RANKS:
            return parsed
        raise ValueError(f"Rank out of range: {label!r}")
    raise TypeError(f"Unsupported rank type: {type(label).__name__}")


def rank_label(rank: int) -> str:
    if rank not in RANKS:
        raise ValueError(f"Rank out of range: {rank}")
    return _RANK_LABELS.get(rank, str(rank))


@dataclass(frozen=True)
class Card:
    """A playing card.

    Two physical cards may share ``(rank, suit)`` since Spider is played with
    two decks, so equality ignores ``face_up``. Cards are immutable; turning a
    card over produces a new value.
    """

    rank: int
    suit: str
    face_up: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Rank out of range: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Unknown suit: {self.suit!r}")

    def turned_up(self) -> "Card":
        return self if self.face_up else replace(self, face_up=True)

    def turned_down(self) -> "Card":
        return replace(self, face_up=False) if self.face_up else self

    def label(self) -> str:
        return f"{rank_label(self.rank)}{SUIT_SYMBOLS[self.suit]}"

    def state(self) -> tuple[int, str, bool]:
        """Return the card as a tuple that includes its orientation."""
        return (self.rank, self.suit, self.face_up)

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, "suit": self.suit, "face_up": self.face_up}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Card":
        return cls(
            rank=rank_value(data["rank"]),
            suit=str(data["suit"]).strip().lower(),
            face_up=bool(data.get("face_up", False)),
        )

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return self.label() if self.face_up else "--"


def is_sequence(lower: Card, upper: Card) -> bool:
    """Return ``True`` when *upper* continues a same-suit run on *lower*."""

    return (
        lower.face_up
        and upper.face_up
        and lower.suit == upper.suit
        and lower.rank == upper.rank + 1
    )


__all__ = [
    "ACE",
    "Card",
    "KING",
    "RANKS",
    "SUITS",
    "SUIT_SYMBOLS",
    "is_sequence",
    "rank_label",
    "rank_value",
]
