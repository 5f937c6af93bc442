"""Difficulty profiles for the Spider rules engine."""
from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping, MutableMapping

from spider.cards import SUITS

PILE_COUNT = 8
SET_COUNT = 8
DECK_SIZE = 104


def _coerce_non_negative_int(value: Any, default: int = 0) -> int:
    """Best-effort conversion of *value* into a non-negative integer."""

    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        candidate = int(value)
        return candidate if candidate >= 0 else default
    if isinstance(value, str):
        token = value.strip()
        if not token:
            return default
        try:
            candidate = int(token, 10)
        except ValueError:
            return default
        return candidate if candidate >= 0 else default
    return default


def _normalise_suits(value: Any) -> tuple[str, ...]:
    """Convert *value* into a validated tuple of suit names.

    Profiles loaded from JSON carry suits as lists, and hand-written
    configuration occasionally uses a single comma separated string.  Either
    form is accepted; the number of suits must divide the eight sets a game
    needs so every profile deals exactly 104 cards.
    """

    if isinstance(value, str):
        items = [token for token in value.split(",")]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise TypeError(f"Unsupported suits type: {type(value).__name__}")

    suits = tuple(str(item).strip().lower() for item in items if str(item).strip())
    if not suits:
        raise ValueError("A profile needs at least one suit")
    unknown = [suit for suit in suits if suit not in SUITS]
    if unknown:
        raise ValueError(f"Unknown suits: {', '.join(unknown)}")
    if len(set(suits)) != len(suits):
        raise ValueError("Suits must not repeat")
    if SET_COUNT % len(suits):
        raise ValueError(f"{len(suits)} suits cannot make {SET_COUNT} complete sets")
    return suits


@dataclass(frozen=True)
class RuleProfile:
    """A difficulty level: which suits are dealt and how play is scored."""

    name: str
    label: str
    suits: tuple[str, ...]
    starting_score: int = 500
    move_penalty: int = 1
    deal_penalty: int = 5
    set_bonus: int = 100
    history_limit: int = 20

    def __post_init__(self) -> None:
        object.__setattr__(self, "suits", _normalise_suits(self.suits))
        defaults = {
            "starting_score": 500,
            "move_penalty": 1,
            "deal_penalty": 5,
            "set_bonus": 100,
            "history_limit": 20,
        }
        for key, default in defaults.items():
            object.__setattr__(
                self, key, _coerce_non_negative_int(getattr(self, key), default)
            )

    @property
    def copies_per_suit(self) -> int:
        """Return how many 13-card runs of each suit the deck contains."""

        return SET_COUNT // len(self.suits)

    def to_dict(self) -> MutableMapping[str, Any]:
        """Return the profile as a JSON-serialisable mapping."""
        payload = dict(asdict(self))
        payload["suits"] = list(self.suits)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleProfile":
        """Create a profile from *data* produced by :meth:`to_dict`."""
        fields = {field.name for field in cls.__dataclass_fields__.values()}
        filtered = {k: data[k] for k in data if k in fields}
        return cls(**filtered)  # type: ignore[arg-type]

    def to_json(self) -> str:
        """Serialise the profile to a JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "RuleProfile":
        """Deserialise a :class:`RuleProfile` from *payload*."""
        return cls.from_dict(json.loads(payload))


BEGINNER = RuleProfile(
    name="beginner",
    label="Beginner (1 suit)",
    suits=("spades",),
)

INTERMEDIATE = RuleProfile(
    name="intermediate",
    label="Intermediate (2 suits)",
    suits=("spades", "hearts"),
)

ADVANCED = RuleProfile(
    name="advanced",
    label="Advanced (4 suits)",
    suits=SUITS,
)

PROFILES = {
    "beginner": BEGINNER,
    "easy": BEGINNER,
    "one": BEGINNER,
    "1": BEGINNER,
    "intermediate": INTERMEDIATE,
    "medium": INTERMEDIATE,
    "two": INTERMEDIATE,
    "2": INTERMEDIATE,
    "advanced": ADVANCED,
    "hard": ADVANCED,
    "four": ADVANCED,
    "4": ADVANCED,
}


def resolve_profile(value: Any = None) -> RuleProfile:
    """Return the :class:`RuleProfile` described by *value*.

    Unknown names fall back to the four-suit :data:`ADVANCED` profile, the
    composition of an ordinary two-deck game.
    """

    if isinstance(value, RuleProfile):
        return value
    if value is None:
        return ADVANCED
    if isinstance(value, bool):
        raise TypeError("Boolean values are not valid difficulties")
    if isinstance(value, int):
        value = str(value)
    if isinstance(value, str):
        return PROFILES.get(value.strip().lower(), ADVANCED)
    raise TypeError(f"Unsupported difficulty type: {type(value).__name__}")


__all__ = [
    "ADVANCED",
    "BEGINNER",
    "DECK_SIZE",
    "INTERMEDIATE",
    "PILE_COUNT",
    "PROFILES",
    "RuleProfile",
    "SET_COUNT",
    "resolve_profile",
]
