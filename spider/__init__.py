"""Spider solitaire rules engine."""
from spider.board import Board
from spider.cards import Card
from spider.game import SpiderGame
from spider.hints import FlipHint, MoveHint, NoHint
from spider.moves import ActionResult, Move
from spider.rules import ADVANCED, BEGINNER, INTERMEDIATE, RuleProfile, resolve_profile

__all__ = [
    "ADVANCED",
    "ActionResult",
    "BEGINNER",
    "Board",
    "Card",
    "FlipHint",
    "INTERMEDIATE",
    "Move",
    "MoveHint",
    "NoHint",
    "RuleProfile",
    "SpiderGame",
    "resolve_profile",
]
