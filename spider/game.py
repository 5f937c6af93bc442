"""The Spider game facade used by presentation layers.

A :class:`SpiderGame` owns one live :class:`~spider.board.Board`.  The engine
does no locking: callers must issue one operation at a time (a UI event loop
does this naturally; the HTTP adapter holds a lock).
"""
from __future__ import annotations

import logging
import math
import random
from typing import Any, Iterable, List, Optional

from spider import moves
from spider.board import Board
from spider.cards import Card
from spider.deck import build_deck, deal, shuffle_deck
from spider.hints import FlipHint, MoveHint, NoHint, compute_hint
from spider.history import History
from spider.moves import ActionResult, Move
from spider.rules import PILE_COUNT, RuleProfile, resolve_profile

LOGGER = logging.getLogger(__name__)


class SpiderGame:
    """Spider solitaire with undo, restart and hints."""

    def __init__(
        self,
        difficulty: Any = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        deck: Optional[Iterable[Card]] = None,
    ) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self.profile: RuleProfile = resolve_profile(difficulty)
        self._rng = rng if rng is not None else random.Random(seed)
        self._fixed_deck = list(deck) if deck is not None else None
        self.history = History(self.profile.history_limit)
        self.pending_move: Optional[Move] = None
        self.board: Board = Board()
        self._initial_board: Board = Board()
        self.new_game()

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------
    def new_game(self, difficulty: Any = None) -> Board:
        """Build, shuffle and deal a new game, keeping the level if omitted."""

        if difficulty is not None:
            profile = resolve_profile(difficulty)
            if profile != self.profile:
                # A fixed deck only belongs to the level it was given for.
                self._fixed_deck = None
            self.profile = profile
            self.history = History(self.profile.history_limit)
        if self._fixed_deck is not None:
            deck = list(self._fixed_deck)
        else:
            deck = shuffle_deck(build_deck(self.profile), self._rng)
        self.board = deal(deck, self.profile)
        self._initial_board = self.board.copy()
        self.history.clear()
        self.pending_move = None
        LOGGER.info("New %s game dealt", self.profile.name)
        return self.board

    def restart_current_level(self) -> Board:
        """Return to the opening deal of the current game."""

        self.board = self._initial_board.copy()
        self.board.score = self.profile.starting_score
        self.board.completed_sets = 0
        self.board.won = False
        self.history.clear()
        self.pending_move = None
        LOGGER.info("Restarted %s game from its opening deal", self.profile.name)
        return self.board

    # ------------------------------------------------------------------
    # Read-only helpers
    # ------------------------------------------------------------------
    @property
    def level_name(self) -> str:
        return self.profile.label

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def history_depth(self) -> int:
        return len(self.history)

    @property
    def stock_deals_remaining(self) -> int:
        return math.ceil(len(self.board.stock) / PILE_COUNT)

    def draggable_run(self, pile_index: int) -> List[int]:
        return moves.draggable_run(self.board, pile_index)

    def compute_hint(self) -> MoveHint | FlipHint | NoHint:
        return compute_hint(self.board)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def _result(self, reason: Optional[str], action: str) -> ActionResult:
        if reason is not None:
            LOGGER.debug("Refused %s: %s", action, reason)
        return ActionResult(applied=reason is None, board=self.board, reason=reason)

    def apply_move(self, source: int, start_index: int, target: int) -> ActionResult:
        reason = moves.apply_move(
            self.board,
            source,
            start_index,
            target,
            profile=self.profile,
            history=self.history,
        )
        return self._result(reason, "move")

    def reveal_card(self, pile_index: int, card_index: int) -> ActionResult:
        reason = moves.reveal_card(
            self.board, pile_index, card_index, history=self.history
        )
        return self._result(reason, "reveal")

    def deal_from_stock(self) -> ActionResult:
        reason = moves.deal_from_stock(
            self.board, profile=self.profile, history=self.history
        )
        return self._result(reason, "deal")

    def undo(self) -> ActionResult:
        previous = self.history.pop()
        if previous is None:
            return self._result(moves.EMPTY_HISTORY, "undo")
        self.board = previous
        self.pending_move = None
        LOGGER.debug("Undid last action; %d snapshot(s) left", len(self.history))
        return self._result(None, "undo")

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------
    def begin_move(self, pile_index: int, start_index: int) -> Optional[Move]:
        """Select the run starting at *start_index* for a later :meth:`drop`."""

        self.pending_move = moves.pick_up(self.board, pile_index, start_index)
        return self.pending_move

    def cancel_move(self) -> None:
        self.pending_move = None

    def drop(self, target: int) -> ActionResult:
        move = self.pending_move
        self.pending_move = None
        if move is None:
            return self._result(moves.NO_PENDING_MOVE, "drop")
        return self.apply_move(move.source, move.start_index, target)


__all__ = ["ActionResult", "SpiderGame"]
