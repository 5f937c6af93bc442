"""Bounded undo history of board snapshots."""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque

from spider.board import Board

LOGGER = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


class History:
    """Undo stack holding copies of the board taken before each action.

    Once *limit* snapshots are stored the oldest one is dropped.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = int(limit)
        self._stack: Deque[Board] = deque(maxlen=self.limit)

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)

    def snapshot(self, board: Board) -> None:
        if len(self._stack) == self.limit:
            LOGGER.debug("Undo history full; dropping oldest snapshot")
        self._stack.append(board.copy())

    def pop(self) -> Board | None:
        """Return a copy of the most recent snapshot, or ``None`` when empty."""

        if not self._stack:
            return None
        return self._stack.pop().copy()

    def clear(self) -> None:
        self._stack.clear()


__all__ = ["DEFAULT_LIMIT", "History"]
