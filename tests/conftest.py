import pytest

from spider.board import Board
from spider.rules import DECK_SIZE, SET_COUNT


def assert_board_invariants(board: Board) -> None:
    assert board.card_count() == DECK_SIZE, (
        f"board holds {board.card_count()} cards, expected {DECK_SIZE}"
    )
    assert 0 <= board.completed_sets <= SET_COUNT, (
        f"completed_sets out of range: {board.completed_sets}"
    )
    assert board.won == (board.completed_sets >= SET_COUNT), (
        f"won={board.won} with {board.completed_sets} completed sets"
    )
    assert board.score >= 0, f"negative score: {board.score}"
    for index, pile in enumerate(board.piles):
        revealed = False
        for card in pile:
            if card.face_up:
                revealed = True
            else:
                assert not revealed, f"pile {index} has a face-down card above a face-up one"


@pytest.fixture
def check_invariants():
    return assert_board_invariants
