import pytest

from spider.board import Board
from spider.cards import Card
from spider.deck import build_deck, deal
from spider.history import History


def up(rank, suit="spades"):
    return Card(rank, suit, face_up=True)


def down(rank, suit="spades"):
    return Card(rank, suit)


def opening_board():
    return deal(build_deck("intermediate"))


def test_board_requires_eight_piles():
    with pytest.raises(ValueError):
        Board(piles=[[] for _ in range(7)])


def test_equality_includes_orientation():
    first = Board(piles=[[down(3)]] + [[] for _ in range(7)])
    second = Board(piles=[[up(3)]] + [[] for _ in range(7)])
    assert first != second
    second.piles[0][0] = down(3)
    assert first == second


def test_copy_is_independent():
    board = opening_board()
    clone = board.copy()
    clone.piles[0].pop()
    clone.flip_top(0)
    clone.stock.pop()
    clone.score = 1
    assert len(board.piles[0]) == 6
    assert not board.piles[0][-2].face_up
    assert len(board.stock) == 50
    assert board.score == 500


def test_dict_round_trip():
    board = opening_board()
    board.completed_sets = 0
    restored = Board.from_dict(board.to_dict())
    assert restored == board
    assert restored.to_dict()["piles"][0][-1]["face_up"] is True


def test_invariant_check_reports_problems(check_invariants):
    board = opening_board()
    check_invariants(board)

    broken = board.copy()
    broken.stock.pop()
    with pytest.raises(AssertionError, match="103 cards"):
        check_invariants(broken)

    broken = board.copy()
    broken.piles[0].append(down(4))
    broken.stock.pop()
    with pytest.raises(AssertionError, match="face-down card above"):
        check_invariants(broken)

    broken = board.copy()
    broken.won = True
    with pytest.raises(AssertionError, match="won=True"):
        check_invariants(broken)


def test_history_drops_oldest_snapshot():
    history = History(limit=3)
    board = opening_board()
    for score in (10, 20, 30, 40):
        board.score = score
        history.snapshot(board)
    assert len(history) == 3
    assert [history.pop().score for _ in range(3)] == [40, 30, 20]
    assert history.pop() is None


def test_history_snapshots_do_not_alias_the_live_board():
    history = History()
    board = opening_board()
    history.snapshot(board)
    board.piles[0].clear()
    restored = history.pop()
    assert len(restored.piles[0]) == 6
    history.clear()
    assert not history


def test_history_limit_must_be_positive():
    with pytest.raises(ValueError):
        History(limit=0)
