import random

import pytest

from spider.board import Board
from spider.cards import Card
from spider.deck import build_deck
from spider.game import SpiderGame
from spider.hints import FlipHint, MoveHint


def up(rank, suit="spades"):
    return Card(rank, suit, face_up=True)


def down(rank, suit="spades"):
    return Card(rank, suit)


def padded(*piles):
    columns = [list(pile) for pile in piles]
    while len(columns) < 8:
        columns.append([down(1, "clubs"), up(13, "diamonds")])
    return columns


@pytest.mark.parametrize("difficulty", ["beginner", "intermediate", "advanced"])
def test_new_game_layout(difficulty):
    game = SpiderGame(difficulty, seed=11)
    board = game.board
    assert board.card_count() == 104
    assert [len(pile) for pile in board.piles] == [6, 6, 6, 6, 5, 5, 5, 5]
    assert all(sum(card.face_up for card in pile) == 1 and pile[-1].face_up for pile in board.piles)
    assert (board.score, board.completed_sets, board.won) == (500, 0, False)
    assert game.stock_deals_remaining == 7
    assert not game.can_undo


def test_seeded_games_are_reproducible():
    assert SpiderGame(seed=3).board == SpiderGame(seed=3).board
    assert SpiderGame(rng=random.Random(3)).board == SpiderGame(seed=3).board


def test_rng_and_seed_are_exclusive():
    with pytest.raises(ValueError):
        SpiderGame(rng=random.Random(1), seed=1)


def test_fixed_deck_is_dealt_in_order():
    deck = build_deck("beginner")
    game = SpiderGame("beginner", deck=deck)
    assert game.board.piles[0] == deck[:6]
    assert game.board.stock == deck[54:]
    assert game.new_game() == SpiderGame("beginner", deck=deck).board


def test_fixed_deck_is_dropped_when_level_changes():
    deck = build_deck("beginner")
    game = SpiderGame("beginner", deck=deck)
    assert game.new_game("beginner").stock == deck[54:]

    board = game.new_game("advanced")
    suits = {card.suit for card in board.stock}
    suits.update(card.suit for pile in board.piles for card in pile)
    assert suits == {"spades", "hearts", "diamonds", "clubs"}


def test_new_game_switches_level_and_clears_history():
    game = SpiderGame("beginner", seed=8)
    assert game.level_name == "Beginner (1 suit)"
    game.deal_from_stock()
    assert game.can_undo

    game.new_game("intermediate")
    assert game.level_name == "Intermediate (2 suits)"
    assert {card.suit for pile in game.board.piles for card in pile} <= {"spades", "hearts"}
    assert not game.can_undo


def test_restart_current_level_restores_opening_deal():
    game = SpiderGame(seed=21)
    opening = game.board.copy()
    game.deal_from_stock()
    game.deal_from_stock()
    assert game.board != opening

    board = game.restart_current_level()
    assert board == opening
    assert board.score == 500
    assert not game.can_undo

    # Restarting twice still starts from the same deal.
    game.deal_from_stock()
    assert game.restart_current_level() == opening


def test_undo_restores_exact_previous_board():
    game = SpiderGame(seed=5)
    game.board = Board(
        piles=padded([down(2), up(8), up(7)], [up(9, "hearts")]),
        stock=[down(rank, "hearts") for rank in range(1, 9)],
    )
    before_move = game.board.copy()
    assert game.apply_move(0, 1, 1).applied
    after_move = game.board.copy()
    assert game.deal_from_stock().applied

    assert game.undo().board == after_move
    assert game.undo().board == before_move
    result = game.undo()
    assert not result.applied
    assert result.reason == "empty_history"
    assert game.board == before_move
    assert not game.board.piles[0][0].face_up


def test_undo_is_bounded_to_twenty_steps():
    game = SpiderGame(seed=2)
    game.board = Board(piles=padded([up(6), up(5)], [up(6, "hearts")]))
    # Shuttle the five between the two sixes 25 times.
    for step in range(25):
        source, target = (0, 1) if step % 2 == 0 else (1, 0)
        assert game.apply_move(source, 1, target).applied
    assert game.history_depth == 20

    undone = 0
    while game.undo().applied:
        undone += 1
    assert undone == 20


def test_rejected_actions_do_not_touch_history():
    game = SpiderGame(seed=4)
    before = game.board.copy()
    assert not game.apply_move(0, 5, 0).applied
    assert not game.reveal_card(0, 0).applied
    assert game.board == before
    assert not game.can_undo


def test_drag_and_drop_flow():
    game = SpiderGame(seed=7)
    game.board = Board(piles=padded([down(2), up(8), up(7)], [up(9, "hearts")]))

    assert game.begin_move(0, 0) is None
    move = game.begin_move(0, 1)
    assert move is not None
    assert [card.rank for card in move.cards] == [8, 7]

    result = game.drop(1)
    assert result.applied
    assert game.pending_move is None
    assert [card.rank for card in game.board.piles[1]] == [9, 8, 7]
    assert game.board.piles[0][-1].face_up

    assert game.drop(1).reason == "no_pending_move"


def test_cancel_move_clears_selection():
    game = SpiderGame(seed=7)
    game.board = Board(piles=padded([down(2), up(8), up(7)], [up(9, "hearts")]))
    before = game.board.copy()

    assert game.begin_move(0, 1) is not None
    game.cancel_move()
    assert game.pending_move is None
    assert game.drop(1).reason == "no_pending_move"
    assert game.board == before


def test_undo_clears_pending_selection():
    game = SpiderGame(seed=7)
    game.deal_from_stock()
    game.begin_move(0, len(game.board.piles[0]) - 1)
    assert game.pending_move is not None
    assert game.undo().applied
    assert game.pending_move is None


def test_beginner_set_completion_scores_and_vanishes():
    game = SpiderGame("beginner", seed=1)
    king_to_two = [up(rank) for rank in range(13, 1, -1)]
    game.board = Board(
        piles=padded([down(9)] + king_to_two, [down(4), up(1)]),
        score=320,
    )
    result = game.apply_move(1, 1, 0)
    assert result.applied
    assert result.board.completed_sets == 1
    assert result.board.piles[0] == [down(9)]
    assert result.board.piles[0][0].face_up
    assert result.board.piles[1][0].face_up
    assert result.board.score == 320 - 1 + 100


def test_deal_with_empty_pile_reports_reason():
    game = SpiderGame(seed=9)
    game.board.piles[3] = []
    before = game.board.copy()
    result = game.deal_from_stock()
    assert not result.applied
    assert result.reason == "empty_pile"
    assert game.board == before


def test_compute_hint_flip_when_no_moves():
    game = SpiderGame(seed=9)
    game.board = Board(piles=padded([up(2, "hearts")], [down(5), down(11)]))
    hint = game.compute_hint()
    assert isinstance(hint, FlipHint)
    assert (hint.pile_index, hint.card_index) == (1, 1)


def test_hint_moves_are_always_legal():
    game = SpiderGame(seed=13)
    for _ in range(30):
        hint = game.compute_hint()
        if not isinstance(hint, MoveHint):
            if not game.deal_from_stock().applied:
                break
            continue
        before = game.board.copy()
        assert game.apply_move(hint.source, hint.start_index, hint.target).applied
        assert game.board != before


def test_score_never_negative(check_invariants):
    game = SpiderGame(seed=17)
    game.board.score = 3
    while game.deal_from_stock().applied:
        assert game.board.score >= 0
    assert game.board.score == 0
    check_invariants(game.board)
