import pytest

from spider.cards import Card, is_sequence, rank_label, rank_value


@pytest.mark.parametrize(
    "label,expected",
    [("A", 1), ("a", 1), ("2", 2), ("10", 10), ("J", 11), ("q", 12), ("K", 13), (7, 7)],
)
def test_rank_value(label, expected):
    assert rank_value(label) == expected


@pytest.mark.parametrize("label", ["0", "14", "X", "", 0, 14])
def test_rank_value_rejects_unknown_labels(label):
    with pytest.raises(ValueError):
        rank_value(label)


def test_rank_label_inverts_rank_value():
    assert [rank_label(rank) for rank in (1, 9, 10, 11, 12, 13)] == ["A", "9", "10", "J", "Q", "K"]


def test_equality_ignores_orientation():
    assert Card(5, "hearts") == Card(5, "hearts", face_up=True)
    assert Card(5, "hearts") != Card(5, "spades")
    assert len({Card(5, "hearts"), Card(5, "hearts", face_up=True)}) == 1


def test_turning_returns_new_values():
    card = Card(12, "clubs")
    up = card.turned_up()
    assert up.face_up and not card.face_up
    assert up.turned_down().face_up is False
    assert up.turned_up() is up


def test_label_and_dict_round_trip():
    card = Card(10, "diamonds", face_up=True)
    assert card.label() == "10♦"
    assert Card.from_dict({"rank": "Q", "suit": "Hearts", "face_up": True}).state() == (
        12,
        "hearts",
        True,
    )
    assert Card.from_dict(card.to_dict()).state() == card.state()


def test_invalid_cards_raise():
    with pytest.raises(ValueError):
        Card(0, "spades")
    with pytest.raises(ValueError):
        Card(3, "stars")


def test_is_sequence_requires_same_suit_face_up_and_step():
    assert is_sequence(Card(8, "spades", True), Card(7, "spades", True))
    assert not is_sequence(Card(8, "spades", True), Card(7, "hearts", True))
    assert not is_sequence(Card(8, "spades", False), Card(7, "spades", True))
    assert not is_sequence(Card(8, "spades", True), Card(6, "spades", True))
