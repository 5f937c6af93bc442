import json
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spider.rules import (
    ADVANCED,
    BEGINNER,
    INTERMEDIATE,
    RuleProfile,
    resolve_profile,
)


@pytest.mark.parametrize(
    "profile,suits,copies",
    [
        (BEGINNER, ("spades",), 8),
        (INTERMEDIATE, ("spades", "hearts"), 4),
        (ADVANCED, ("spades", "hearts", "diamonds", "clubs"), 2),
    ],
)
def test_profiles_fill_eight_sets(profile, suits, copies):
    assert profile.suits == suits
    assert profile.copies_per_suit == copies
    assert len(profile.suits) * profile.copies_per_suit == 8


def test_profile_defaults_match_classic_scoring():
    assert ADVANCED.starting_score == 500
    assert ADVANCED.move_penalty == 1
    assert ADVANCED.deal_penalty == 5
    assert ADVANCED.set_bonus == 100
    assert ADVANCED.history_limit == 20


@pytest.mark.parametrize(
    "value,expected",
    [
        ("beginner", BEGINNER),
        ("  Easy ", BEGINNER),
        (1, BEGINNER),
        ("intermediate", INTERMEDIATE),
        ("2", INTERMEDIATE),
        ("advanced", ADVANCED),
        (4, ADVANCED),
        (None, ADVANCED),
        ("expert", ADVANCED),
        (INTERMEDIATE, INTERMEDIATE),
    ],
)
def test_resolve_profile(value, expected):
    assert resolve_profile(value) is expected


def test_resolve_profile_rejects_booleans():
    with pytest.raises(TypeError):
        resolve_profile(True)


def test_serialisation_round_trip():
    payload = INTERMEDIATE.to_json()
    restored = RuleProfile.from_json(payload)
    assert restored == INTERMEDIATE
    assert json.loads(payload)["suits"] == ["spades", "hearts"]


def test_from_dict_ignores_unknown_keys_and_accepts_suit_string():
    profile = RuleProfile.from_dict(
        {"name": "custom", "label": "Custom", "suits": "clubs, diamonds", "colour": "red"}
    )
    assert profile.suits == ("clubs", "diamonds")
    assert profile.copies_per_suit == 4


def test_numeric_fields_are_coerced():
    profile = RuleProfile(
        name="custom",
        label="Custom",
        suits=("spades",),
        starting_score="250",
        history_limit=-3,
        deal_penalty=2.0,
    )
    assert profile.starting_score == 250
    assert profile.history_limit == 20
    assert profile.deal_penalty == 2


@pytest.mark.parametrize(
    "suits,expected_exception",
    [
        ((), ValueError),
        (("spades", "hearts", "clubs"), ValueError),
        (("spades", "spades"), ValueError),
        (("stars",), ValueError),
        (42, TypeError),
    ],
)
def test_invalid_suits_raise(suits, expected_exception):
    with pytest.raises(expected_exception):
        RuleProfile(name="bad", label="Bad", suits=suits)
