"""
Tests for roles, round types and the scoring table.
"""

import pytest
from culprit_hunt.core import Role, RoundType, score, get_round_type, get_role_distribution


def test_round_type_alternates():
    """Odd rounds hunt Culprit A, even rounds Culprit B."""
    assert get_round_type(1) == RoundType.TYPE_A
    assert get_round_type(2) == RoundType.TYPE_B
    assert get_round_type(11) == RoundType.TYPE_A
    assert get_round_type(12) == RoundType.TYPE_B


def test_round_type_rejects_round_zero():
    with pytest.raises(ValueError):
        get_round_type(0)


def test_live_culprit_role():
    assert RoundType.TYPE_A.culprit_role == Role.CULPRIT_A
    assert RoundType.TYPE_B.culprit_role == Role.CULPRIT_B


def test_role_distribution_is_one_of_each():
    roles = get_role_distribution()
    assert sorted(r.value for r in roles) == sorted(r.value for r in Role)
    # A fresh list each call, so shuffling one never affects the next
    assert get_role_distribution() is not roles


@pytest.mark.parametrize("round_type", list(RoundType))
@pytest.mark.parametrize("correct", [True, False])
def test_fixer_always_scores_100(round_type, correct):
    assert score(Role.FIXER, round_type, correct) == 100


@pytest.mark.parametrize("round_type", list(RoundType))
def test_investigator_scores(round_type):
    assert score(Role.INVESTIGATOR, round_type, True) == 80
    assert score(Role.INVESTIGATOR, round_type, False) == 0


@pytest.mark.parametrize("role, round_type, correct, expected", [
    # Culprit A is live in Type A rounds
    (Role.CULPRIT_A, RoundType.TYPE_A, True, 0),
    (Role.CULPRIT_A, RoundType.TYPE_A, False, 40),
    (Role.CULPRIT_A, RoundType.TYPE_B, True, 40),
    (Role.CULPRIT_A, RoundType.TYPE_B, False, 40),
    # Culprit B is live in Type B rounds
    (Role.CULPRIT_B, RoundType.TYPE_B, True, 0),
    (Role.CULPRIT_B, RoundType.TYPE_B, False, 60),
    (Role.CULPRIT_B, RoundType.TYPE_A, True, 60),
    (Role.CULPRIT_B, RoundType.TYPE_A, False, 60),
])
def test_culprit_scores(role, round_type, correct, expected):
    assert score(role, round_type, correct) == expected


def test_scores_never_negative():
    for role in Role:
        for round_type in RoundType:
            for correct in (True, False):
                assert score(role, round_type, correct) >= 0
