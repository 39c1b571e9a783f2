from __future__ import annotations

import pytest

from utils.dto import Promotion
from utils.errors import CurriculumError, InvalidThresholdError
from utils.promotion import (
    DEFAULT_CURRICULUM,
    CurriculumOrder,
    classify_roster,
    classify_student,
    flatten_curriculum,
    validate_threshold,
)


# ---------------------------------------------------------------------------
# Curriculum order
# ---------------------------------------------------------------------------

def test_flatten_keeps_stage_declaration_order():
    stages = {"Primary": ["P1", "P2"], "JHS": ["J1"]}
    assert flatten_curriculum(stages) == ("P1", "P2", "J1")


def test_flatten_accepts_pairs():
    assert flatten_curriculum([("KG", ["K1"]), ("Primary", ["P1"])]) == ("K1", "P1")


def test_duplicate_grade_is_rejected():
    with pytest.raises(CurriculumError, match="P1"):
        flatten_curriculum({"A": ["P1"], "B": ["P1"]})


def test_next_grade_crosses_stage_boundary():
    order = CurriculumOrder()
    assert order.next_grade("Primary 6") == "JHS 1"
    assert order.next_grade("KG 2") == "Primary 1"


def test_last_grade_has_no_successor():
    order = CurriculumOrder()
    assert order.next_grade("SHS 3") is None
    assert order.is_terminal("SHS 3")


def test_unknown_grade_is_treated_as_terminal():
    order = CurriculumOrder()
    assert order.index("Form 7") is None
    assert order.next_grade("Form 7") is None


def test_default_curriculum_positions_are_total():
    order = CurriculumOrder()
    grades = [g for stage in DEFAULT_CURRICULUM.values() for g in stage]
    assert [order.index(g) for g in grades] == list(range(len(grades)))
    assert len(order) == len(grades)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "score, next_grade, expected",
    [
        (70, "JHS 2", Promotion.PROMOTE),
        (40, "JHS 2", Promotion.REPEAT),
        (70, None, Promotion.GRADUATE),
        (40, None, Promotion.REPEAT),
        (50, "JHS 2", Promotion.PROMOTE),  # threshold is inclusive
    ],
)
def test_decision_table(score, next_grade, expected):
    assert classify_student(score, next_grade, 50) == expected


def test_classify_roster_partitions_every_student():
    scores = {"a": 90, "b": 10, "c": 50, "d": 0}
    promote, repeat, graduate = classify_roster(scores, "Primary 2", 50)
    assert promote == {"a", "c"}
    assert repeat == {"b", "d"}
    assert graduate == frozenset()


@pytest.mark.parametrize("next_grade", ["Primary 2", None])
def test_ungraded_student_fails_even_at_zero(next_grade):
    assert classify_student(None, next_grade, 0) == Promotion.REPEAT
    assert classify_student(0, next_grade, 0) != Promotion.REPEAT


def test_terminal_roster_never_promotes():
    promote, repeat, graduate = classify_roster({"a": 99, "b": 1}, None, 50)
    assert promote == frozenset()
    assert graduate == {"a"}
    assert repeat == {"b"}


# ---------------------------------------------------------------------------
# Threshold validation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value", [0, 50, 100, 62.5])
def test_valid_thresholds(value):
    assert validate_threshold(value) == float(value)


@pytest.mark.parametrize("value", [-1, 100.5, "50", None, True])
def test_invalid_thresholds(value):
    with pytest.raises(InvalidThresholdError):
        validate_threshold(value)
