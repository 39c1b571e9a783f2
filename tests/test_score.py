from __future__ import annotations

import pytest

from utils.dto import GradeEntry
from utils.score import calculate_student_score, class_scores, index_grades, subject_total


def entry(student_id, total, subject="Maths", class_id="c1"):
    # all marks on the final exam keeps totals exact
    return GradeEntry(class_id=class_id, student_id=student_id, subject=subject, final=total)


def test_subject_total_adds_all_four_components():
    g = GradeEntry("c1", "s1", "Maths", homework=8, quiz=12, midterm=20, final=40)
    assert subject_total(g) == 80


def test_single_subject_score_is_its_total():
    assert calculate_student_score([entry("s1", 70)], "c1", "s1") == 70


def test_score_is_mean_of_subject_totals():
    grades = [entry("s1", 70, "Maths"), entry("s1", 20, "Science")]
    assert calculate_student_score(grades, "c1", "s1") == pytest.approx(45)


def test_student_without_grades_scores_zero():
    grades = [entry("s2", 90)]
    assert calculate_student_score(grades, "c1", "s1") == 0


def test_grades_from_other_classes_are_ignored():
    grades = [entry("s1", 90, class_id="c1"), entry("s1", 10, class_id="old")]
    assert calculate_student_score(grades, "c1", "s1") == 90


def test_class_scores_uses_index():
    grades = [entry("s1", 80), entry("s1", 60, "English"), entry("s2", 30)]
    scores = class_scores(index_grades(grades), "c1", ["s1", "s2", "s3"])
    assert scores == {"s1": 70, "s2": 30, "s3": None}
