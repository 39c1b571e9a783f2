# utils/score.py
from collections import defaultdict


def subject_total(entry):
    return entry.homework + entry.quiz + entry.midterm + entry.final


def index_grades(grades):
    """Group grade entries by (class_id, student_id)."""
    index = defaultdict(list)
    for entry in grades:
        index[(entry.class_id, entry.student_id)].append(entry)
    return index


def _mean_total(entries):
    if not entries:
        return None
    return sum(subject_total(e) for e in entries) / len(entries)


def calculate_student_score(grades, class_id, student_id):
    """Average of the student's subject totals in one class, 0 if ungraded."""
    entries = [g for g in grades if g.class_id == class_id and g.student_id == student_id]
    score = _mean_total(entries)
    return 0 if score is None else score


def class_scores(index, class_id, student_ids):
    """{student_id: mean total}; None marks a student with no grades at all."""
    return {sid: _mean_total(index.get((class_id, sid), ())) for sid in student_ids}
