# utils/promotion.py
from numbers import Real

from utils.dto import Promotion
from utils.errors import CurriculumError, InvalidThresholdError

DEFAULT_CURRICULUM = {
    "Kindergarten": ["KG 1", "KG 2"],
    "Primary": ["Primary 1", "Primary 2", "Primary 3", "Primary 4", "Primary 5", "Primary 6"],
    "JHS": ["JHS 1", "JHS 2", "JHS 3"],
    "SHS": ["SHS 1", "SHS 2", "SHS 3"],
}


def flatten_curriculum(stages):
    """Flatten an ordered stage -> grades mapping into one grade sequence."""
    if hasattr(stages, "items"):
        stages = stages.items()
    order = tuple(grade for _, grades in stages for grade in grades)
    if len(set(order)) != len(order):
        seen, dupes = set(), []
        for grade in order:
            if grade in seen:
                dupes.append(grade)
            seen.add(grade)
        raise CurriculumError(f"Grade levels appear more than once: {', '.join(dupes)}")
    return order


class CurriculumOrder:
    """Immutable ordering of every grade level across all stages."""

    def __init__(self, stages=None):
        self._order = flatten_curriculum(DEFAULT_CURRICULUM if stages is None else stages)
        self._positions = {grade: i for i, grade in enumerate(self._order)}

    def __iter__(self):
        return iter(self._order)

    def __len__(self):
        return len(self._order)

    def __contains__(self, grade_level):
        return grade_level in self._positions

    def index(self, grade_level):
        return self._positions.get(grade_level)

    def next_grade(self, grade_level):
        """Successor grade, or None for the last grade and for unknown grades."""
        position = self.index(grade_level)
        if position is None or position + 1 >= len(self._order):
            return None
        return self._order[position + 1]

    def is_terminal(self, grade_level):
        return self.next_grade(grade_level) is None


def validate_threshold(threshold):
    if isinstance(threshold, bool) or not isinstance(threshold, Real):
        raise InvalidThresholdError(f"Threshold must be a number, got {threshold!r}")
    if not 0 <= threshold <= 100:
        raise InvalidThresholdError(f"Threshold must be between 0 and 100, got {threshold}")
    return float(threshold)


def classify_student(score, next_grade, threshold):
    # No grades is a fail at any threshold, including 0.
    passed = score is not None and score >= threshold
    if next_grade is None:
        return Promotion.GRADUATE if passed else Promotion.REPEAT
    return Promotion.PROMOTE if passed else Promotion.REPEAT


def classify_roster(scores, next_grade, threshold):
    """Split {student_id: score} into (promote, repeat, graduate) frozensets."""
    buckets = {outcome: set() for outcome in Promotion}
    for student_id, score in scores.items():
        buckets[classify_student(score, next_grade, threshold)].add(student_id)
    return (
        frozenset(buckets[Promotion.PROMOTE]),
        frozenset(buckets[Promotion.REPEAT]),
        frozenset(buckets[Promotion.GRADUATE]),
    )
