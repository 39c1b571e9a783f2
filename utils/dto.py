"""Value types passed between the rollover engine and its gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple

DEFAULT_SECTION = "A"


class Promotion(str, Enum):
    PROMOTE = "promote"
    REPEAT = "repeat"
    GRADUATE = "graduate"


class RolloverState(str, Enum):
    IDLE = "idle"
    COMPUTING_PREVIEW = "computing_preview"
    PREVIEW_READY = "preview_ready"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Student:
    student_id: Any
    name: str = ""


@dataclass(frozen=True)
class Teacher:
    teacher_id: Any
    name: str = ""


@dataclass(frozen=True)
class GradeEntry:
    class_id: Any
    student_id: Any
    subject: str
    homework: float = 0.0
    quiz: float = 0.0
    midterm: float = 0.0
    final: float = 0.0


@dataclass(frozen=True)
class ClassRecord:
    class_id: Any
    grade_level: str
    section: str = DEFAULT_SECTION
    capacity: int = 30
    homeroom_teacher_id: Any = None
    subjects: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.grade_level} ({self.section or DEFAULT_SECTION})"


@dataclass(frozen=True)
class NewClassData:
    grade_level: str
    section: str
    capacity: int
    homeroom_teacher_id: Any = None
    subjects: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RolloverPreviewItem:
    class_id: Any
    class_name: str
    next_grade: Optional[str]
    promote_ids: FrozenSet[Any] = frozenset()
    repeat_ids: FrozenSet[Any] = frozenset()
    graduate_ids: FrozenSet[Any] = frozenset()
    target_class_id: Any = None

    @property
    def roster_ids(self) -> FrozenSet[Any]:
        return self.promote_ids | self.repeat_ids | self.graduate_ids


@dataclass
class CommitResult:
    succeeded: list = field(default_factory=list)
    failed_at: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed_at is None
