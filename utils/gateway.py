# utils/gateway.py
"""
Collaborator operations the rollover engine reads from and writes to.

The roster write is a plain read-then-replace with no version check: another
admin editing the same roster between the engine's fetch and its replace
will have their change overwritten. A conditional write belongs here, in
`replace_class_roster`, not in the engine.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from models import GradeEntry as GradeRow, SchoolClass, StudentProfile, TeacherProfile
from utils.dto import ClassRecord, GradeEntry, Student, Teacher
from utils.errors import BackendError, CapacityExceededError, ClassNotFoundError
from utils.extensions import db

logger = logging.getLogger(__name__)


class RosterGateway:
    """Interface to the class, grade and roster store."""

    def fetch_all_grades(self, school_id):
        raise NotImplementedError

    def fetch_classes(self, school_id):
        raise NotImplementedError

    def fetch_class_roster(self, class_id):
        raise NotImplementedError

    def fetch_teachers(self, school_id):
        raise NotImplementedError

    def create_class(self, school_id, data):
        raise NotImplementedError

    def replace_class_roster(self, school_id, class_id, student_ids):
        """Make `student_ids` the complete roster of the class."""
        raise NotImplementedError


def class_record(cls):
    return ClassRecord(
        class_id=cls.id,
        grade_level=cls.grade_level,
        section=cls.section,
        capacity=cls.capacity,
        homeroom_teacher_id=cls.homeroom_teacher_id,
        subjects=tuple(cls.subjects or ()),
    )


class SqlAlchemyRosterGateway(RosterGateway):
    """RosterGateway backed by the app's Flask-SQLAlchemy models."""

    def __init__(self, session=None):
        self.session = session or db.session

    def fetch_all_grades(self, school_id):
        rows = (
            self.session.query(GradeRow)
            .join(SchoolClass, GradeRow.class_id == SchoolClass.id)
            .filter(SchoolClass.school_id == school_id)
            .order_by(GradeRow.id)
            .all()
        )
        return [
            GradeEntry(
                class_id=r.class_id,
                student_id=r.student_id,
                subject=r.subject,
                homework=r.homework or 0.0,
                quiz=r.quiz or 0.0,
                midterm=r.midterm or 0.0,
                final=r.final or 0.0,
            )
            for r in rows
        ]

    def fetch_classes(self, school_id):
        classes = (
            self.session.query(SchoolClass)
            .filter_by(school_id=school_id)
            .order_by(SchoolClass.id)
            .all()
        )
        return [class_record(c) for c in classes]

    def fetch_class_roster(self, class_id):
        self._get_class(class_id)
        students = (
            self.session.query(StudentProfile)
            .filter_by(class_id=class_id)
            .order_by(StudentProfile.id)
            .all()
        )
        return [Student(student_id=s.id, name=s.full_name) for s in students]

    def fetch_teachers(self, school_id):
        teachers = (
            self.session.query(TeacherProfile)
            .filter_by(school_id=school_id)
            .order_by(TeacherProfile.id)
            .all()
        )
        return [Teacher(teacher_id=t.id, name=t.full_name) for t in teachers]

    def create_class(self, school_id, data):
        cls = SchoolClass(
            school_id=school_id,
            grade_level=data.grade_level,
            section=data.section,
            capacity=data.capacity,
            homeroom_teacher_id=data.homeroom_teacher_id,
            subjects=list(data.subjects),
        )
        try:
            self.session.add(cls)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise BackendError(f"Could not create class {data.grade_level}") from exc
        return class_record(cls)

    def replace_class_roster(self, school_id, class_id, student_ids):
        cls = self._get_class(class_id, school_id)
        wanted = set(student_ids)
        current = {
            s.id for s in self.session.query(StudentProfile.id)
            .filter_by(school_id=school_id, class_id=class_id)
        }
        to_add = wanted - current
        to_remove = current - wanted

        if to_add:
            available = cls.capacity - len(current) + len(to_remove)
            if len(to_add) > available:
                raise CapacityExceededError(class_id, available)

        try:
            if to_add:
                (self.session.query(StudentProfile)
                 .filter(StudentProfile.id.in_(sorted(to_add)), StudentProfile.school_id == school_id)
                 .update({StudentProfile.class_id: class_id}, synchronize_session=False))
            if to_remove:
                (self.session.query(StudentProfile)
                 .filter(StudentProfile.id.in_(sorted(to_remove)), StudentProfile.school_id == school_id)
                 .update({StudentProfile.class_id: None}, synchronize_session=False))
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise BackendError(f"Could not update roster of class {class_id}") from exc

        logger.debug("Class %s roster: +%d -%d", class_id, len(to_add), len(to_remove))
        self.session.expire_all()
        return class_record(cls)

    def _get_class(self, class_id, school_id=None):
        cls = self.session.get(SchoolClass, class_id)
        if cls is None or (school_id is not None and cls.school_id != school_id):
            raise ClassNotFoundError(f"Class {class_id} not found")
        return cls
