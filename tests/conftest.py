"""Shared fixtures: a fresh app and database per test, plus seed helpers."""

from __future__ import annotations

import pytest

from app import create_app
from config import TestConfig
from models import GradeEntry, SchoolClass, StudentProfile, TeacherProfile, User
from utils.extensions import db


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post(
        "/admin/login",
        data={"username": "SuperAdmin", "user_id": "ADM001", "password": "Password123"},
    )
    assert resp.status_code == 302
    return client


# ---------------------------------------------------------------------------
# Seed helpers (return plain ids so tests never hold detached rows)
# ---------------------------------------------------------------------------

class Seeder:
    def __init__(self, app):
        self.app = app
        self._users = 0

    def _user(self, role, first_name):
        self._users += 1
        user = User(
            user_id=f"{role[:3].upper()}{self._users:03d}",
            first_name=first_name,
            last_name="Test",
            role=role,
        )
        db.session.add(user)
        return user

    def teacher(self, name="Ama", school_id=1):
        with self.app.app_context():
            user = self._user("teacher", name)
            teacher = TeacherProfile(user_id=user.user_id, school_id=school_id,
                                     employee_id=f"EMP{self._users:03d}")
            db.session.add(teacher)
            db.session.commit()
            return teacher.id

    def school_class(self, grade_level, section="A", capacity=30, school_id=1):
        with self.app.app_context():
            cls = SchoolClass(grade_level=grade_level, section=section,
                              capacity=capacity, school_id=school_id, subjects=["Maths"])
            db.session.add(cls)
            db.session.commit()
            return cls.id

    def student(self, class_id, name="Kofi", school_id=1):
        with self.app.app_context():
            user = self._user("student", name)
            student = StudentProfile(user_id=user.user_id, school_id=school_id, class_id=class_id)
            db.session.add(student)
            db.session.commit()
            return student.id

    def grade(self, class_id, student_id, subject, total):
        """Store a subject grade whose four components add up to `total`."""
        with self.app.app_context():
            db.session.add(GradeEntry(
                class_id=class_id,
                student_id=student_id,
                subject=subject,
                homework=total * 0.1,
                quiz=total * 0.15,
                midterm=total * 0.25,
                final=total * 0.5,
            ))
            db.session.commit()


@pytest.fixture
def seed(app):
    return Seeder(app)
