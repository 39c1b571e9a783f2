from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import date, datetime
from sqlalchemy.orm import relationship, backref

from utils.dto import DEFAULT_SECTION
from utils.extensions import db


class Admin(db.Model, UserMixin):
    __tablename__ = 'admin'

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.String(50), unique=True, nullable=False)
    username = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    school_id = db.Column(db.Integer, nullable=False, default=1)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    # UserMixin uses `id` by default; sessions are keyed on admin_id instead.
    def get_id(self):
        return f"admin:{self.admin_id}"

    @property
    def role(self):
        return 'admin'

    @property
    def is_admin(self):
        return True


class User(db.Model):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(20), unique=True, nullable=False)  # e.g. STD001, TCH001
    first_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(10), nullable=False)

    @property
    def full_name(self):
        names = [self.first_name]
        if self.middle_name:
            names.append(self.middle_name)
        names.append(self.last_name)
        return ' '.join(names)


class SchoolClass(db.Model):
    __tablename__ = 'school_class'

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.Integer, nullable=False, index=True)
    grade_level = db.Column(db.String(50), nullable=False)  # e.g. 'JHS 1'
    section = db.Column(db.String(10), nullable=False, default=DEFAULT_SECTION)
    capacity = db.Column(db.Integer, nullable=False, default=30)
    homeroom_teacher_id = db.Column(db.Integer, db.ForeignKey('teacher_profile.id'), nullable=True)
    subjects = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    homeroom_teacher = relationship('TeacherProfile', backref='homeroom_classes')
    students = relationship('StudentProfile', back_populates='school_class')

    __table_args__ = (
        db.CheckConstraint('capacity >= 0', name='ck_school_class_capacity'),
    )

    @property
    def name(self):
        return f"{self.grade_level} ({self.section or DEFAULT_SECTION})"

    def __repr__(self):
        return f"<SchoolClass {self.name}>"


class StudentProfile(db.Model):
    __tablename__ = 'student_profile'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(20), db.ForeignKey('user.user_id'), unique=True)
    school_id = db.Column(db.Integer, nullable=False, index=True)
    class_id = db.Column(db.Integer, db.ForeignKey('school_class.id'), nullable=True, index=True)

    user = relationship('User', backref=backref('student_profile', uselist=False), foreign_keys=[user_id])
    school_class = relationship('SchoolClass', back_populates='students')

    @property
    def full_name(self):
        return self.user.full_name if self.user else ''


class TeacherProfile(db.Model):
    __tablename__ = 'teacher_profile'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(20), db.ForeignKey('user.user_id'), unique=True)
    school_id = db.Column(db.Integer, nullable=False, index=True)
    employee_id = db.Column(db.String(20), unique=True, nullable=False)
    date_joined = db.Column(db.Date, default=date.today)

    user = relationship('User', backref=backref('teacher_profile', uselist=False), foreign_keys=[user_id])

    @property
    def full_name(self):
        return self.user.full_name if self.user else self.employee_id


class GradeEntry(db.Model):
    """One subject's grade components for a student in a class."""
    __tablename__ = 'grade_entry'

    id = db.Column(db.Integer, primary_key=True)
    class_id = db.Column(db.Integer, db.ForeignKey('school_class.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student_profile.id'), nullable=False, index=True)
    subject = db.Column(db.String(100), nullable=False)
    homework = db.Column(db.Float, nullable=False, default=0.0)  # out of 10
    quiz = db.Column(db.Float, nullable=False, default=0.0)      # out of 15
    midterm = db.Column(db.Float, nullable=False, default=0.0)   # out of 25
    final = db.Column(db.Float, nullable=False, default=0.0)     # out of 50

    school_class = relationship('SchoolClass', backref=backref('grade_entries', cascade='all, delete-orphan'))
    student = relationship('StudentProfile', backref='grade_entries')

    __table_args__ = (
        db.UniqueConstraint('class_id', 'student_id', 'subject', name='uq_grade_entry_subject'),
    )
