# utils/provisioning.py
import logging

from utils.dto import DEFAULT_SECTION, NewClassData
from utils.errors import TargetProvisioningError

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 30


def first_available_teacher(teachers):
    """Homeroom teacher for a provisioned class: the first teacher listed."""
    return teachers[0].teacher_id if teachers else None


class TargetClassProvisioner:
    """
    Finds or creates the destination class for a successor grade.

    Resolutions are cached for the lifetime of the provisioner, so one
    instance must be used per preview or commit run. When `classes` is None
    the school's classes are fetched from the gateway on first use.
    """

    def __init__(self, gateway, school_id, classes=None, default_section=DEFAULT_SECTION,
                 default_capacity=DEFAULT_CAPACITY, homeroom_policy=first_available_teacher):
        self.gateway = gateway
        self.school_id = school_id
        self.classes = None if classes is None else list(classes)
        self.default_section = default_section
        self.default_capacity = default_capacity
        self.homeroom_policy = homeroom_policy
        self._resolved = {}
        self._failed = set()
        self._teachers = None

    def _known_classes(self):
        if self.classes is None:
            self.classes = list(self.gateway.fetch_classes(self.school_id))
        return self.classes

    def find_existing(self, grade_level):
        candidates = [c for c in self._known_classes() if c.grade_level == grade_level]
        if not candidates:
            return None
        for cls in candidates:
            if (cls.section or self.default_section) == self.default_section:
                return cls
        return min(candidates, key=lambda c: (c.section or "", str(c.class_id)))

    def known_class(self, class_id):
        for cls in self._known_classes():
            if cls.class_id == class_id:
                return cls
        return None

    def lookup(self, grade_level):
        """Cached read-only lookup; never creates a class."""
        if grade_level in self._resolved:
            return self._resolved[grade_level]
        existing = self.find_existing(grade_level)
        if existing is None:
            return None
        self._resolved[grade_level] = existing.class_id
        return existing.class_id

    def resolve(self, grade_level):
        """Return the target class id for a grade, creating the class if needed."""
        if grade_level is None or grade_level in self._failed:
            raise TargetProvisioningError(grade_level)
        try:
            class_id = self.lookup(grade_level)
            if class_id is None:
                class_id = self._create(grade_level)
        except Exception as exc:
            self._failed.add(grade_level)
            logger.exception("Failed to provision target class for %s", grade_level)
            raise TargetProvisioningError(grade_level) from exc
        return class_id

    def _create(self, grade_level):
        if self._teachers is None:
            self._teachers = list(self.gateway.fetch_teachers(self.school_id))
        data = NewClassData(
            grade_level=grade_level,
            section=self.default_section,
            capacity=self.default_capacity,
            homeroom_teacher_id=self.homeroom_policy(self._teachers),
            subjects=(),
        )
        created = self.gateway.create_class(self.school_id, data)
        logger.info("Created class %s (%s) for promotions into %s",
                    created.class_id, created.name, grade_level)
        self.classes.append(created)
        self._resolved[grade_level] = created.class_id
        return created.class_id
