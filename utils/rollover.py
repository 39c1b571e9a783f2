# utils/rollover.py
"""
End-of-year rollover: preview who is promoted, repeats or graduates, then
commit the resulting roster changes.

Preview is read-only; target classes that do not exist yet are only
created during commit. Commit stops at the first failing class and does
not undo classes already written.
"""
import logging

from utils.dto import CommitResult, RolloverPreviewItem, RolloverState
from utils.errors import (
    CapacityExceededError,
    CommitWriteError,
    PreviewComputationError,
    RolloverStateError,
    TargetProvisioningError,
)
from utils.promotion import CurriculumOrder, classify_roster, validate_threshold
from utils.provisioning import (
    DEFAULT_CAPACITY,
    DEFAULT_SECTION,
    TargetClassProvisioner,
    first_available_teacher,
)
from utils.roster import merge_rosters
from utils.score import class_scores, index_grades

logger = logging.getLogger(__name__)


def _unique(ids):
    seen = set()
    for i in ids:
        if i not in seen:
            seen.add(i)
            yield i


def remaining_items(items, result):
    """Items a failed commit did not apply, in their original order."""
    done = set(result.succeeded)
    return [item for item in items if item.class_id not in done]


class RolloverEngine:

    def __init__(self, gateway, school_id, curriculum=None, default_section=DEFAULT_SECTION,
                 default_capacity=DEFAULT_CAPACITY, homeroom_policy=first_available_teacher):
        self.gateway = gateway
        self.school_id = school_id
        if not isinstance(curriculum, CurriculumOrder):
            curriculum = CurriculumOrder(curriculum)
        self.curriculum = curriculum
        self.default_section = default_section
        self.default_capacity = default_capacity
        self.homeroom_policy = homeroom_policy

        self.state = RolloverState.IDLE
        self.classes = []
        self.preview_items = []
        self.last_error = None

    @classmethod
    def from_config(cls, gateway, school_id, config):
        return cls(
            gateway,
            school_id,
            curriculum=config.get('CURRICULUM_STAGES'),
            default_section=config.get('ROLLOVER_DEFAULT_SECTION', DEFAULT_SECTION),
            default_capacity=config.get('ROLLOVER_DEFAULT_CAPACITY', DEFAULT_CAPACITY),
        )

    def _provisioner(self, classes=None):
        return TargetClassProvisioner(
            self.gateway,
            self.school_id,
            classes,
            default_section=self.default_section,
            default_capacity=self.default_capacity,
            homeroom_policy=self.homeroom_policy,
        )

    def load_classes(self):
        self.classes = list(self.gateway.fetch_classes(self.school_id))
        return self.classes

    def reset(self):
        if self.state == RolloverState.COMMITTING:
            raise RolloverStateError("Cannot reset while a commit is running")
        self.preview_items = []
        self.last_error = None
        self.state = RolloverState.IDLE

    # ------------------------------------------------------------------ preview

    def compute_preview(self, class_ids, threshold, highest_first=False):
        if self.state in (RolloverState.COMPUTING_PREVIEW, RolloverState.COMMITTING):
            raise RolloverStateError(f"Cannot compute a preview while {self.state.value}")
        threshold = validate_threshold(threshold)

        self.state = RolloverState.COMPUTING_PREVIEW
        self.preview_items = []
        try:
            grades = index_grades(self.gateway.fetch_all_grades(self.school_id))
            classes = {c.class_id: c for c in self.load_classes()}
            provisioner = self._provisioner(self.classes)
            class_ids = list(_unique(class_ids))
            if highest_first:
                class_ids = self.highest_grade_first(class_ids, classes)
            items = [
                self._preview_class(classes, class_id, grades, threshold, provisioner)
                for class_id in class_ids
            ]
        except Exception as exc:
            self.state = RolloverState.IDLE
            logger.exception("Rollover preview failed for school %s", self.school_id)
            raise PreviewComputationError("Could not compute the rollover preview") from exc

        self.preview_items = items
        self.state = RolloverState.PREVIEW_READY
        logger.info("Rollover preview for school %s: %d classes at threshold %s",
                    self.school_id, len(items), threshold)
        return list(items)

    def highest_grade_first(self, class_ids, classes):
        """
        Order class ids from the last curriculum grade down, keeping the given
        order between classes of the same grade. Committing in this order
        empties a class before students from the grade below move into it.
        Grades outside the curriculum count as final; unknown ids go last.
        """
        def rank(class_id):
            cls = classes.get(class_id)
            if cls is None:
                return -1
            position = self.curriculum.index(cls.grade_level)
            return len(self.curriculum) if position is None else position

        return sorted(class_ids, key=rank, reverse=True)

    def _preview_class(self, classes, class_id, grades, threshold, provisioner):
        if class_id not in classes:
            raise KeyError(f"Class {class_id} does not belong to school {self.school_id}")
        cls = classes[class_id]
        if cls.grade_level not in self.curriculum:
            logger.warning("Grade level %r of class %s is not in the curriculum; "
                           "treating it as a final grade", cls.grade_level, class_id)

        roster = [s.student_id for s in self.gateway.fetch_class_roster(class_id)]
        next_grade = self.curriculum.next_grade(cls.grade_level)
        promote, repeat, graduate = classify_roster(
            class_scores(grades, class_id, roster), next_grade, threshold
        )
        return RolloverPreviewItem(
            class_id=class_id,
            class_name=cls.name,
            next_grade=next_grade,
            promote_ids=promote,
            repeat_ids=repeat,
            graduate_ids=graduate,
            target_class_id=provisioner.lookup(next_grade) if promote else None,
        )

    # ------------------------------------------------------------------ commit

    def commit(self, preview_items=None):
        if self.state in (RolloverState.COMPUTING_PREVIEW, RolloverState.COMMITTING):
            raise RolloverStateError(f"Cannot commit while {self.state.value}")
        items = list(self.preview_items if preview_items is None else preview_items)

        self.state = RolloverState.COMMITTING
        self.last_error = None
        result = CommitResult()
        provisioner = self._provisioner()

        for item in items:
            try:
                target_id = provisioner.resolve(item.next_grade) if item.promote_ids else None
            except TargetProvisioningError as exc:
                self._record_failure(result, item, exc)
                break

            try:
                self._apply(item, target_id, provisioner)
            except Exception as exc:
                logger.exception("Roster update failed for class %s", item.class_id)
                error = CommitWriteError(item.class_id)
                error.__cause__ = exc
                self._record_failure(result, item, error)
                break

            result.succeeded.append(item.class_id)

        if result.ok:
            self.state = RolloverState.DONE
            self.preview_items = []
            logger.info("Rollover committed for school %s: %d classes",
                        self.school_id, len(result.succeeded))
            try:
                self.load_classes()
            except Exception:
                logger.exception("Could not reload classes after rollover commit")
        else:
            self.state = RolloverState.FAILED
        return result

    def _apply(self, item, target_id, provisioner):
        # Rosters are read right before the write; nothing guards against a
        # concurrent edit in between.
        source = [s.student_id for s in self.gateway.fetch_class_roster(item.class_id)]
        target = None
        if target_id is not None:
            target = [s.student_id for s in self.gateway.fetch_class_roster(target_id)]

        merged = merge_rosters(source, target, item.promote_ids, item.graduate_ids)
        if merged.target is not None:
            # The target is checked before the source is touched, so a full
            # target leaves both classes as they were.
            record = provisioner.known_class(target_id)
            if record is not None and len(merged.target) > record.capacity:
                raise CapacityExceededError(target_id, max(record.capacity - len(target), 0))
        self.gateway.replace_class_roster(self.school_id, item.class_id, merged.source)
        if merged.target is not None:
            self.gateway.replace_class_roster(self.school_id, target_id, merged.target)

    def _record_failure(self, result, item, error):
        result.failed_at = item.class_id
        result.error = error.code
        self.last_error = error
        logger.warning("Rollover commit for school %s stopped at class %s after %d classes (%s)",
                       self.school_id, item.class_id, len(result.succeeded), error.code)
