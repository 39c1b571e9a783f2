class RolloverError(Exception):
    """Base class for rollover engine errors."""

    code = "rollover_error"


class InvalidThresholdError(RolloverError):
    """Raised when a promotion threshold is not a number in [0, 100]."""

    code = "invalid_threshold"


class CurriculumError(RolloverError):
    """Raised when the configured curriculum cannot be ordered."""

    code = "invalid_curriculum"


class RolloverStateError(RolloverError):
    """Raised when an engine operation is not allowed in the current state."""

    code = "invalid_state"


class PreviewComputationError(RolloverError):
    """Raised when grades, classes or rosters cannot be fetched for a preview."""

    code = "preview_failed"


class TargetProvisioningError(RolloverError):
    """Raised when the destination class for a grade cannot be created."""

    code = "target_provisioning"

    def __init__(self, grade_level, message=None):
        self.grade_level = grade_level
        super().__init__(message or f"Could not provision a target class for {grade_level}")


class CommitWriteError(RolloverError):
    """Raised when a roster write fails during commit."""

    code = "roster_write"

    def __init__(self, class_id, message=None):
        self.class_id = class_id
        super().__init__(message or f"Roster update failed for class {class_id}")


class BackendError(RolloverError):
    """Raised by a roster gateway when the backing store fails a call."""

    code = "backend_error"


class ClassNotFoundError(BackendError):
    """Raised when a class id does not exist for the school."""

    code = "class_not_found"


class CapacityExceededError(BackendError):
    """Raised when a roster replace would put a class over capacity."""

    code = "capacity_exceeded"

    def __init__(self, class_id, available):
        self.class_id = class_id
        self.available = available
        super().__init__(
            f"Cannot add students to class {class_id}. Class capacity exceeded. "
            f"Available spots: {available}"
        )
