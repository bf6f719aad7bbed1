"""Enumerations shared by models, schemas and services."""
from enum import Enum


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class DrillCategory(str, Enum):
    HITTING = "hitting"
    THROWING = "throwing"
    FIELDING = "fielding"
    OTHER = "other"


class DrillMediaKind(str, Enum):
    INTERNAL_VIDEO = "internal_video"
    EXTERNAL_LINK = "external_link"


class AssignmentSource(str, Enum):
    """Where a resolved assignment came from."""
    TEMPLATE = "template"
    OVERRIDE = "override"


class AssignmentStatus(str, Enum):
    """Derived tracking state of one resolved assignment for one enrollment."""
    NOT_STARTED = "not_started"
    DONE = "done"
    SUBMITTED_UNREVIEWED = "submitted_unreviewed"
    SUBMITTED_REVIEWED = "submitted_reviewed"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values (not member names) in SQLAlchemy Enum columns."""
    return [member.value for member in enum_cls]
