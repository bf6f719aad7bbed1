"""Database models.

Importing this package registers every table on ``Base.metadata``.
"""
from app.db.database import Base
from app.models.enums import (
    AssignmentSource,
    AssignmentStatus,
    DrillCategory,
    DrillMediaKind,
    EnrollmentStatus,
)
from app.models.program import (
    ProgramTemplate,
    TemplateDay,
    TemplateDayAssignment,
    TemplateWeek,
)
from app.models.library import Drill, DrillMedia, Focus
from app.models.enrollment import DayOverride, ProgramEnrollment, WeekOverride
from app.models.tracking import AssignmentCompletion, Review, Submission

__all__ = [
    "Base",
    "AssignmentSource",
    "AssignmentStatus",
    "DrillCategory",
    "DrillMediaKind",
    "EnrollmentStatus",
    "ProgramTemplate",
    "TemplateDay",
    "TemplateDayAssignment",
    "TemplateWeek",
    "Drill",
    "DrillMedia",
    "Focus",
    "DayOverride",
    "ProgramEnrollment",
    "WeekOverride",
    "AssignmentCompletion",
    "Review",
    "Submission",
]
