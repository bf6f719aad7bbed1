"""Repositories package."""
from app.repositories.base import Repository
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.library_repository import DrillRepository, FocusRepository
from app.repositories.template_repository import TemplateRepository
from app.repositories.tracking_repository import TrackingRepository

__all__ = [
    "Repository",
    "DrillRepository",
    "EnrollmentRepository",
    "FocusRepository",
    "TemplateRepository",
    "TrackingRepository",
]
