"""Completion marks, video submissions and coach reviews."""
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.database import Base


class AssignmentCompletion(Base):
    """At most one row per (enrollment, assignment key); re-marking updates the timestamp."""

    __tablename__ = "program_assignment_completions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(
        Integer, ForeignKey("program_enrollments.id", ondelete="CASCADE"), nullable=False
    )
    assignment_id = Column(String(64), nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("enrollment_id", "assignment_id", name="uq_assignment_completion"),
    )


class Submission(Base):
    """A player's video evidence; many may exist for one assignment."""

    __tablename__ = "program_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(
        Integer, ForeignKey("program_enrollments.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    day_index = Column(Integer, nullable=True)
    assignment_id = Column(String(64), nullable=True)
    video_id = Column(String(64), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    review = relationship(
        "Review",
        back_populates="submission",
        uselist=False,
        lazy="selectin",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_program_submissions_enrollment_week", "enrollment_id", "week_index"),
        Index("ix_program_submissions_assignment", "enrollment_id", "assignment_id"),
    )

    @property
    def is_reviewed(self) -> bool:
        return self.review is not None


class Review(Base):
    """A coach's terminal evaluation of one submission (append-once)."""

    __tablename__ = "program_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submission_id = Column(
        Integer, ForeignKey("program_submissions.id", ondelete="CASCADE"), nullable=False
    )
    reviewer_user_id = Column(String(64), nullable=True)
    review_note = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    submission = relationship("Submission", back_populates="review")

    __table_args__ = (
        UniqueConstraint("submission_id", name="uq_review_submission"),
    )
