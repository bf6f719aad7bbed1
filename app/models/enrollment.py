"""Player enrollments and their per-player overrides."""
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.database import Base
from app.models.enums import EnrollmentStatus, enum_values
from app.models.program import JSONList


class ProgramEnrollment(Base):
    """Binds one player to one template; ``start_at`` anchors the rolling cycle."""

    __tablename__ = "program_enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("program_templates.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    team_id = Column(String(64), nullable=False, index=True)
    player_user_id = Column(String(64), nullable=False)
    coach_user_id = Column(String(64), nullable=False, index=True)
    start_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    status = Column(
        SQLEnum(
            EnrollmentStatus,
            name="enrollment_status",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    template = relationship("ProgramTemplate", lazy="joined")

    __table_args__ = (
        Index("ix_program_enrollments_player_status", "player_user_id", "status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<ProgramEnrollment(id={self.id}, template_id={self.template_id}, "
            f"player={self.player_user_id}, status={self.status})>"
        )


class WeekOverride(Base):
    """Legacy per-player replacement of a template week's goals/assignments."""

    __tablename__ = "program_week_overrides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(
        Integer, ForeignKey("program_enrollments.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    goals = Column(JSONList, nullable=False, default=list)
    assignments = Column(JSONList, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("enrollment_id", "week_index", name="uq_week_override"),
    )


class DayOverride(Base):
    """Per-player replacement of one template day.

    ``assignments`` holds inline assignment specs (drill_id, sets, reps,
    minutes, requires_upload, upload_prompt, notes). They are owned values,
    not references to template assignments.
    """

    __tablename__ = "program_day_overrides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(
        Integer, ForeignKey("program_enrollments.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    day_index = Column(Integer, nullable=False)
    focus_id = Column(
        Integer, ForeignKey("program_focuses.id", ondelete="SET NULL"), nullable=True
    )
    day_note = Column(Text, nullable=True)
    assignments = Column(JSONList, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("enrollment_id", "week_index", "day_index", name="uq_day_override"),
    )
