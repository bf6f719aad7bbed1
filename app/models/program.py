"""Program template models: template, legacy weeks, days and day assignments."""
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.db.database import Base

JSONList = JSON().with_variant(JSONB(), "postgresql")


class ProgramTemplate(Base):
    """Coach-authored, team-owned program shared by every enrolled player."""

    __tablename__ = "program_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(String(64), nullable=False, index=True)
    coach_user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    weeks_count = Column(Integer, nullable=False)
    cycle_days = Column(Integer, nullable=False, default=7)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    weeks = relationship(
        "TemplateWeek",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    days = relationship(
        "TemplateDay",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    assignments = relationship(
        "TemplateDayAssignment",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("weeks_count > 0", name="ck_program_templates_weeks_positive"),
        CheckConstraint("cycle_days > 0", name="ck_program_templates_cycle_positive"),
    )

    @property
    def total_days(self) -> int:
        return self.weeks_count * self.cycle_days

    def contains(self, week_index: int, day_index: int | None = None) -> bool:
        """True when the coordinates fall inside this template."""
        if not 1 <= week_index <= self.weeks_count:
            return False
        if day_index is not None and not 1 <= day_index <= self.cycle_days:
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"<ProgramTemplate(id={self.id}, title={self.title!r}, "
            f"weeks={self.weeks_count}, cycle_days={self.cycle_days})>"
        )


class TemplateWeek(Base):
    """Legacy week-granularity content (free-text goals and assignments)."""

    __tablename__ = "program_template_weeks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("program_templates.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    goals = Column(JSONList, nullable=False, default=list)
    assignments = Column(JSONList, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    template = relationship("ProgramTemplate", back_populates="weeks")

    __table_args__ = (
        UniqueConstraint("template_id", "week_index", name="uq_template_week"),
    )


class TemplateDay(Base):
    """Focus and note for one (week, day) of a template."""

    __tablename__ = "program_template_days"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("program_templates.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    day_index = Column(Integer, nullable=False)
    focus_id = Column(
        Integer, ForeignKey("program_focuses.id", ondelete="SET NULL"), nullable=True
    )
    note = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    template = relationship("ProgramTemplate", back_populates="days")

    __table_args__ = (
        UniqueConstraint("template_id", "week_index", "day_index", name="uq_template_day"),
    )


class TemplateDayAssignment(Base):
    """One drill prescription on a template day."""

    __tablename__ = "program_template_day_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer, ForeignKey("program_templates.id", ondelete="CASCADE"), nullable=False
    )
    week_index = Column(Integer, nullable=False)
    day_index = Column(Integer, nullable=False)
    drill_id = Column(
        Integer, ForeignKey("program_drills.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    sets = Column(Integer, nullable=True)
    reps = Column(Integer, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    requires_upload = Column(Boolean, nullable=False, default=False)
    upload_prompt = Column(Text, nullable=True)
    notes_to_player = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    template = relationship("ProgramTemplate", back_populates="assignments")

    __table_args__ = (
        Index("ix_template_day_assignments_day", "template_id", "week_index", "day_index"),
    )
