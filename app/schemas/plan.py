"""Resolved plan shapes returned by the day plan resolver and the today view."""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import AssignmentSource, AssignmentStatus, DrillCategory, DrillMediaKind


class FocusSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    cues: list[str] = Field(default_factory=list)


class DrillMediaSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: DrillMediaKind
    title: Optional[str] = None
    target: Optional[str] = None
    sort_order: int = 0


class DrillSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: DrillCategory
    goal: Optional[str] = None
    cues: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)
    media: list[DrillMediaSummary] = Field(default_factory=list)


class ResolvedAssignment(BaseModel):
    """One effective assignment for an (enrollment, week, day).

    The tracking fields at the bottom stay at their defaults until the
    completion tracker annotates the plan.
    """

    assignment_id: str
    source: AssignmentSource
    position: int
    drill_id: int
    drill: Optional[DrillSummary] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration_minutes: Optional[int] = None
    requires_upload: bool = False
    upload_prompt: Optional[str] = None
    notes_to_player: Optional[str] = None

    status: AssignmentStatus = AssignmentStatus.NOT_STARTED
    completed_at: Optional[datetime] = None
    submission_count: int = 0
    latest_submission_id: Optional[int] = None
    latest_review_note: Optional[str] = None


class DayPlan(BaseModel):
    week_index: int
    day_index: int
    focus: Optional[FocusSummary] = None
    note: Optional[str] = None
    assignments: list[ResolvedAssignment] = Field(default_factory=list)
    has_day_override: bool = False
    assignments_overridden: bool = False


class LegacyWeekPlan(BaseModel):
    """Week rendered from free-text goals/assignments (no day rows for the week)."""

    kind: Literal["legacy"] = "legacy"
    week_index: int
    goals: list[str] = Field(default_factory=list)
    assignments: list[str] = Field(default_factory=list)
    overridden: bool = False


class DayLevelWeekPlan(BaseModel):
    """Week rendered from day rows, one resolved plan per day of the cycle."""

    kind: Literal["day_level"] = "day_level"
    week_index: int
    days: dict[int, DayPlan] = Field(default_factory=dict)


WeekPlan = Annotated[Union[LegacyWeekPlan, DayLevelWeekPlan], Field(discriminator="kind")]


class TodayPlan(BaseModel):
    enrollment_id: int
    template_id: int
    template_title: str
    weeks_count: int
    cycle_days: int
    week_index: int
    day_index: int
    program_finished: bool = False
    resolved_at: datetime
    day: DayPlan
