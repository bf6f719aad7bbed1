"""Pydantic schemas for enrollments and per-player overrides."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import EnrollmentStatus
from app.schemas.program import _clean_lines


class EnrollmentCreate(BaseModel):
    template_id: int
    player_user_id: str = Field(min_length=1, max_length=64)
    start_at: Optional[datetime] = None


class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatus


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    template_id: int
    team_id: str
    player_user_id: str
    coach_user_id: str
    start_at: datetime
    status: EnrollmentStatus
    created_at: datetime


class AssignmentSpec(BaseModel):
    """Inline assignment stored on a day override.

    Field names follow the stored JSON shape (``minutes``, ``notes``).
    """

    drill_id: int
    sets: Optional[int] = Field(default=None, ge=1, le=50)
    reps: Optional[int] = Field(default=None, ge=1, le=500)
    minutes: Optional[int] = Field(default=None, ge=1, le=240)
    requires_upload: bool = False
    upload_prompt: Optional[str] = Field(default=None, max_length=400)
    notes: Optional[str] = Field(default=None, max_length=2000)


class DayOverrideUpdate(BaseModel):
    focus_id: Optional[int] = None
    day_note: Optional[str] = Field(default=None, max_length=2000)
    assignments: list[AssignmentSpec] = Field(default_factory=list)


class DayOverrideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    enrollment_id: int
    week_index: int
    day_index: int
    focus_id: Optional[int] = None
    day_note: Optional[str] = None
    assignments: list[AssignmentSpec]


class WeekOverrideUpdate(BaseModel):
    goals: list[str] = Field(default_factory=list)
    assignments: list[str] = Field(default_factory=list)

    @field_validator("goals", "assignments")
    @classmethod
    def clean_lines(cls, v: list[str]) -> list[str]:
        return _clean_lines(v)


class WeekOverrideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: int
    week_index: int
    goals: list[str]
    assignments: list[str]
