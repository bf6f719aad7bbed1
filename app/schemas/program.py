"""Pydantic schemas for program templates and their day/week content."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_lines(values: list[str]) -> list[str]:
    """Trim entries and drop blanks, keeping order."""
    return [value.strip() for value in values if value and value.strip()]


class TemplateCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=120)
    weeks_count: int
    cycle_days: Optional[int] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class TemplateUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=120)
    weeks_count: Optional[int] = None
    cycle_days: Optional[int] = None


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: str
    coach_user_id: str
    title: str
    weeks_count: int
    cycle_days: int
    created_at: datetime
    updated_at: datetime


class TemplateWeekUpdate(BaseModel):
    goals: list[str] = Field(default_factory=list)
    assignments: list[str] = Field(default_factory=list)

    @field_validator("goals", "assignments")
    @classmethod
    def clean_lines(cls, v: list[str]) -> list[str]:
        return _clean_lines(v)


class TemplateWeekResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    template_id: int
    week_index: int
    goals: list[str]
    assignments: list[str]


class TemplateDayUpdate(BaseModel):
    focus_id: Optional[int] = None
    note: Optional[str] = Field(default=None, max_length=2000)


class TemplateDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    template_id: int
    week_index: int
    day_index: int
    focus_id: Optional[int] = None
    note: Optional[str] = None


class DayAssignmentUpsert(BaseModel):
    assignment_id: Optional[int] = None
    week_index: int = Field(ge=1)
    day_index: int = Field(ge=1)
    drill_id: int
    sets: Optional[int] = Field(default=None, ge=1, le=50)
    reps: Optional[int] = Field(default=None, ge=1, le=500)
    duration_minutes: Optional[int] = Field(default=None, ge=1, le=240)
    requires_upload: bool = False
    upload_prompt: Optional[str] = Field(default=None, max_length=400)
    notes_to_player: Optional[str] = Field(default=None, max_length=2000)
    sort_order: int = 0


class DayAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    template_id: int
    week_index: int
    day_index: int
    drill_id: int
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration_minutes: Optional[int] = None
    requires_upload: bool
    upload_prompt: Optional[str] = None
    notes_to_player: Optional[str] = None
    sort_order: int
