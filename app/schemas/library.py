"""Pydantic schemas for the coach library (focuses, drills, drill media)."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.enums import DrillCategory, DrillMediaKind
from app.schemas.program import _clean_lines


class FocusCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=2000)
    cues: list[str] = Field(default_factory=list)

    @field_validator("cues")
    @classmethod
    def clean_cues(cls, v: list[str]) -> list[str]:
        return _clean_lines(v)


class FocusUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=2000)
    cues: Optional[list[str]] = None


class FocusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    cues: list[str]
    created_at: datetime


class DrillCreate(BaseModel):
    title: str = Field(min_length=1, max_length=140)
    category: DrillCategory = DrillCategory.OTHER
    goal: Optional[str] = Field(default=None, max_length=2000)
    equipment: list[str] = Field(default_factory=list)
    cues: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)

    @field_validator("equipment", "cues", "common_mistakes")
    @classmethod
    def clean_lists(cls, v: list[str]) -> list[str]:
        return _clean_lines(v)


class DrillUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=140)
    category: Optional[DrillCategory] = None
    goal: Optional[str] = Field(default=None, max_length=2000)
    equipment: Optional[list[str]] = None
    cues: Optional[list[str]] = None
    common_mistakes: Optional[list[str]] = None


class DrillMediaCreate(BaseModel):
    kind: DrillMediaKind
    title: Optional[str] = Field(default=None, max_length=140)
    video_id: Optional[str] = None
    external_url: Optional[str] = Field(default=None, max_length=2000)
    sort_order: int = 0

    @model_validator(mode="after")
    def check_target(self) -> "DrillMediaCreate":
        if self.kind == DrillMediaKind.INTERNAL_VIDEO and not self.video_id:
            raise ValueError("video_id is required for internal_video media")
        if self.kind == DrillMediaKind.EXTERNAL_LINK and not (self.external_url or "").strip():
            raise ValueError("external_url is required for external_link media")
        return self


class DrillMediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    drill_id: int
    kind: DrillMediaKind
    title: Optional[str] = None
    video_id: Optional[str] = None
    external_url: Optional[str] = None
    sort_order: int


class DrillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: DrillCategory
    goal: Optional[str] = None
    equipment: list[str]
    cues: list[str]
    common_mistakes: list[str]
    media: list[DrillMediaResponse] = Field(default_factory=list)
    created_at: datetime
