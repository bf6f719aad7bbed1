"""Pydantic schemas for completions, submissions and reviews."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CompletionRequest(BaseModel):
    enrollment_id: int
    assignment_id: str = Field(min_length=1, max_length=64)


class CompletionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: int
    assignment_id: str
    completed_at: datetime


class SubmissionCreate(BaseModel):
    enrollment_id: int
    week_index: int
    day_index: Optional[int] = None
    assignment_id: Optional[str] = Field(default=None, max_length=64)
    video_id: str = Field(min_length=1, max_length=64)
    note: Optional[str] = Field(default=None, max_length=2000)


class ReviewCreate(BaseModel):
    submission_id: int
    note: Optional[str] = Field(default=None, max_length=4000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: int
    reviewer_user_id: Optional[str] = None
    review_note: Optional[str] = None
    reviewed_at: datetime


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    enrollment_id: int
    week_index: int
    day_index: Optional[int] = None
    assignment_id: Optional[str] = None
    video_id: str
    note: Optional[str] = None
    created_at: datetime
    review: Optional[ReviewResponse] = None
