"""
Pydantic schemas for the roster and score-entry endpoints.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from reportcard.schemas.reports import check_component_score


class StudentCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    class_name: str = Field(min_length=1, max_length=50)


class StudentUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    class_name: Optional[str] = Field(default=None, min_length=1, max_length=50)


class StudentResponse(BaseModel):
    id: UUID
    name: str
    class_name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SubjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class SubjectResponse(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class ScoreUpsertRequest(BaseModel):
    """Class and exam score for one subject; replaces any existing entry."""
    subject_id: UUID
    class_score: float
    exam_score: float

    @field_validator("class_score", "exam_score")
    @classmethod
    def within_bounds(cls, value: float) -> float:
        return check_component_score(value)


class ScoreResponse(BaseModel):
    id: UUID
    student_id: UUID
    subject_id: UUID
    class_score: float
    exam_score: float
    total: float


class AttendanceUpsertRequest(BaseModel):
    present_days: int = Field(ge=0)
    total_days: int = Field(ge=1)

    @model_validator(mode="after")
    def present_within_total(self):
        if self.present_days > self.total_days:
            raise ValueError("present_days cannot exceed total_days")
        return self


class AttendanceResponse(BaseModel):
    student_id: UUID
    present_days: int
    total_days: int

    model_config = {"from_attributes": True}


class CommentsUpsertRequest(BaseModel):
    interest: Optional[str] = None
    conduct: Optional[str] = None
    behavior: Optional[str] = None


class CommentsResponse(BaseModel):
    student_id: UUID
    interest: Optional[str] = None
    conduct: Optional[str] = None
    behavior: Optional[str] = None

    model_config = {"from_attributes": True}


class RankingEntry(BaseModel):
    """One student's position in the class ranking."""
    rank: int
    student_id: UUID
    name: str
    class_name: str
    grand_total: float
    subject_count: int


class StatsResponse(BaseModel):
    """Record counts for the dashboard."""
    students: int
    subjects: int
    scores: int
