"""
Pydantic schemas for report cards.

ReportRecord is the renderer's only input: one student's aggregated
academic record. It is what GET /students/{id}/report returns and what
POST /reports/pdf accepts, so it is validated strictly here and the
renderer can trust it.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reportcard.config import settings
from reportcard.services.grading import subject_total

# Tolerance when checking a caller-supplied grand total (cents)
GRAND_TOTAL_TOLERANCE = 0.005


def check_component_score(value: float) -> float:
    """Reject a class/exam score outside [0, MAX_COMPONENT_SCORE]."""
    if not math.isfinite(value):
        raise ValueError("score must be a finite number")
    if value < 0 or value > settings.MAX_COMPONENT_SCORE:
        raise ValueError(
            f"score must be between 0 and {settings.MAX_COMPONENT_SCORE:g}"
        )
    return value


class ReportStudent(BaseModel):
    """Identity block printed at the top of the report."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    class_name: str = Field(alias="class", min_length=1)

    @field_validator("name", "class_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ScoreLine(BaseModel):
    """One subject row: name plus the two score components."""
    subject_name: str = Field(min_length=1)
    class_score: float
    exam_score: float

    @field_validator("class_score", "exam_score")
    @classmethod
    def within_bounds(cls, value: float) -> float:
        return check_component_score(value)


class AttendanceInfo(BaseModel):
    present_days: int = Field(ge=0)
    total_days: int = Field(ge=0)

    @model_validator(mode="after")
    def present_within_total(self):
        if self.present_days > self.total_days:
            raise ValueError("present_days cannot exceed total_days")
        return self


class CommentsInfo(BaseModel):
    interest: Optional[str] = None
    conduct: Optional[str] = None
    behavior: Optional[str] = None


class ReportRecord(BaseModel):
    """A student's aggregated record, ready for rendering.

    grand_total may be omitted (it is then computed); if supplied it must
    equal the sum of the subject totals.
    """
    student: ReportStudent
    scores: list[ScoreLine] = []
    attendance: Optional[AttendanceInfo] = None
    comments: Optional[CommentsInfo] = None
    grand_total: Optional[float] = Field(default=None, allow_inf_nan=False)
    rank: int = Field(ge=1)
    total_students: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def grand_total_matches_scores(self):
        expected = round(
            sum(subject_total(s.class_score, s.exam_score) for s in self.scores), 2
        )
        if self.grand_total is None:
            self.grand_total = expected
        elif abs(self.grand_total - expected) > GRAND_TOTAL_TOLERANCE:
            raise ValueError(
                f"grand_total {self.grand_total} does not match the sum of "
                f"subject totals ({expected:.2f})"
            )
        else:
            self.grand_total = expected
        return self


class ReportPdfRequest(BaseModel):
    """Body for POST /reports/pdf."""
    report_data: ReportRecord


class ReportPdfResponse(BaseModel):
    """Base64-encoded document plus an explicit marker for the HTML fallback."""
    pdf: str
    is_html: bool = False
    message: Optional[str] = None
