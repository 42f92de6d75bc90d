"""
Grading rules for report cards.

Everything here is pure and deterministic:
- remark(): banded proficiency label for a 0-100 total
- teacher_remark() / headmaster_remark(): narrative sentence per band
- summarize_scores(): per-subject totals, grand total and average
- term_dates(): term-closing and next-term dates from an injected "today"

Scoring convention: a subject total is class_score + exam_score (no
halving). Each component is bounded by MAX_COMPONENT_SCORE, so a subject is
out of twice that; bands are applied to the total as a percentage of it.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

TERM_LENGTH_DAYS = 30
VACATION_DAYS = 14


class Remark(str, Enum):
    """Fixed proficiency vocabulary, best first."""
    HIGHLY_PROFICIENT = "HIGHLY PROFICIENT"
    PROFICIENT = "PROFICIENT"
    APPROACHING_PROFICIENCY = "APPROACHING PROFICIENCY"
    DEVELOPING = "DEVELOPING"
    NEEDS_IMPROVEMENT = "NEEDS IMPROVEMENT"


# (lower bound, tag), evaluated top-down
REMARK_BANDS = [
    (80, Remark.HIGHLY_PROFICIENT),
    (70, Remark.PROFICIENT),
    (60, Remark.APPROACHING_PROFICIENCY),
    (50, Remark.DEVELOPING),
]

TEACHER_REMARKS = [
    (90, "An outstanding performance! Keep up the excellent work and continue to inspire others."),
    (80, "Very good effort this term. Your dedication is commendable. Keep striving for excellence."),
    (70, "Good performance. With a little more effort, you can achieve even greater results."),
    (60, "Fair performance. Focus more on your studies and you will see improvement."),
    (50, "You passed, but there is room for improvement. Work harder next term."),
]
TEACHER_REMARK_FLOOR = "More effort is needed. Do not give up; with determination, you can improve."

HEADMASTER_REMARKS = [
    (90, "Exceptional achievement! You are a role model for your peers. Keep excelling."),
    (80, "Commendable performance. Continue with this positive attitude towards learning."),
    (70, "A good result. Push yourself further and aim for excellence next term."),
    (60, "Satisfactory progress. With better focus and commitment, you can do better."),
    (50, "You have the potential to do better. Apply yourself more diligently."),
]
HEADMASTER_REMARK_FLOOR = "Improvement is needed. Stay encouraged and work harder next term."


def _banded(value: float, bands: list, floor):
    for lower_bound, result in bands:
        if value >= lower_bound:
            return result
    return floor


def remark(total: float) -> Remark:
    """Map a 0-100 total to its proficiency tag (lower bounds inclusive)."""
    return _banded(total, REMARK_BANDS, Remark.NEEDS_IMPROVEMENT)


def teacher_remark(percentage: float) -> str:
    """Class teacher's narrative remark for an average percentage."""
    return _banded(percentage, TEACHER_REMARKS, TEACHER_REMARK_FLOOR)


def headmaster_remark(percentage: float) -> str:
    """Headmaster's narrative remark for an average percentage."""
    return _banded(percentage, HEADMASTER_REMARKS, HEADMASTER_REMARK_FLOOR)


@dataclass(frozen=True)
class SubjectResult:
    """One scored subject as it appears on the report."""
    subject_name: str
    class_score: float
    exam_score: float
    total: float
    remark: Remark


@dataclass(frozen=True)
class ScoreSummary:
    """Per-subject results plus the aggregates printed in the grand-total row.

    average, percentage and average_remark are None when there are no
    subjects: there is nothing to average.
    """
    subjects: list[SubjectResult]
    grand_total: float
    average: Optional[float]
    percentage: Optional[float]
    average_remark: Optional[Remark]

    @property
    def subject_count(self) -> int:
        return len(self.subjects)


def subject_total(class_score: float, exam_score: float) -> float:
    """Sum of the two components, rounded to cents to avoid float drift."""
    return round(class_score + exam_score, 2)


def as_percentage(total: float, max_component_score: float) -> float:
    """Express a subject total as a percentage of its maximum."""
    return total / (2 * max_component_score) * 100


def summarize_scores(
    scores: Iterable,
    max_component_score: float = 50.0,
) -> ScoreSummary:
    """Compute totals and remarks for an ordered list of score lines.

    Each item needs subject_name, class_score and exam_score attributes
    (the ScoreLine schema, or anything shaped like it). Order is preserved.
    """
    subjects = []
    for line in scores:
        total = subject_total(line.class_score, line.exam_score)
        subjects.append(SubjectResult(
            subject_name=line.subject_name,
            class_score=line.class_score,
            exam_score=line.exam_score,
            total=total,
            remark=remark(as_percentage(total, max_component_score)),
        ))

    grand_total = round(sum(s.total for s in subjects), 2)

    if not subjects:
        return ScoreSummary(
            subjects=[], grand_total=0.0,
            average=None, percentage=None, average_remark=None,
        )

    average = grand_total / len(subjects)
    percentage = as_percentage(average, max_component_score)
    return ScoreSummary(
        subjects=subjects,
        grand_total=grand_total,
        average=average,
        percentage=percentage,
        average_remark=remark(percentage),
    )


@dataclass(frozen=True)
class TermDates:
    closes: date
    next_term_starts: date


def term_dates(today: date) -> TermDates:
    """Term closes 30 days after today; next term starts 14 days after that."""
    closes = today + timedelta(days=TERM_LENGTH_DAYS)
    return TermDates(
        closes=closes,
        next_term_starts=closes + timedelta(days=VACATION_DAYS),
    )


def format_long_date(value: date) -> str:
    """Format like 'November 18, 2026' (no zero padding, locale-independent)."""
    return f"{value:%B} {value.day}, {value.year}"
