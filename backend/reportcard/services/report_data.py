"""
Data access for report cards.

Assembles a ReportRecord for one student from the database and computes
the class ranking the record's rank comes from.

Ranking rule: students are listed by name (then id), then stable-sorted by
grand total, highest first. Equal totals keep that listing order, and a
student with no scores has a grand total of 0.
"""

from typing import Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.config import settings
from reportcard.models import Attendance, Score, Student, Subject, TeacherComment
from reportcard.schemas.reports import (
    AttendanceInfo,
    CommentsInfo,
    ReportRecord,
    ReportStudent,
    ScoreLine,
)
from reportcard.schemas.students import RankingEntry
from reportcard.services.grading import subject_total


class StoredScoreError(Exception):
    """Stored scores no longer fit the configured score range."""


async def compute_rankings(db: AsyncSession) -> list[RankingEntry]:
    """Rank every student by grand total (1 = highest)."""
    students = (
        await db.execute(select(Student).order_by(Student.name, Student.id))
    ).scalars().all()

    totals: dict[UUID, float] = {}
    counts: dict[UUID, int] = {}
    rows = await db.execute(
        select(Score.student_id, Score.class_score, Score.exam_score)
    )
    for student_id, class_score, exam_score in rows:
        totals[student_id] = totals.get(student_id, 0.0) + subject_total(class_score, exam_score)
        counts[student_id] = counts.get(student_id, 0) + 1

    ranked = sorted(students, key=lambda s: -round(totals.get(s.id, 0.0), 2))
    return [
        RankingEntry(
            rank=position,
            student_id=student.id,
            name=student.name,
            class_name=student.class_name,
            grand_total=round(totals.get(student.id, 0.0), 2),
            subject_count=counts.get(student.id, 0),
        )
        for position, student in enumerate(ranked, 1)
    ]


async def build_report_record(db: AsyncSession, student_id: UUID) -> Optional[ReportRecord]:
    """Load everything the report card needs for one student.

    Returns None if the student doesn't exist. Scores are ordered by
    subject name. Raises StoredScoreError if a stored score is out of range.
    """
    student = (
        await db.execute(select(Student).where(Student.id == student_id))
    ).scalar_one_or_none()
    if not student:
        return None

    score_rows = await db.execute(
        select(Subject.name, Score.class_score, Score.exam_score)
        .join(Subject, Score.subject_id == Subject.id)
        .where(Score.student_id == student_id)
        .order_by(Subject.name)
    )
    try:
        scores = [
            ScoreLine(subject_name=name, class_score=class_score, exam_score=exam_score)
            for name, class_score, exam_score in score_rows
        ]
    except ValidationError:
        # Happens when MAX_COMPONENT_SCORE was lowered after scores were entered
        raise StoredScoreError(
            f"Stored scores for {student.name} are outside the allowed range "
            f"(0-{settings.MAX_COMPONENT_SCORE:g} per component); re-enter them"
        )

    attendance = (
        await db.execute(select(Attendance).where(Attendance.student_id == student_id))
    ).scalar_one_or_none()
    comments = (
        await db.execute(select(TeacherComment).where(TeacherComment.student_id == student_id))
    ).scalar_one_or_none()

    rankings = await compute_rankings(db)
    rank = next(entry.rank for entry in rankings if entry.student_id == student_id)

    return ReportRecord(
        student=ReportStudent(name=student.name, class_name=student.class_name),
        scores=scores,
        attendance=(
            AttendanceInfo(
                present_days=attendance.present_days,
                total_days=attendance.total_days,
            )
            if attendance else None
        ),
        comments=(
            CommentsInfo(
                interest=comments.interest,
                conduct=comments.conduct,
                behavior=comments.behavior,
            )
            if comments else None
        ),
        rank=rank,
        total_students=len(rankings),
    )
