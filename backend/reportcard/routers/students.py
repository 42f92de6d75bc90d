"""
Student roster and record-entry endpoints.

1. POST /students — Add a student to the roster
2. GET /students — List students (by name)
3. PATCH /students/{id} — Rename or move a student to another class
4. DELETE /students/{id} — Remove a student and all their records
5. PUT /students/{id}/scores — Upsert one subject's class + exam score
6. PUT /students/{id}/attendance — Upsert attendance
7. PUT /students/{id}/comments — Upsert teacher comments

Scores, attendance and comments are upserts: there is at most one score
per (student, subject) and one attendance/comments row per student, so a
second PUT replaces the first.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.database import get_db
from reportcard.models import Attendance, Score, Student, Subject, TeacherComment
from reportcard.schemas.students import (
    AttendanceResponse,
    AttendanceUpsertRequest,
    CommentsResponse,
    CommentsUpsertRequest,
    ScoreResponse,
    ScoreUpsertRequest,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)
from reportcard.services.grading import subject_total

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    request: StudentCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Add a student to the roster."""
    student = Student(name=request.name.strip(), class_name=request.class_name.strip())
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return StudentResponse.model_validate(student)


@router.get("", response_model=list[StudentResponse])
async def list_students(db: AsyncSession = Depends(get_db)):
    """List all students, ordered by name."""
    result = await db.execute(select(Student).order_by(Student.name))
    return [StudentResponse.model_validate(s) for s in result.scalars().all()]


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    request: StudentUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Update a student's name and/or class."""
    student = await _get_student_or_404(db, student_id)

    if request.name is not None:
        student.name = request.name.strip()
    if request.class_name is not None:
        student.class_name = request.class_name.strip()
    if not student.name or not student.class_name:
        raise HTTPException(status_code=422, detail="name and class_name must not be blank")

    await db.commit()
    await db.refresh(student)
    return StudentResponse.model_validate(student)


@router.delete("/{student_id}")
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a student along with their scores, attendance and comments."""
    student = await _get_student_or_404(db, student_id)

    # Child rows first; SQLite doesn't enforce ON DELETE CASCADE by default
    for model in (Score, Attendance, TeacherComment):
        await db.execute(delete(model).where(model.student_id == student_id))
    await db.delete(student)
    await db.commit()

    return {"message": "Student deleted", "student_id": str(student_id)}


@router.put("/{student_id}/scores", response_model=ScoreResponse)
async def upsert_score(
    student_id: UUID,
    request: ScoreUpsertRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the student's score for one subject."""
    await _get_student_or_404(db, student_id)

    subject = (
        await db.execute(select(Subject).where(Subject.id == request.subject_id))
    ).scalar_one_or_none()
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")

    score = (
        await db.execute(
            select(Score).where(
                Score.student_id == student_id,
                Score.subject_id == request.subject_id,
            )
        )
    ).scalar_one_or_none()
    if score is None:
        score = Score(student_id=student_id, subject_id=request.subject_id)
        db.add(score)

    score.class_score = request.class_score
    score.exam_score = request.exam_score
    await db.commit()
    await db.refresh(score)

    return ScoreResponse(
        id=score.id,
        student_id=score.student_id,
        subject_id=score.subject_id,
        class_score=score.class_score,
        exam_score=score.exam_score,
        total=subject_total(score.class_score, score.exam_score),
    )


@router.put("/{student_id}/attendance", response_model=AttendanceResponse)
async def upsert_attendance(
    student_id: UUID,
    request: AttendanceUpsertRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the student's attendance."""
    await _get_student_or_404(db, student_id)

    attendance = (
        await db.execute(select(Attendance).where(Attendance.student_id == student_id))
    ).scalar_one_or_none()
    if attendance is None:
        attendance = Attendance(student_id=student_id)
        db.add(attendance)

    attendance.present_days = request.present_days
    attendance.total_days = request.total_days
    await db.commit()
    await db.refresh(attendance)
    return AttendanceResponse.model_validate(attendance)


@router.put("/{student_id}/comments", response_model=CommentsResponse)
async def upsert_comments(
    student_id: UUID,
    request: CommentsUpsertRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the teacher's comments for the student."""
    await _get_student_or_404(db, student_id)

    comments = (
        await db.execute(select(TeacherComment).where(TeacherComment.student_id == student_id))
    ).scalar_one_or_none()
    if comments is None:
        comments = TeacherComment(student_id=student_id)
        db.add(comments)

    comments.interest = request.interest
    comments.conduct = request.conduct
    comments.behavior = request.behavior
    await db.commit()
    await db.refresh(comments)
    return CommentsResponse.model_validate(comments)


async def _get_student_or_404(db: AsyncSession, student_id: UUID) -> Student:
    result = await db.execute(select(Student).where(Student.id == student_id))
    student = result.scalar_one_or_none()
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student
