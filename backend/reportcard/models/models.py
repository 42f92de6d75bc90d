"""
SQLAlchemy models for the school records that feed report cards.

Tables:
- students: the class roster
- subjects: global subject catalog
- scores: one row per (student, subject), class + exam components
- attendance: one row per student
- teacher_comments: one row per student (interest, conduct, behavior)

Scores, attendance and comments are upserted, never duplicated: the unique
constraints below enforce "at most one row" at the database level too.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reportcard.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(Base):
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    class_name: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False,
    )

    scores: Mapped[list["Score"]] = relationship(
        back_populates="student", cascade="all, delete-orphan",
    )
    attendance: Mapped[Optional["Attendance"]] = relationship(
        back_populates="student", cascade="all, delete-orphan",
    )
    comments: Mapped[Optional["TeacherComment"]] = relationship(
        back_populates="student", cascade="all, delete-orphan",
    )


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False,
    )


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", name="uq_scores_student_subject"),
        CheckConstraint("class_score >= 0", name="ck_scores_class_score"),
        CheckConstraint("exam_score >= 0", name="ck_scores_exam_score"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False,
    )
    class_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    exam_score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False,
    )

    student: Mapped[Student] = relationship(back_populates="scores")
    subject: Mapped[Subject] = relationship()


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        CheckConstraint("present_days >= 0", name="ck_attendance_present"),
        CheckConstraint("total_days >= present_days", name="ck_attendance_total"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), unique=True, nullable=False,
    )
    present_days: Mapped[int] = mapped_column(Integer, nullable=False)
    total_days: Mapped[int] = mapped_column(Integer, nullable=False)

    student: Mapped[Student] = relationship(back_populates="attendance")


class TeacherComment(Base):
    __tablename__ = "teacher_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), unique=True, nullable=False,
    )
    interest: Mapped[Optional[str]] = mapped_column(Text)
    conduct: Mapped[Optional[str]] = mapped_column(Text)
    behavior: Mapped[Optional[str]] = mapped_column(Text)

    student: Mapped[Student] = relationship(back_populates="comments")
