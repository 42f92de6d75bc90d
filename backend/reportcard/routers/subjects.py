"""
Subject catalog endpoints.

Subjects are global (not per student). Names are unique. Deleting a
subject removes every score recorded against it.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.database import get_db
from reportcard.models import Score, Subject
from reportcard.schemas.students import SubjectCreateRequest, SubjectResponse

router = APIRouter(prefix="/api/v1/subjects", tags=["subjects"])


@router.post("", response_model=SubjectResponse, status_code=201)
async def create_subject(
    request: SubjectCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Add a subject to the catalog. Returns 409 if the name is taken."""
    name = request.name.strip()
    existing = await db.execute(select(Subject).where(Subject.name == name))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Subject '{name}' already exists")

    subject = Subject(name=name)
    db.add(subject)
    await db.commit()
    await db.refresh(subject)
    return SubjectResponse.model_validate(subject)


@router.get("", response_model=list[SubjectResponse])
async def list_subjects(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Subject).order_by(Subject.name))
    return [SubjectResponse.model_validate(s) for s in result.scalars().all()]


@router.delete("/{subject_id}")
async def delete_subject(
    subject_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a subject and the scores entered for it."""
    result = await db.execute(select(Subject).where(Subject.id == subject_id))
    subject = result.scalar_one_or_none()
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")

    await db.execute(delete(Score).where(Score.subject_id == subject_id))
    await db.delete(subject)
    await db.commit()

    return {"message": "Subject deleted", "subject_id": str(subject_id)}
