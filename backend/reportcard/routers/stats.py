"""
Dashboard counts.

GET /stats returns how many students, subjects and score entries exist.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.database import get_db
from reportcard.models import Score, Student, Subject
from reportcard.schemas.students import StatsResponse

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)):
    students = (await db.execute(select(func.count(Student.id)))).scalar()
    subjects = (await db.execute(select(func.count(Subject.id)))).scalar()
    scores = (await db.execute(select(func.count(Score.id)))).scalar()
    return StatsResponse(students=students, subjects=subjects, scores=scores)
