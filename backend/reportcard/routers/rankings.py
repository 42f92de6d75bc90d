"""
Class ranking endpoint.

GET /rankings lists every student ordered by grand total (highest first),
with a 1-based rank. This is the same ranking report cards print as
"No. on Roll".
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.database import get_db
from reportcard.schemas.students import RankingEntry
from reportcard.services.report_data import compute_rankings

router = APIRouter(prefix="/api/v1/rankings", tags=["rankings"])


@router.get("", response_model=list[RankingEntry])
async def get_rankings(db: AsyncSession = Depends(get_db)):
    """Rank all students by grand total."""
    return await compute_rankings(db)
