from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.models import WeeklyAnalysis
from uuid import UUID

async def create_analysis(db: AsyncSession, user_id: UUID, *, week_label: str, predominant_emotion: str, summary: str, recommendation: str) -> WeeklyAnalysis:
    a = WeeklyAnalysis(
        user_id=user_id,
        week_label=week_label,
        predominant_emotion=predominant_emotion,
        summary=summary,
        recommendation=recommendation,
    )
    db.add(a)
    await db.commit(); await db.refresh(a)
    return a

async def get_analysis_owned(db: AsyncSession, user_id: UUID, analysis_id: UUID) -> WeeklyAnalysis | None:
    res = await db.execute(select(WeeklyAnalysis).where(WeeklyAnalysis.id==analysis_id, WeeklyAnalysis.user_id==user_id))
    return res.scalar_one_or_none()

async def list_analyses(db: AsyncSession, user_id: UUID, limit: int = 52) -> list[WeeklyAnalysis]:
    q = (
        select(WeeklyAnalysis)
        .where(WeeklyAnalysis.user_id==user_id)
        .order_by(WeeklyAnalysis.created_at.desc())
        .limit(limit)
    )
    res = await db.execute(q)
    return list(res.scalars())

async def delete_analysis(db: AsyncSession, a: WeeklyAnalysis) -> None:
    await db.delete(a)
    await db.commit()
