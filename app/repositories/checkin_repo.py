from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.models import Checkin
from uuid import UUID
from datetime import datetime

async def create_checkin(db: AsyncSession, user_id: UUID, emotion: str, text: str, sentiment: str, generated_response: str) -> Checkin:
    ci = Checkin(user_id=user_id, emotion=emotion, text=text, sentiment=sentiment, generated_response=generated_response)
    db.add(ci)
    await db.commit(); await db.refresh(ci)
    return ci

async def get_checkin_owned(db: AsyncSession, user_id: UUID, checkin_id: UUID) -> Checkin | None:
    res = await db.execute(select(Checkin).where(Checkin.id==checkin_id, Checkin.user_id==user_id))
    return res.scalar_one_or_none()

async def list_checkins(db: AsyncSession, user_id: UUID, limit: int = 100) -> list[Checkin]:
    q = (
        select(Checkin)
        .where(Checkin.user_id==user_id)
        .order_by(Checkin.created_at.desc())
        .limit(limit)
    )
    res = await db.execute(q)
    return list(res.scalars())

async def list_checkins_in_window(db: AsyncSession, user_id: UUID, start: datetime, end: datetime) -> list[Checkin]:
    # Both bounds inclusive, oldest first
    q = (
        select(Checkin)
        .where(Checkin.user_id==user_id, Checkin.created_at >= start, Checkin.created_at <= end)
        .order_by(Checkin.created_at.asc())
    )
    res = await db.execute(q)
    return list(res.scalars())

async def update_checkin(db: AsyncSession, ci: Checkin, emotion: str, text: str, sentiment: str, generated_response: str) -> Checkin:
    # created_at is left untouched
    ci.emotion = emotion
    ci.text = text
    ci.sentiment = sentiment
    ci.generated_response = generated_response
    await db.commit(); await db.refresh(ci)
    return ci

async def delete_checkin(db: AsyncSession, ci: Checkin) -> None:
    await db.delete(ci)
    await db.commit()
