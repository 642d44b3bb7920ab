from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import DateTime, Index, String, Text, Uuid
import uuid
from datetime import datetime

from app.utils.time import utcnow


class Base(DeclarativeBase):
    pass

class Checkin(Base):
    __tablename__ = "checkins"
    __table_args__ = (Index("ix_checkins_user_created", "user_id", "created_at"),)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    emotion: Mapped[str] = mapped_column(String(20))
    text: Mapped[str] = mapped_column(String(100))
    sentiment: Mapped[str] = mapped_column(String(20))
    generated_response: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

class WeeklyAnalysis(Base):
    __tablename__ = "weekly_analyses"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    week_label: Mapped[str] = mapped_column(String(50))
    predominant_emotion: Mapped[str] = mapped_column(String(20))
    summary: Mapped[str] = mapped_column(Text)
    recommendation: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
