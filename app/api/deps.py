from uuid import UUID
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.security import get_current_user
from app.services.model import NullSummaryModel, SummaryModel

def Authed(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    return {"db": db, "user_id": UUID(str(user["user_id"]))}

def get_summary_model(request: Request) -> SummaryModel:
    return getattr(request.app.state, "summary_model", None) or NullSummaryModel()

def get_rng(request: Request):
    return getattr(request.app.state, "rng", None)
