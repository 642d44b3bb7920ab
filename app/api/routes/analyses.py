from fastapi import APIRouter, Depends, HTTPException, Response
from uuid import UUID
from app.api.deps import Authed, get_summary_model
from app.core.config import settings
from app.db.models import WeeklyAnalysis
from app.schemas.analysis import WeeklyAnalysisOut
from app.schemas.common import ErrorResponse
from app.repositories.analysis_repo import get_analysis_owned, list_analyses, delete_analysis
from app.services.analysis import generate_weekly_analysis
from app.utils.time import ensure_aware


router = APIRouter(prefix="/api/analyses", tags=["analyses"])

def _out(a: WeeklyAnalysis) -> dict:
    return {
        "analysis_id": a.id,
        "week_label": a.week_label,
        "predominant_emotion": a.predominant_emotion,
        "summary": a.summary,
        "recommendation": a.recommendation,
        "created_at": ensure_aware(a.created_at),
    }

@router.post("/weekly", response_model=WeeklyAnalysisOut, status_code=201, responses={409: {"model": ErrorResponse}})
async def generate(ctx=Depends(Authed), model=Depends(get_summary_model)):
    # NoDataError is turned into a 409 by the app-level handler
    a = await generate_weekly_analysis(
        ctx["db"],
        user_id=ctx["user_id"],
        model=model,
        days=settings.ANALYSIS_WINDOW_DAYS,
        timeout=settings.MODEL_TIMEOUT_SECONDS,
    )
    return _out(a)

@router.get("", response_model=list[WeeklyAnalysisOut])
async def list_all(ctx=Depends(Authed)):
    return [_out(a) for a in await list_analyses(ctx["db"], ctx["user_id"])]

@router.get("/{analysis_id}", response_model=WeeklyAnalysisOut)
async def get_one(analysis_id: UUID, ctx=Depends(Authed)):
    a = await get_analysis_owned(ctx["db"], ctx["user_id"], analysis_id)
    if not a: raise HTTPException(status_code=404, detail="Analysis not found or doesn't belong to user")
    return _out(a)

@router.delete("/{analysis_id}", status_code=204)
async def delete(analysis_id: UUID, ctx=Depends(Authed)):
    a = await get_analysis_owned(ctx["db"], ctx["user_id"], analysis_id)
    if not a: raise HTTPException(status_code=404, detail="Analysis not found or doesn't belong to user")
    await delete_analysis(ctx["db"], a)
    return Response(status_code=204)
