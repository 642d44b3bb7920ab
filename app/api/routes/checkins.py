from fastapi import APIRouter, Depends, HTTPException, Response
from uuid import UUID
from app.api.deps import Authed, get_rng
from app.db.models import Checkin
from app.schemas.checkin import CheckinCreate, CheckinOut
from app.repositories.checkin_repo import get_checkin_owned, list_checkins, delete_checkin
from app.services.checkin import create_checkin, update_checkin
from app.utils.time import ensure_aware

router = APIRouter(prefix="/api/checkins", tags=["checkins"])

def _out(ci: Checkin) -> dict:
    return {
        "checkin_id": ci.id,
        "emotion": ci.emotion,
        "text": ci.text,
        "sentiment": ci.sentiment,
        "generated_response": ci.generated_response,
        "created_at": ensure_aware(ci.created_at),
    }

@router.post("", response_model=CheckinOut, status_code=201)
async def create(payload: CheckinCreate, ctx=Depends(Authed), rng=Depends(get_rng)):
    result = await create_checkin(ctx["db"], user_id=ctx["user_id"], emotion=payload.emotion, text=payload.text, rng=rng)
    return _out(result.checkin)

@router.get("", response_model=list[CheckinOut])
async def list_all(limit: int = 100, ctx=Depends(Authed)):
    items = await list_checkins(ctx["db"], ctx["user_id"], limit=limit)
    return [_out(ci) for ci in items]

@router.get("/{checkin_id}", response_model=CheckinOut)
async def get_one(checkin_id: UUID, ctx=Depends(Authed)):
    ci = await get_checkin_owned(ctx["db"], ctx["user_id"], checkin_id)
    if not ci: raise HTTPException(status_code=404, detail="Checkin not found or doesn't belong to user")
    return _out(ci)

@router.put("/{checkin_id}", response_model=CheckinOut)
async def update(checkin_id: UUID, payload: CheckinCreate, ctx=Depends(Authed), rng=Depends(get_rng)):
    ci = await get_checkin_owned(ctx["db"], ctx["user_id"], checkin_id)
    if not ci: raise HTTPException(status_code=404, detail="Checkin not found or doesn't belong to user")
    result = await update_checkin(ctx["db"], ci, emotion=payload.emotion, text=payload.text, rng=rng)
    return _out(result.checkin)

@router.delete("/{checkin_id}", status_code=204)
async def delete(checkin_id: UUID, ctx=Depends(Authed)):
    ci = await get_checkin_owned(ctx["db"], ctx["user_id"], checkin_id)
    if not ci: raise HTTPException(status_code=404, detail="Checkin not found or doesn't belong to user")
    await delete_checkin(ctx["db"], ci)
    return Response(status_code=204)
