# marketplace/routers/admin.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session
from ..models import BestClientOut, BestProfessionOut
from ..reporting import DEFAULT_CLIENT_LIMIT, ReportingAggregator, naive_utc

router = APIRouter(prefix="/admin", tags=["admin"])


def _check_range(start: datetime, end: datetime):
    if naive_utc(start) > naive_utc(end):
        raise HTTPException(status_code=422, detail="start must not be after end")


@router.get("/best-profession", response_model=BestProfessionOut)
async def best_profession(
    start: datetime = Query(...),
    end: datetime = Query(...),
    db: AsyncSession = Depends(get_session),
):
    """Profession whose contractors earned the most in ``[start, end]``.

    Returns ``{profession, paid}`` only. There is no ``fullName``: the result
    is a whole profession, not one contractor. With nothing paid in range the
    answer is ``{"profession": null, "paid": 0}``.
    """
    _check_range(start, end)
    best = await ReportingAggregator(db).best_profession(start, end)
    if best is None:
        return BestProfessionOut()
    return BestProfessionOut(profession=best.profession, paid=best.total_paid)


@router.get("/best-client", response_model=List[BestClientOut])
async def best_clients(
    start: datetime = Query(...),
    end: datetime = Query(...),
    limit: int = Query(default=DEFAULT_CLIENT_LIMIT, ge=1),
    db: AsyncSession = Depends(get_session),
):
    _check_range(start, end)
    totals = await ReportingAggregator(db).best_clients(start, end, limit)
    return [BestClientOut(id=t.client_id, full_name=t.full_name, paid=t.total_paid) for t in totals]
