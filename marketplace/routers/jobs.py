# marketplace/routers/jobs.py
from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..deps import MAX_ID, get_context, get_profile, get_session
from ..models import JobOut
from ..queries import ContractQueries
from ..tables import Profile

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/unpaid", response_model=List[JobOut])
async def list_unpaid_jobs(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    """Unpaid jobs on the caller's active contracts, either side."""
    jobs = await ContractQueries(db).list_unpaid_jobs(profile)
    return [JobOut.model_validate(j) for j in jobs]


@router.post("/{job_id}/pay", response_model=JobOut)
async def pay_job(
    job_id: int = Path(ge=1, le=MAX_ID),
    profile: Profile = Depends(get_profile),
    ctx: AppContext = Depends(get_context),
):
    job = await ctx.ledger.pay_job(job_id, profile)
    return JobOut.model_validate(job)
