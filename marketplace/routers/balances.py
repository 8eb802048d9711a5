# marketplace/routers/balances.py
from fastapi import APIRouter, Depends, Path

from ..context import AppContext
from ..deps import MAX_ID, get_context, get_profile
from ..models import DepositIn, ProfileOut
from ..tables import Profile

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("/deposit/{user_id}", response_model=ProfileOut)
async def deposit(
    payload: DepositIn,
    user_id: int = Path(ge=1, le=MAX_ID),
    profile: Profile = Depends(get_profile),
    ctx: AppContext = Depends(get_context),
):
    # any authenticated profile may fund a client, as before
    updated = await ctx.ledger.deposit(user_id, payload.amount)
    return ProfileOut.model_validate(updated)
