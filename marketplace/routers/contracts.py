# marketplace/routers/contracts.py
from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import MAX_ID, get_profile, get_session
from ..models import ContractOut
from ..queries import ContractQueries
from ..tables import Profile

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("", response_model=List[ContractOut])
async def list_contracts(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    """Non-terminated contracts where the caller is client or contractor."""
    contracts = await ContractQueries(db).list_contracts(profile)
    return [ContractOut.model_validate(c) for c in contracts]


@router.get("/{contract_id}", response_model=ContractOut)
async def get_contract(
    contract_id: int = Path(ge=1, le=MAX_ID),
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    contract = await ContractQueries(db).get_contract(contract_id, profile)
    return ContractOut.model_validate(contract)
