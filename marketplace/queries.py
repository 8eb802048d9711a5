# marketplace/queries.py
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from .errors import NotFound
from .repositories import ContractRepository, JobRepository
from .tables import Contract, Job, Profile


class ContractQueries:
    """Read-only views scoped to the calling profile."""

    def __init__(self, session: AsyncSession):
        self.contracts = ContractRepository(session)
        self.jobs = JobRepository(session)

    async def get_contract(self, contract_id: int, caller: Profile) -> Contract:
        # only the client side may look a single contract up
        contract = await self.contracts.get_for_client(contract_id, caller.id)
        if contract is None:
            raise NotFound("Contract", contract_id)
        return contract

    async def list_contracts(self, caller: Profile) -> List[Contract]:
        return await self.contracts.list_active_for(caller.id)

    async def list_unpaid_jobs(self, caller: Profile) -> List[Job]:
        return await self.jobs.list_unpaid_for(caller.id)
