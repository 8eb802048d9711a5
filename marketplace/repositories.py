# marketplace/repositories.py
"""Session-bound data access.

Each repository wraps the request's ``AsyncSession``; none of them commit.
Transaction boundaries belong to the caller (the ledger, or the request).
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from .tables import Contract, ContractStatus, Job, Profile, ProfileType


@dataclass(frozen=True)
class ProfessionTotal:
    profession: str
    total_paid: Decimal


@dataclass(frozen=True)
class ClientTotal:
    client_id: int
    full_name: str
    total_paid: Decimal


def _active():
    return Contract.status != ContractStatus.TERMINATED


def _unpaid():
    return or_(Job.paid.is_(None), Job.paid.is_(False))


def _involves(profile_id: int):
    return or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id)


class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, profile_id: int) -> Optional[Profile]:
        return await self.session.get(Profile, profile_id)

    async def lock_many(self, profile_ids: Sequence[int]) -> List[Profile]:
        # ascending id order so two payments never lock the same pair crosswise
        stmt = (
            select(Profile)
            .where(Profile.id.in_(profile_ids))
            .order_by(Profile.id)
            .with_for_update()
        )
        return list((await self.session.scalars(stmt)).all())

    async def debit(self, profile_id: int, amount: Decimal) -> bool:
        """Subtract ``amount`` only if the stored balance covers it."""
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id, Profile.balance >= amount)
            .values(balance=Profile.balance - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def credit(self, profile_id: int, amount: Decimal) -> bool:
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id)
            .values(balance=Profile.balance + amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1


class ContractRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_client(self, contract_id: int, client_id: int) -> Optional[Contract]:
        stmt = select(Contract).where(Contract.id == contract_id, Contract.client_id == client_id)
        return (await self.session.scalars(stmt)).first()

    async def list_active_for(self, profile_id: int) -> List[Contract]:
        stmt = (
            select(Contract)
            .where(_involves(profile_id), _active())
            .order_by(Contract.id)
        )
        return list((await self.session.scalars(stmt)).all())


class JobRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def lock_payable(self, job_id: int) -> Optional[Job]:
        """Job joined to its non-terminated contract, both rows locked."""
        stmt = (
            select(Job)
            .join(Job.contract)
            .options(contains_eager(Job.contract))
            .where(Job.id == job_id, _active())
            .with_for_update()
        )
        return (await self.session.scalars(stmt)).first()

    async def mark_paid(self, job_id: int, paid_at: datetime) -> bool:
        """Flip an unpaid job to paid; False when someone else got there first."""
        stmt = (
            update(Job)
            .where(Job.id == job_id, _unpaid())
            .values(paid=True, payment_date=paid_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_unpaid_for(self, profile_id: int) -> List[Job]:
        stmt = (
            select(Job)
            .join(Job.contract)
            .where(_involves(profile_id), _active(), _unpaid())
            .order_by(Job.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def total_unpaid_for_client(self, client_id: int) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(Job.price), 0))
            .join(Job.contract)
            .where(Contract.client_id == client_id, _active(), _unpaid())
        )
        total = (await self.session.execute(stmt)).scalar_one()
        return Decimal(str(total))

    def _paid_between(self, start: datetime, end: datetime):
        return and_(
            Job.paid.is_(True),
            Job.payment_date >= start,
            Job.payment_date <= end,
            _active(),
        )

    async def top_professions(self, start: datetime, end: datetime, limit: int = 1) -> List[ProfessionTotal]:
        total = func.sum(Job.price).label("total")
        stmt = (
            select(Profile.profession, total)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.contractor_id == Profile.id)
            .where(self._paid_between(start, end), Profile.type == ProfileType.CONTRACTOR)
            .group_by(Profile.profession)
            .order_by(total.desc(), Profile.profession.asc())
            .limit(limit)
        )
        rows = (await self.session.execute(stmt)).all()
        return [ProfessionTotal(row.profession, Decimal(str(row.total))) for row in rows]

    async def top_clients(self, start: datetime, end: datetime, limit: int) -> List[ClientTotal]:
        total = func.sum(Job.price).label("total")
        stmt = (
            select(Profile.id, Profile.first_name, Profile.last_name, total)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(Profile, Contract.client_id == Profile.id)
            .where(self._paid_between(start, end))
            .group_by(Profile.id, Profile.first_name, Profile.last_name)
            .order_by(total.desc(), Profile.id.asc())
            .limit(limit)
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            ClientTotal(row.id, f"{row.first_name} {row.last_name}", Decimal(str(row.total)))
            for row in rows
        ]
