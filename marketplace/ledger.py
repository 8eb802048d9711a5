# marketplace/ledger.py
"""Balance moves: job payments and client deposits.

Both operations run in their own session and a single transaction. Rows are
locked with ``SELECT ... FOR UPDATE`` and the writes themselves are
conditional updates, so a store that ignores row locks (SQLite) still cannot
debit a client twice for the same job.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from .db import Store
from .errors import AlreadyPaid, Forbidden, InsufficientFunds, LimitExceeded, NotFound, StoreFailure
from .repositories import JobRepository, ProfileRepository
from .tables import Job, Profile

log = logging.getLogger("uvicorn.error")

# a client may hold at most 125% of what they still owe
DEPOSIT_LIMIT_RATIO = Decimal("1.25")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BalanceLedger:
    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def pay_job(self, job_id: int, caller: Profile) -> Job:
        """Move ``job.price`` from the contract's client to its contractor.

        Raises NotFound (no job, or its contract is terminated), Forbidden
        (caller is not the client), AlreadyPaid, InsufficientFunds, or
        StoreFailure. On any of them nothing is written.
        """
        try:
            async with self.store.session() as session:
                async with session.begin():
                    job = await self._pay(session, job_id, caller)
        except SQLAlchemyError as exc:
            log.error(f"Payment of job {job_id} by profile {caller.id} failed: {exc}", exc_info=True)
            raise StoreFailure("Payment") from exc

        log.info(f"Job {job.id} paid: {job.price} moved from profile {caller.id}")
        return job

    async def _pay(self, session, job_id: int, caller: Profile) -> Job:
        jobs = JobRepository(session)
        profiles = ProfileRepository(session)

        job = await jobs.lock_payable(job_id)
        if job is None:
            raise NotFound("Job", job_id)
        contract = job.contract
        if contract.client_id != caller.id:
            raise Forbidden(f"Profile {caller.id} is not the client of contract {contract.id}")
        if job.paid:
            raise AlreadyPaid(job.id)

        locked = {p.id: p for p in await profiles.lock_many([contract.client_id, contract.contractor_id])}
        client = locked[contract.client_id]
        if client.balance < job.price:
            raise InsufficientFunds(client.id, client.balance, job.price)

        if not await profiles.debit(client.id, job.price):
            raise InsufficientFunds(client.id, client.balance, job.price)
        if not await jobs.mark_paid(job.id, self.clock()):
            raise AlreadyPaid(job.id)
        if not await profiles.credit(contract.contractor_id, job.price):
            raise StoreFailure("Payment")
        # read back inside the transaction; a failure here still rolls back
        await session.refresh(job)
        return job

    async def deposit(self, profile_id: int, amount: Decimal) -> Profile:
        """Add ``amount`` to a client's balance.

        The deposit may not exceed 125% of the client's unpaid jobs on
        non-terminated contracts at the moment of the deposit.
        """
        try:
            async with self.store.session() as session:
                async with session.begin():
                    profile = await self._deposit(session, profile_id, amount)
        except SQLAlchemyError as exc:
            log.error(f"Deposit of {amount} to profile {profile_id} failed: {exc}", exc_info=True)
            raise StoreFailure("Deposit") from exc

        log.info(f"Deposited {amount} to profile {profile_id}, balance now {profile.balance}")
        return profile

    async def _deposit(self, session, profile_id: int, amount: Decimal) -> Profile:
        profiles = ProfileRepository(session)
        jobs = JobRepository(session)

        locked = await profiles.lock_many([profile_id])
        if not locked or not locked[0].is_client:
            raise NotFound("Client", profile_id)
        profile = locked[0]

        limit = await jobs.total_unpaid_for_client(profile_id) * DEPOSIT_LIMIT_RATIO
        if amount > limit:
            raise LimitExceeded(profile_id, amount, limit)

        if not await profiles.credit(profile_id, amount):
            raise StoreFailure("Deposit")
        await session.refresh(profile)
        return profile
