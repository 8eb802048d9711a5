# marketplace/reporting.py
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .repositories import ClientTotal, JobRepository, ProfessionTotal

DEFAULT_CLIENT_LIMIT = 2


def naive_utc(value: datetime) -> datetime:
    # payment dates are stored as naive UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ReportingAggregator:
    """Paid-job totals over an inclusive ``[start, end]`` payment-date range.

    Only jobs on non-terminated contracts count. Ties are broken by
    profession name (ascending) and by client id (ascending).
    """

    def __init__(self, session: AsyncSession):
        self.jobs = JobRepository(session)

    async def best_profession(self, start: datetime, end: datetime) -> Optional[ProfessionTotal]:
        """Highest-earning contractor profession, or None when nothing was paid."""
        top = await self.jobs.top_professions(naive_utc(start), naive_utc(end), limit=1)
        return top[0] if top else None

    async def best_clients(
        self, start: datetime, end: datetime, limit: int = DEFAULT_CLIENT_LIMIT
    ) -> List[ClientTotal]:
        if limit < 1:
            raise ValueError("limit must be a positive integer")
        return await self.jobs.top_clients(naive_utc(start), naive_utc(end), limit)
