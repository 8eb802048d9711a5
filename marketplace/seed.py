# marketplace/seed.py
"""Sample marketplace: 8 profiles, 9 contracts, 14 jobs.

    python -m marketplace.seed      # drop, recreate and fill DATABASE_URL
"""
import asyncio
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select

from .config import Settings
from .db import Store
from .tables import Contract, ContractStatus, Job, Profile, ProfileType

log = logging.getLogger("uvicorn.error")

C, K = ProfileType.CLIENT, ProfileType.CONTRACTOR
NEW, RUNNING, TERMINATED = ContractStatus.NEW, ContractStatus.IN_PROGRESS, ContractStatus.TERMINATED

PROFILES = [
    (1, "Harry", "Potter", "Wizard", "1150", C),
    (2, "Mr", "Robot", "Hacker", "231.11", C),
    (3, "John", "Snow", "Knows nothing", "451.3", C),
    (4, "Ash", "Kethcum", "Pokemon master", "1.3", C),
    (5, "John", "Lenon", "Musician", "64", K),
    (6, "Linus", "Torvalds", "Programmer", "1214", K),
    (7, "Alan", "Turing", "Programmer", "22", K),
    (8, "Aragorn", "II Elessar Telcontarion", "Fighter", "314", K),
]

# id, status, client, contractor
CONTRACTS = [
    (1, TERMINATED, 1, 5),
    (2, RUNNING, 1, 6),
    (3, RUNNING, 2, 6),
    (4, RUNNING, 2, 7),
    (5, NEW, 3, 8),
    (6, RUNNING, 3, 7),
    (7, RUNNING, 4, 7),
    (8, RUNNING, 4, 6),
    (9, RUNNING, 4, 8),
]

# id, price, contract, paid at (None = unpaid)
JOBS = [
    (1, "200", 1, None),
    (2, "201", 2, None),
    (3, "202", 3, None),
    (4, "200", 4, None),
    (5, "200", 7, None),
    (6, "2020", 7, datetime(2020, 8, 15, 19, 11, 26, 737000)),
    (7, "200", 2, datetime(2020, 8, 15, 19, 11, 26, 737000)),
    (8, "200", 3, datetime(2020, 8, 16, 19, 11, 26, 737000)),
    (9, "200", 1, datetime(2020, 8, 17, 19, 11, 26, 737000)),
    (10, "200", 5, datetime(2020, 8, 17, 19, 11, 26, 737000)),
    (11, "21", 1, datetime(2020, 8, 10, 19, 11, 26, 737000)),
    (12, "21", 2, datetime(2020, 8, 15, 19, 11, 26, 737000)),
    (13, "121", 3, datetime(2020, 8, 15, 19, 11, 26, 737000)),
    (14, "121", 3, datetime(2020, 8, 14, 23, 11, 26, 737000)),
]


def sample_rows():
    rows = [
        Profile(id=i, first_name=first, last_name=last, profession=prof, balance=Decimal(bal), type=kind)
        for i, first, last, prof, bal, kind in PROFILES
    ]
    rows += [
        Contract(id=i, terms="bla bla bla", status=status, client_id=client, contractor_id=contractor)
        for i, status, client, contractor in CONTRACTS
    ]
    rows += [
        Job(
            id=i,
            description="work",
            price=Decimal(price),
            contract_id=contract,
            paid=paid_at is not None,
            payment_date=paid_at,
        )
        for i, price, contract, paid_at in JOBS
    ]
    return rows


async def seed(store: Store, only_if_empty: bool = True) -> bool:
    """Insert the sample rows. Returns False when skipped because data exists."""
    async with store.session() as session, session.begin():
        if only_if_empty:
            count = (await session.execute(select(func.count(Profile.id)))).scalar_one()
            if count:
                log.info(f"Seed skipped, {count} profiles already present")
                return False
        session.add_all(sample_rows())
    log.info(f"Seeded {len(PROFILES)} profiles, {len(CONTRACTS)} contracts, {len(JOBS)} jobs")
    return True


async def reset(store: Store) -> None:
    await store.drop_all()
    await store.create_all()
    await seed(store, only_if_empty=False)


async def _main():
    store = Store(Settings.from_env().database_url)
    try:
        await reset(store)
    finally:
        await store.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
