"""
Shared fixtures.

Every test gets its own SQLite file under ``tmp_path`` loaded with the sample
marketplace from ``marketplace.seed``:

    profiles  1-4 clients      (Harry 1150, Mr Robot 231.11, John Snow 451.3, Ash 1.3)
              5-8 contractors  (Musician, Programmer x2, Fighter)
    contract  1 is terminated, 5 is new, the rest are in progress
    jobs      1-5 unpaid, 6-14 paid in August 2020
"""
from datetime import datetime
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio

from marketplace.config import Settings
from marketplace.context import AppContext
from marketplace.db import Store
from marketplace.ledger import BalanceLedger
from marketplace.main import create_app
from marketplace.seed import seed
from marketplace.tables import Job, Profile

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'marketplace.sqlite3'}",
        create_schema=False,
    )


@pytest_asyncio.fixture
async def store(settings):
    store = Store(settings.database_url)
    await store.create_all()
    await seed(store, only_if_empty=False)
    yield store
    await store.dispose()


@pytest.fixture
def ledger(store):
    return BalanceLedger(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def context(settings, store, ledger):
    return AppContext(settings=settings, store=store, ledger=ledger)


@pytest_asyncio.fixture
async def client(context):
    app = create_app(context=context)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def load_profile(store):
    async def _load(profile_id: int) -> Profile:
        async with store.session() as session:
            return await session.get(Profile, profile_id)

    return _load


@pytest.fixture
def load_job(store):
    async def _load(job_id: int) -> Job:
        async with store.session() as session:
            return await session.get(Job, job_id)

    return _load


@pytest.fixture
def balance_of(load_profile):
    async def _balance(profile_id: int) -> Decimal:
        return (await load_profile(profile_id)).balance

    return _balance
