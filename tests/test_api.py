"""HTTP surface, driven through httpx's ASGI transport."""
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from marketplace.config import Settings
from marketplace.main import create_app
from marketplace.repositories import JobRepository
from marketplace.tables import Profile

MONTH = {"start": "2020-08-01T00:00:00", "end": "2020-08-31T23:59:59"}


def caller(profile_id):
    return {"profile_id": str(profile_id)}


async def test_health(client):
    assert (await client.get("/health")).json() == {"ok": True}
    assert (await client.get("/health/db")).json() == {"db": 1}


async def test_own_contract(client):
    res = await client.get("/contracts/1", headers=caller(1))

    assert res.status_code == 200
    body = res.json()
    assert body["id"] == 1
    assert body["ClientId"] == 1
    assert body["ContractorId"] == 5


async def test_someone_elses_contract(client):
    res = await client.get("/contracts/7", headers=caller(1))

    assert res.status_code == 404
    assert res.json()["code"] == "not_found"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"profile_id": "abc"},
        {"profile_id": "999"},
        {"profile_id": "\u00b2".encode("latin-1")},
        {"profile_id": "0"},
        {"profile_id": "99999999999999999999999"},
    ],
)
async def test_unresolvable_caller(client, headers):
    res = await client.get("/contracts/1", headers=headers)

    assert res.status_code == 401
    assert res.json()["code"] == "unauthenticated"


async def test_list_contracts(client):
    res = await client.get("/contracts", headers=caller(6))

    assert res.status_code == 200
    assert [c["id"] for c in res.json()] == [2, 3, 8]
    assert all(c["status"] != "terminated" for c in res.json())


async def test_unpaid_jobs(client):
    res = await client.get("/jobs/unpaid", headers=caller(7))

    assert res.status_code == 200
    assert [(j["id"], j["ContractId"]) for j in res.json()] == [(4, 4), (5, 7)]


async def test_unpaid_jobs_need_a_caller(client):
    assert (await client.get("/jobs/unpaid")).status_code == 401


async def test_pay_then_pay_again(client, balance_of):
    res = await client.post("/jobs/2/pay", headers=caller(1))

    assert res.status_code == 200
    job = res.json()
    assert job["paid"] is True
    assert job["paymentDate"].startswith("2024-01-02T03:04:05")
    assert job["price"] == 201

    again = await client.post("/jobs/2/pay", headers=caller(1))
    assert again.status_code == 409
    assert again.json()["code"] == "already_paid"
    assert await balance_of(1) == Decimal("949")
    assert await balance_of(6) == Decimal("1415")


@pytest.mark.parametrize(
    "job_id, profile_id, status, code",
    [
        (5, 4, 406, "insufficient_funds"),
        (2, 2, 403, "forbidden"),
        (1, 1, 404, "not_found"),
        (999, 1, 404, "not_found"),
    ],
)
async def test_pay_rejections(client, job_id, profile_id, status, code):
    res = await client.post(f"/jobs/{job_id}/pay", headers=caller(profile_id))

    assert res.status_code == status
    assert res.json()["code"] == code


async def test_pay_store_failure_is_generic(monkeypatch, client):
    async def broken(self, job_id, paid_at):
        raise OperationalError("UPDATE jobs", {}, Exception("database is locked"))

    monkeypatch.setattr(JobRepository, "mark_paid", broken)

    res = await client.post("/jobs/2/pay", headers=caller(1))

    assert res.status_code == 500
    assert res.json() == {"detail": "Payment failed, nothing was changed", "code": "store_failure"}


async def test_deposit(client):
    res = await client.post("/balances/deposit/2", json={"amount": 100}, headers=caller(2))

    assert res.status_code == 200
    assert res.json()["balance"] == pytest.approx(331.11)
    assert res.json()["firstName"] == "Mr"


async def test_deposit_over_limit(client):
    res = await client.post("/balances/deposit/1", json={"amount": 1000}, headers=caller(1))

    assert res.status_code == 406
    assert res.json()["code"] == "limit_exceeded"


@pytest.mark.parametrize("body", [{"amount": 0}, {"amount": -5}, {}, {"amount": "lots"}])
async def test_deposit_validates_amount(client, body):
    res = await client.post("/balances/deposit/1", json=body, headers=caller(1))

    assert res.status_code == 422


async def test_deposit_to_contractor(client):
    res = await client.post("/balances/deposit/6", json={"amount": 10}, headers=caller(1))

    assert res.status_code == 404


async def test_deposit_needs_a_caller(client):
    res = await client.post("/balances/deposit/1", json={"amount": 10})

    assert res.status_code == 401


async def test_best_profession(client):
    res = await client.get("/admin/best-profession", params=MONTH)

    assert res.status_code == 200
    assert res.json() == {"profession": "Programmer", "paid": 2683}


async def test_best_profession_no_data(client):
    res = await client.get(
        "/admin/best-profession", params={"start": "2021-01-01T00:00:00", "end": "2021-02-01T00:00:00"}
    )

    assert res.status_code == 200
    assert res.json() == {"profession": None, "paid": 0}


async def test_best_clients(client):
    res = await client.get("/admin/best-client", params=MONTH)

    assert res.status_code == 200
    assert res.json() == [
        {"id": 4, "fullName": "Ash Kethcum", "paid": 2020},
        {"id": 2, "fullName": "Mr Robot", "paid": 442},
    ]


async def test_best_clients_limit(client):
    res = await client.get("/admin/best-client", params={**MONTH, "limit": 3})

    assert [c["id"] for c in res.json()] == [4, 2, 1]


@pytest.mark.parametrize(
    "path, params",
    [
        ("/admin/best-client", {**MONTH, "limit": 0}),
        ("/admin/best-client", {"start": "2020-09-01T00:00:00", "end": "2020-08-01T00:00:00"}),
        ("/admin/best-profession", {"start": "2020-08-01T00:00:00"}),
        ("/admin/best-profession", {"start": "yesterday", "end": "today"}),
    ],
)
async def test_report_parameters_are_validated(client, path, params):
    assert (await client.get(path, params=params)).status_code == 422


async def test_startup_creates_and_seeds(tmp_path):
    settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'fresh.sqlite3'}",
        create_schema=True,
        seed_data=True,
    )
    app = create_app(settings)

    async with app.router.lifespan_context(app):
        store = app.state.context.store
        async with store.session() as session:
            count = (await session.execute(select(func.count(Profile.id)))).scalar_one()
    assert count == 8


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/contracts/99999999999999999999999"),
        ("GET", "/contracts/0"),
        ("POST", "/jobs/99999999999999999999999/pay"),
        ("POST", "/balances/deposit/99999999999999999999999"),
    ],
)
async def test_out_of_range_ids_are_rejected(client, method, path):
    res = await client.request(method, path, json={"amount": 10}, headers=caller(1))

    assert res.status_code == 422
