from __future__ import annotations

import asyncpg
import pytest
from fastapi.testclient import TestClient

from auth import security
from conftest import FakeDatabase
from core import db
from main import app


def _auth(username: str, *, is_admin: bool = False) -> dict[str, str]:
    token = security.build_access_token(username=username, is_admin=is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def fake_database() -> FakeDatabase:
    fake = FakeDatabase()
    app.dependency_overrides[db.get_database] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(fake_database: FakeDatabase) -> TestClient:
    # No context manager: the lifespan (real pool) is not started.
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# organizations


ORGANIZATION = {
    "handle": "new",
    "name": "New",
    "description": "DescNew",
    "numEmployees": 10,
    "logoUrl": "http://new.img",
}


def test_create_organization_as_admin(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue(None, dict(ORGANIZATION))
    response = client.post("/organizations", json=ORGANIZATION, headers=_auth("admin", is_admin=True))
    assert response.status_code == 201
    assert response.json() == {"organization": ORGANIZATION}


def test_create_organization_requires_admin(client: TestClient, fake_database: FakeDatabase) -> None:
    assert client.post("/organizations", json=ORGANIZATION).status_code == 401
    assert client.post("/organizations", json=ORGANIZATION, headers=_auth("u1")).status_code == 403
    assert fake_database.calls == []


def test_create_duplicate_organization(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue({"handle": "new"})
    response = client.post("/organizations", json=ORGANIZATION, headers=_auth("admin", is_admin=True))
    assert response.status_code == 409
    assert response.json() == {"detail": "Duplicate organization: new"}


def test_create_organization_rejects_unknown_fields(client: TestClient) -> None:
    response = client.post(
        "/organizations",
        json={**ORGANIZATION, "founded": 1999},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 422


def test_list_organizations_anonymously_with_filters(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue([{"handle": "c2"}])
    response = client.get("/organizations", params={"name": "c", "minEmployees": 2})
    assert response.status_code == 200
    assert response.json() == {"organizations": [{"handle": "c2"}]}
    assert "WHERE name ILIKE $1 AND num_employees >= $2" in fake_database.sql()
    assert fake_database.args() == ("%c%", 2)


def test_list_organizations_bad_range(client: TestClient, fake_database: FakeDatabase) -> None:
    response = client.get("/organizations", params={"minEmployees": 3, "maxEmployees": 2})
    assert response.status_code == 400
    assert fake_database.calls == []


def test_get_missing_organization(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue(None)
    response = client.get("/organizations/nope")
    assert response.status_code == 404
    assert response.json() == {"detail": "No organization: nope"}


def test_update_organization(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue({**ORGANIZATION, "name": "New-new"})
    response = client.patch(
        "/organizations/new",
        json={"name": "New-new"},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 200
    assert response.json()["organization"]["name"] == "New-new"
    assert fake_database.args() == ("New-new", "new")


def test_update_organization_errors(client: TestClient, fake_database: FakeDatabase) -> None:
    admin = _auth("admin", is_admin=True)
    assert client.patch("/organizations/new", json={}, headers=admin).status_code == 400
    assert client.patch("/organizations/new", json={"handle": "x"}, headers=admin).status_code == 422
    assert client.patch("/organizations/new", json={"name": None}, headers=admin).status_code == 422
    assert client.patch("/organizations/new", json={"name": "x"}).status_code == 401

    fake_database.queue(None)
    assert client.patch("/organizations/nope", json={"name": "x"}, headers=admin).status_code == 404


def test_update_organization_to_taken_name(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue(asyncpg.UniqueViolationError("duplicate key"))
    response = client.patch(
        "/organizations/c1",
        json={"name": "Taken"},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 409
    assert response.json() == {"detail": "Duplicate organization name: Taken"}


def test_create_organization_rejects_uppercase_handle(client: TestClient, fake_database: FakeDatabase) -> None:
    response = client.post(
        "/organizations",
        json={**ORGANIZATION, "handle": "ACME"},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 422
    assert fake_database.calls == []


def test_delete_organization(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue({"handle": "c1"})
    response = client.delete("/organizations/c1", headers=_auth("admin", is_admin=True))
    assert response.status_code == 200
    assert response.json() == {"deleted": "c1"}
    assert client.delete("/organizations/c1", headers=_auth("u1")).status_code == 403


# postings


def test_list_postings_by_min_salary(client: TestClient, fake_database: FakeDatabase) -> None:
    rows = [{"id": 3, "title": "J3", "salary": 300000, "equity": None, "organizationHandle": "c1"}]
    fake_database.queue(rows)
    response = client.get("/postings", params={"minSalary": 300000, "hasEquity": "false"})
    assert response.status_code == 200
    assert response.json() == {"postings": rows}
    assert fake_database.sql().endswith("WHERE salary >= $1 ORDER BY title")
    assert fake_database.args() == (300000,)


def test_create_posting_for_missing_organization(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue(None, None)
    response = client.post(
        "/postings",
        json={"title": "J", "salary": 1, "equity": "0.1", "organizationHandle": "nope"},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 404


def test_get_posting_rejects_non_integer_id(client: TestClient) -> None:
    assert client.get("/postings/abc").status_code == 422


def test_posting_ids_outside_int4_are_rejected(client: TestClient, fake_database: FakeDatabase) -> None:
    admin = _auth("admin", is_admin=True)
    assert client.get("/postings/0").status_code == 422
    assert client.get("/postings/2147483648").status_code == 422
    assert client.patch("/postings/2147483648", json={"title": "x"}, headers=admin).status_code == 422
    assert client.delete("/postings/-1", headers=admin).status_code == 422
    assert client.post("/accounts/u1/postings/2147483648", headers=admin).status_code == 422
    assert fake_database.calls == []


# accounts


def test_get_account_self_other_admin(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue({"username": "u1"}, [{"posting_id": 2}])
    response = client.get("/accounts/u1", headers=_auth("u1"))
    assert response.status_code == 200
    assert response.json() == {"account": {"username": "u1", "applications": [2]}}

    assert client.get("/accounts/u1", headers=_auth("u2")).status_code == 403
    assert client.get("/accounts/u1").status_code == 401

    fake_database.queue({"username": "u1"}, [])
    assert client.get("/accounts/u1", headers=_auth("admin", is_admin=True)).status_code == 200


def test_list_accounts_is_admin_only(client: TestClient, fake_database: FakeDatabase) -> None:
    assert client.get("/accounts", headers=_auth("u1")).status_code == 403
    fake_database.queue([{"username": "u1"}])
    response = client.get("/accounts", headers=_auth("admin", is_admin=True))
    assert response.status_code == 200
    assert response.json() == {"accounts": [{"username": "u1"}]}


def test_create_account_returns_token(client: TestClient, fake_database: FakeDatabase) -> None:
    stored = {"username": "u-new", "firstName": "F", "lastName": "L", "email": "new@email.com", "isAdmin": True}
    fake_database.queue(None, stored)
    response = client.post(
        "/accounts",
        json={**stored, "password": "password-new"},
        headers=_auth("admin", is_admin=True),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["account"] == stored
    payload = security.decode_access_token(body["token"])
    assert payload["sub"] == "u-new"
    assert payload["isAdmin"] is True


def test_update_own_account_cannot_grant_admin(client: TestClient) -> None:
    response = client.patch("/accounts/u1", json={"isAdmin": True}, headers=_auth("u1"))
    assert response.status_code == 422


def test_delete_other_account_forbidden(client: TestClient, fake_database: FakeDatabase) -> None:
    assert client.delete("/accounts/u2", headers=_auth("u1")).status_code == 403
    fake_database.queue({"username": "u1"})
    assert client.delete("/accounts/u1", headers=_auth("u1")).json() == {"deleted": "u1"}


def test_apply_to_posting(client: TestClient, fake_database: FakeDatabase) -> None:
    fake_database.queue({"username": "u1"}, {"id": 3}, {"posting_id": 3})
    response = client.post("/accounts/u1/postings/3", headers=_auth("u1"))
    assert response.status_code == 201
    assert response.json() == {"applied": 3}

    assert client.post("/accounts/u2/postings/3", headers=_auth("u1")).status_code == 403

    fake_database.queue({"username": "u1"}, None)
    response = client.post("/accounts/u1/postings/999", headers=_auth("admin", is_admin=True))
    assert response.status_code == 404
    assert response.json() == {"detail": "No posting: 999"}


# auth


def test_login_and_register(client: TestClient, fake_database: FakeDatabase) -> None:
    row = {"username": "u1", "isAdmin": False, "password": security.hash_password("password1")}
    fake_database.queue(row)
    response = client.post("/auth/token", json={"username": "u1", "password": "password1"})
    assert response.status_code == 200
    assert security.decode_access_token(response.json()["token"])["sub"] == "u1"

    fake_database.queue(None)
    response = client.post("/auth/token", json={"username": "nope", "password": "password1"})
    assert response.status_code == 401

    stored = {"username": "new", "firstName": "F", "lastName": "L", "email": "new@email.com", "isAdmin": False}
    fake_database.queue(None, stored)
    response = client.post(
        "/auth/register",
        json={"username": "new", "password": "password", "firstName": "F", "lastName": "L", "email": "new@email.com"},
    )
    assert response.status_code == 201
    assert security.decode_access_token(response.json()["token"])["isAdmin"] is False
    # Registration always inserts a non-admin.
    assert fake_database.args()[-1] is False


def test_bad_tokens_are_rejected(client: TestClient) -> None:
    assert client.get("/organizations", headers={"Authorization": "Bearer junk"}).status_code == 401
    assert client.get("/organizations", headers={"Authorization": "Token abc"}).status_code == 401


def test_token_request_rejects_unknown_fields(client: TestClient, fake_database: FakeDatabase) -> None:
    response = client.post("/auth/token", json={"username": "u1", "password": "password1", "isAdmin": True})
    assert response.status_code == 422
    assert fake_database.calls == []


def test_emails_need_a_local_part(client: TestClient, fake_database: FakeDatabase) -> None:
    account = {"username": "new", "password": "password", "firstName": "F", "lastName": "L", "email": "abcdefg"}
    assert client.post("/auth/register", json=account).status_code == 422
    assert client.post("/accounts", json=account, headers=_auth("admin", is_admin=True)).status_code == 422
    assert client.patch("/accounts/u1", json={"email": "abcdefg"}, headers=_auth("u1")).status_code == 422
    assert client.patch("/accounts/u1", json={"email": "@email.com"}, headers=_auth("u1")).status_code == 422
    assert fake_database.calls == []
