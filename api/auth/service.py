"""
Auth business logic: turn credentials into access tokens.
"""

from __future__ import annotations

from typing import Any

from accounts import repository as accounts_repository
from core.db import Database

from . import schemas, security


def token_for(account: dict[str, Any]) -> str:
    return security.build_access_token(
        username=str(account["username"]),
        is_admin=bool(account.get("isAdmin", False)),
    )


async def login(database: Database, payload: schemas.TokenRequest) -> schemas.TokenResponse:
    account = await accounts_repository.authenticate(database, payload.username, payload.password)
    return schemas.TokenResponse(token=token_for(account))


async def register(database: Database, payload: schemas.RegisterRequest) -> schemas.TokenResponse:
    # Self-registration never grants admin.
    data = payload.model_dump(by_alias=True)
    data["isAdmin"] = False
    account = await accounts_repository.register(database, data)
    return schemas.TokenResponse(token=token_for(account))
