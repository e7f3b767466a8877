"""
Account API endpoints.

Admins manage every account; a signed-in user may read, change, delete and
apply with their own account only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from auth import dependencies as auth_dependencies
from auth import policy
from auth import service as auth_service
from core import db
from postings.schemas import MAX_POSTING_ID

from . import repository, schemas

router = APIRouter()


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: schemas.AccountCreate,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.CREATE_ACCOUNT)
    account = await repository.register(database, request.model_dump(by_alias=True))
    return {"account": account, "token": auth_service.token_for(account)}


@router.get("/accounts")
async def list_accounts(
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.LIST_ACCOUNTS)
    return {"accounts": await repository.find_all(database)}


@router.get("/accounts/{username}")
async def get_account(
    username: str,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.READ_ACCOUNT, target=username)
    return {"account": await repository.get(database, username)}


@router.patch("/accounts/{username}")
async def update_account(
    username: str,
    request: schemas.AccountUpdate,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.UPDATE_ACCOUNT, target=username)
    account = await repository.update(
        database,
        username,
        request.model_dump(by_alias=True, exclude_unset=True),
    )
    return {"account": account}


@router.delete("/accounts/{username}")
async def delete_account(
    username: str,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.DELETE_ACCOUNT, target=username)
    await repository.remove(database, username)
    return {"deleted": username}


@router.post("/accounts/{username}/postings/{posting_id}", status_code=status.HTTP_201_CREATED)
async def apply_to_posting(
    username: str,
    posting_id: int = Path(..., ge=1, le=MAX_POSTING_ID),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.APPLY_TO_POSTING, target=username)
    applied = await repository.apply_to_posting(database, username, posting_id)
    return {"applied": applied}
