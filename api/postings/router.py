"""
Posting API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, status

from auth import dependencies as auth_dependencies
from auth import policy
from core import db

from . import repository, schemas

router = APIRouter()


@router.post("/postings", status_code=status.HTTP_201_CREATED)
async def create_posting(
    request: schemas.PostingCreate,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.CREATE_POSTING)
    posting = await repository.create(database, request.model_dump(by_alias=True))
    return {"posting": posting}


@router.get("/postings")
async def list_postings(
    title: str | None = Query(default=None, min_length=1, max_length=200),
    min_salary: int | None = Query(default=None, ge=0, alias="minSalary"),
    has_equity: bool | None = Query(default=None, alias="hasEquity"),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.LIST_POSTINGS)
    postings = await repository.find_all(
        database,
        {"title": title, "minSalary": min_salary, "hasEquity": has_equity},
    )
    return {"postings": postings}


@router.get("/postings/{posting_id}")
async def get_posting(
    posting_id: int = Path(..., ge=1, le=schemas.MAX_POSTING_ID),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.READ_POSTING)
    return {"posting": await repository.get(database, posting_id)}


@router.patch("/postings/{posting_id}")
async def update_posting(
    request: schemas.PostingUpdate,
    posting_id: int = Path(..., ge=1, le=schemas.MAX_POSTING_ID),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.UPDATE_POSTING)
    posting = await repository.update(
        database,
        posting_id,
        request.model_dump(by_alias=True, exclude_unset=True),
    )
    return {"posting": posting}


@router.delete("/postings/{posting_id}")
async def delete_posting(
    posting_id: int = Path(..., ge=1, le=schemas.MAX_POSTING_ID),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.DELETE_POSTING)
    await repository.remove(database, posting_id)
    return {"deleted": posting_id}
