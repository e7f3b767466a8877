"""
Organization API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from auth import policy
from core import db

from . import repository, schemas

router = APIRouter()


@router.post("/organizations", status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: schemas.OrganizationCreate,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.CREATE_ORGANIZATION)
    organization = await repository.create(database, request.model_dump(by_alias=True))
    return {"organization": organization}


@router.get("/organizations")
async def list_organizations(
    name: str | None = Query(default=None, min_length=1, max_length=200),
    min_employees: int | None = Query(default=None, ge=0, alias="minEmployees"),
    max_employees: int | None = Query(default=None, ge=0, alias="maxEmployees"),
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.LIST_ORGANIZATIONS)
    organizations = await repository.find_all(
        database,
        {"name": name, "minEmployees": min_employees, "maxEmployees": max_employees},
    )
    return {"organizations": organizations}


@router.get("/organizations/{handle}")
async def get_organization(
    handle: str,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.READ_ORGANIZATION)
    return {"organization": await repository.get(database, handle)}


@router.patch("/organizations/{handle}")
async def update_organization(
    handle: str,
    request: schemas.OrganizationUpdate,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.UPDATE_ORGANIZATION)
    organization = await repository.update(
        database,
        handle,
        request.model_dump(by_alias=True, exclude_unset=True),
    )
    return {"organization": organization}


@router.delete("/organizations/{handle}")
async def delete_organization(
    handle: str,
    actor: policy.Actor = Depends(auth_dependencies.get_actor),
    database: db.Database = Depends(db.get_database),
) -> dict:
    policy.enforce(actor, policy.Operation.DELETE_ORGANIZATION)
    await repository.remove(database, handle)
    return {"deleted": handle}
