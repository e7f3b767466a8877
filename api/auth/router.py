"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core import db

from . import schemas, service

router = APIRouter()


@router.post("/auth/token")
async def token(
    request: schemas.TokenRequest,
    database: db.Database = Depends(db.get_database),
) -> schemas.TokenResponse:
    return await service.login(database, request)


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: schemas.RegisterRequest,
    database: db.Database = Depends(db.get_database),
) -> schemas.TokenResponse:
    return await service.register(database, request)
