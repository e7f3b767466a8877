"""
Organization persistence (raw SQL).
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from core.db import Database
from core.errors import DuplicateResourceError, NotFoundError
from core.filters import compile_filters
from core.sql import ColumnMap, sql_for_partial_update
from postings import repository as postings_repository

logger = logging.getLogger(__name__)

COLUMNS = ColumnMap(
    fields=("handle", "name", "description", "numEmployees", "logoUrl"),
    renames={"numEmployees": "num_employees", "logoUrl": "logo_url"},
    read_only=frozenset({"handle"}),
)


async def create(database: Database, data: dict[str, Any]) -> dict[str, Any]:
    """
    Create an organization and return it.

    data should be { handle, name, description, numEmployees, logoUrl }.
    Raises DuplicateResourceError when the handle (or name) is taken.
    """
    handle = data["handle"]
    existing = await database.fetch_one(
        """
        SELECT handle
        FROM organizations
        WHERE handle = $1
        """,
        handle,
    )
    if existing is not None:
        raise DuplicateResourceError(f"Duplicate organization: {handle}")

    try:
        row = await database.fetch_one(
            f"""
            INSERT INTO organizations (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COLUMNS.select_list()}
            """,
            handle,
            data["name"],
            data.get("description"),
            data.get("numEmployees"),
            data.get("logoUrl"),
        )
    except asyncpg.UniqueViolationError as exc:
        # Lost a race with a concurrent create, or the name is taken.
        raise DuplicateResourceError(f"Duplicate organization: {handle}") from exc

    if row is None:
        raise RuntimeError("Failed to create organization.")
    logger.info("organization_created handle=%s", handle)
    return row


async def find_all(database: Database, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    """
    List organizations ordered by name.

    Filters (all optional): name (case-insensitive substring), minEmployees,
    maxEmployees.
    """
    where = compile_filters(filters, "organization")
    return await database.fetch_all(
        f"SELECT {COLUMNS.select_list()} FROM organizations{where.where()} ORDER BY name",
        *where.values,
    )


async def get(database: Database, handle: str) -> dict[str, Any]:
    """
    Return { handle, name, description, numEmployees, logoUrl, postings }.
    """
    organization = await database.fetch_one(
        f"""
        SELECT {COLUMNS.select_list()}
        FROM organizations
        WHERE handle = $1
        """,
        handle,
    )
    if organization is None:
        raise NotFoundError(f"No organization: {handle}")

    organization["postings"] = await postings_repository.find_by_organization(database, handle)
    return organization


async def update(database: Database, handle: str, data: dict[str, Any]) -> dict[str, Any]:
    """
    Partial update: only the provided fields change.
    """
    set_clause = sql_for_partial_update(data, COLUMNS)
    try:
        row = await database.fetch_one(
            f"""
            UPDATE organizations
            SET {set_clause.text}
            WHERE handle = {set_clause.next_placeholder()}
            RETURNING {COLUMNS.select_list()}
            """,
            *set_clause.values,
            handle,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateResourceError(f"Duplicate organization name: {data.get('name')}") from exc

    if row is None:
        raise NotFoundError(f"No organization: {handle}")
    return row


async def remove(database: Database, handle: str) -> None:
    row = await database.fetch_one(
        """
        DELETE FROM organizations
        WHERE handle = $1
        RETURNING handle
        """,
        handle,
    )
    if row is None:
        raise NotFoundError(f"No organization: {handle}")
    logger.info("organization_deleted handle=%s", handle)
