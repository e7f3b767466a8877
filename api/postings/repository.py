"""
Posting persistence (raw SQL).
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from core.db import Database
from core.errors import DuplicateResourceError, NotFoundError
from core.filters import compile_filters
from core.sql import ColumnMap, sql_for_partial_update

logger = logging.getLogger(__name__)

COLUMNS = ColumnMap(
    fields=("id", "title", "salary", "equity", "organizationHandle"),
    renames={"organizationHandle": "organization_handle"},
    read_only=frozenset({"id", "organizationHandle"}),
)

# Shape used when postings are nested under their organization.
SUMMARY_FIELDS = ("id", "title", "salary", "equity")


async def create(database: Database, data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a posting and return it.

    data should be { title, salary, equity, organizationHandle }.
    The same title may not appear twice for one organization.
    """
    title = data["title"]
    organization_handle = data["organizationHandle"]

    existing = await database.fetch_one(
        """
        SELECT id
        FROM postings
        WHERE title = $1
          AND organization_handle = $2
        """,
        title,
        organization_handle,
    )
    if existing is not None:
        raise DuplicateResourceError(f"Duplicate posting: {title}")

    organization = await database.fetch_one(
        "SELECT handle FROM organizations WHERE handle = $1",
        organization_handle,
    )
    if organization is None:
        raise NotFoundError(f"No organization: {organization_handle}")

    try:
        row = await database.fetch_one(
            f"""
            INSERT INTO postings (title, salary, equity, organization_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {COLUMNS.select_list()}
            """,
            title,
            data.get("salary"),
            data.get("equity"),
            organization_handle,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateResourceError(f"Duplicate posting: {title}") from exc
    except asyncpg.ForeignKeyViolationError as exc:
        raise NotFoundError(f"No organization: {organization_handle}") from exc

    if row is None:
        raise RuntimeError("Failed to create posting.")
    logger.info("posting_created id=%s organization=%s", row["id"], organization_handle)
    return row


async def find_all(database: Database, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    """
    List postings ordered by title.

    Filters (all optional): title (case-insensitive substring), minSalary,
    hasEquity (only postings with non-zero equity when true).
    """
    where = compile_filters(filters, "posting")
    return await database.fetch_all(
        f"SELECT {COLUMNS.select_list()} FROM postings{where.where()} ORDER BY title",
        *where.values,
    )


async def find_by_organization(database: Database, organization_handle: str) -> list[dict[str, Any]]:
    return await database.fetch_all(
        f"""
        SELECT {COLUMNS.select_list(only=SUMMARY_FIELDS)}
        FROM postings
        WHERE organization_handle = $1
        ORDER BY id
        """,
        organization_handle,
    )


async def get(database: Database, posting_id: int) -> dict[str, Any]:
    row = await database.fetch_one(
        f"""
        SELECT {COLUMNS.select_list()}
        FROM postings
        WHERE id = $1
        """,
        posting_id,
    )
    if row is None:
        raise NotFoundError(f"No posting: {posting_id}")
    return row


async def update(database: Database, posting_id: int, data: dict[str, Any]) -> dict[str, Any]:
    set_clause = sql_for_partial_update(data, COLUMNS)
    try:
        row = await database.fetch_one(
            f"""
            UPDATE postings
            SET {set_clause.text}
            WHERE id = {set_clause.next_placeholder()}
            RETURNING {COLUMNS.select_list()}
            """,
            *set_clause.values,
            posting_id,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateResourceError(f"Duplicate posting: {data.get('title')}") from exc

    if row is None:
        raise NotFoundError(f"No posting: {posting_id}")
    return row


async def remove(database: Database, posting_id: int) -> None:
    row = await database.fetch_one(
        """
        DELETE FROM postings
        WHERE id = $1
        RETURNING id
        """,
        posting_id,
    )
    if row is None:
        raise NotFoundError(f"No posting: {posting_id}")
    logger.info("posting_deleted id=%s", posting_id)
