"""
Account persistence (raw SQL).

Passwords are stored as bcrypt hashes and never selected back out, except by
`authenticate`.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from auth import security
from core.db import Database
from core.errors import DuplicateResourceError, InvalidCredentialsError, NotFoundError
from core.filters import compile_filters
from core.sql import ColumnMap, sql_for_partial_update

logger = logging.getLogger(__name__)

COLUMNS = ColumnMap(
    fields=("username", "firstName", "lastName", "email", "isAdmin"),
    renames={"firstName": "first_name", "lastName": "last_name", "isAdmin": "is_admin"},
    read_only=frozenset({"username", "isAdmin"}),
    write_only=frozenset({"password"}),
)


async def authenticate(database: Database, username: str, password: str) -> dict[str, Any]:
    """
    Return the account when username/password match.

    Raises InvalidCredentialsError for an unknown user or a wrong password,
    without saying which.
    """
    row = await database.fetch_one(
        f"""
        SELECT {COLUMNS.select_list()}, password
        FROM accounts
        WHERE username = $1
        """,
        username,
    )
    if row is None:
        raise InvalidCredentialsError()

    password_hash = str(row.pop("password") or "")
    if not security.verify_password(password, password_hash):
        raise InvalidCredentialsError()
    return row


async def register(database: Database, data: dict[str, Any]) -> dict[str, Any]:
    """
    Create an account and return it (without password).

    data should be { username, password, firstName, lastName, email, isAdmin }.
    """
    username = data["username"]
    existing = await database.fetch_one(
        """
        SELECT username
        FROM accounts
        WHERE username = $1
        """,
        username,
    )
    if existing is not None:
        raise DuplicateResourceError(f"Duplicate username: {username}")

    password_hash = security.hash_password(data["password"])
    try:
        row = await database.fetch_one(
            f"""
            INSERT INTO accounts (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {COLUMNS.select_list()}
            """,
            username,
            password_hash,
            data["firstName"],
            data["lastName"],
            data["email"],
            bool(data.get("isAdmin", False)),
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateResourceError(f"Duplicate username: {username}") from exc

    if row is None:
        raise RuntimeError("Failed to create account.")
    logger.info("account_created username=%s is_admin=%s", username, row["isAdmin"])
    return row


async def find_all(database: Database, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    where = compile_filters(filters, "account")
    return await database.fetch_all(
        f"SELECT {COLUMNS.select_list()} FROM accounts{where.where()} ORDER BY username",
        *where.values,
    )


async def get(database: Database, username: str) -> dict[str, Any]:
    """
    Return { username, firstName, lastName, email, isAdmin, applications }
    where applications is the list of posting ids applied to.
    """
    account = await database.fetch_one(
        f"""
        SELECT {COLUMNS.select_list()}
        FROM accounts
        WHERE username = $1
        """,
        username,
    )
    if account is None:
        raise NotFoundError(f"No account: {username}")

    rows = await database.fetch_all(
        """
        SELECT posting_id
        FROM applications
        WHERE username = $1
        ORDER BY posting_id
        """,
        username,
    )
    account["applications"] = [int(r["posting_id"]) for r in rows]
    return account


async def update(database: Database, username: str, data: dict[str, Any]) -> dict[str, Any]:
    """
    Partial update. A new password is hashed before it is stored.
    """
    data = dict(data)
    if data.get("password") is not None:
        data["password"] = security.hash_password(data["password"])

    set_clause = sql_for_partial_update(data, COLUMNS)
    row = await database.fetch_one(
        f"""
        UPDATE accounts
        SET {set_clause.text}
        WHERE username = {set_clause.next_placeholder()}
        RETURNING {COLUMNS.select_list()}
        """,
        *set_clause.values,
        username,
    )
    if row is None:
        raise NotFoundError(f"No account: {username}")
    return row


async def remove(database: Database, username: str) -> None:
    row = await database.fetch_one(
        """
        DELETE FROM accounts
        WHERE username = $1
        RETURNING username
        """,
        username,
    )
    if row is None:
        raise NotFoundError(f"No account: {username}")
    logger.info("account_deleted username=%s", username)


async def apply_to_posting(database: Database, username: str, posting_id: int) -> int:
    """
    Record that `username` applied to `posting_id`; returns the posting id.

    Both sides are checked first so the error names the missing one.
    """
    account = await database.fetch_one(
        "SELECT username FROM accounts WHERE username = $1",
        username,
    )
    if account is None:
        raise NotFoundError(f"No account: {username}")

    posting = await database.fetch_one(
        "SELECT id FROM postings WHERE id = $1",
        posting_id,
    )
    if posting is None:
        raise NotFoundError(f"No posting: {posting_id}")

    try:
        row = await database.fetch_one(
            """
            INSERT INTO applications (username, posting_id)
            VALUES ($1, $2)
            RETURNING posting_id
            """,
            username,
            posting_id,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateResourceError(f"Already applied: {username} -> {posting_id}") from exc
    except asyncpg.ForeignKeyViolationError as exc:
        # One side was deleted between the checks and the insert.
        raise NotFoundError(f"No account or posting: {username} -> {posting_id}") from exc

    if row is None:
        raise RuntimeError("Failed to record application.")
    logger.info("application_created username=%s posting_id=%s", username, posting_id)
    return int(row["posting_id"])
