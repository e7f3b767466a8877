"""
Auth dependencies for FastAPI routes.

Routes are reachable without a token; they receive an anonymous `Actor` and
leave the allow/deny call to `auth.policy`.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, status

from . import security
from .policy import Actor


def _extract_bearer_token(authorization: str) -> str:
    parts = authorization.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


def actor_from_token(token: str) -> Actor:
    try:
        payload = security.decode_access_token(token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    return Actor(
        username=str(payload["sub"]).strip(),
        is_admin=payload.get("isAdmin") is True,
    )


async def get_actor(authorization: str | None = Header(default=None)) -> Actor:
    raw = (authorization or "").strip()
    if not raw:
        return Actor.anonymous()
    return actor_from_token(_extract_bearer_token(raw))
