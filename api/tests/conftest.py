from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import pytest

T = TypeVar("T")

_UNSET = object()


def run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


class FakeDatabase:
    """
    Stands in for `core.db.Database`.

    Results are handed out in call order; an exception instance in the queue is
    raised instead of returned. Every statement is recorded in `calls`.
    """

    def __init__(self, *results: Any) -> None:
        self.results: list[Any] = list(results)
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def queue(self, *results: Any) -> "FakeDatabase":
        self.results.extend(results)
        return self

    def _next(self, default: Any) -> Any:
        result = self.results.pop(0) if self.results else _UNSET
        if result is _UNSET:
            return default
        if isinstance(result, BaseException):
            raise result
        return result

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append((sql, args))
        return self._next(None)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append((sql, args))
        return self._next([])

    async def execute(self, sql: str, *args: Any) -> None:
        self.calls.append((sql, args))
        self._next(None)

    def sql(self, index: int = -1) -> str:
        return " ".join(self.calls[index][0].split())

    def args(self, index: int = -1) -> tuple[Any, ...]:
        return self.calls[index][1]


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BCRYPT_WORK_FACTOR", "4")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
