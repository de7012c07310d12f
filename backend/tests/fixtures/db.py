"""Stand-ins for SQLAlchemy results and session features."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import Mock


def scalars_result(items: list[Any]) -> Mock:
    """Result whose ``scalars().all()`` returns ``items``."""
    result = Mock()
    result.scalars.return_value.all.return_value = items
    return result


def scalar_result(value: Any) -> Mock:
    """Result whose ``scalar_one_or_none()`` and ``scalar()`` return ``value``."""
    result = Mock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


def rows_result(rows: list[Any]) -> Mock:
    result = Mock()
    result.all.return_value = rows
    return result


def rowcount_result(count: int) -> Mock:
    result = Mock()
    result.rowcount = count
    return result


@asynccontextmanager
async def fake_savepoint() -> AsyncIterator[None]:
    """Replacement for ``AsyncSession.begin_nested()``; exceptions propagate."""
    yield


def session_factory_for(db: Any):
    """``get_db_context`` replacement yielding ``db``."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[Any]:
        yield db

    return factory
