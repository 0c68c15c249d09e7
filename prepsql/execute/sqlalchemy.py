"""SQLAlchemy adapter for :class:`~prepsql.execute.base.QueryExecutor`.

Install the optional dependency before using this module::

    pip install "prepsql[sqlalchemy]"

Example::

    from sqlalchemy.ext.asyncio import create_async_engine
    from prepsql.execute.sqlalchemy import SQLAlchemyExecutor

    engine = create_async_engine("postgresql+psycopg://app@localhost/app")
    async with engine.connect() as conn:
        executor = SQLAlchemyExecutor(conn)
        prepared = await prepare_sql_query(executor, built.main_query, built.where)
        rows = await executor.query(prepared.prepared_query, prepared.bindings)

``sqlalchemy.text`` binds ``:name`` placeholders natively, so prepared
queries are passed through unchanged.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession


class SQLAlchemyExecutor:
    """Runs prepared SQL on an ``AsyncConnection`` or ``AsyncSession``.

    Args:
        connection: An open SQLAlchemy async connection or session.  Its
            lifecycle stays with the caller.
    """

    def __init__(self, connection: AsyncConnection | AsyncSession) -> None:
        self._connection = connection

    async def query(
        self,
        sql: str,
        bindings: Mapping[str, Any] | None = None,
    ) -> Sequence[Mapping[str, Any]]:
        result = await self._connection.execute(text(sql), dict(bindings or {}))
        return [dict(row) for row in result.mappings().all()]
