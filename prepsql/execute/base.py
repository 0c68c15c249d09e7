"""The database driver interface prepSQL talks to."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class QueryExecutor(Protocol):
    """Executes SQL with ``:name`` placeholders and returns rows as mappings.

    Connection management, transactions, timeouts and retries belong to the
    implementation, not to prepSQL.
    """

    async def query(
        self,
        sql: str,
        bindings: Mapping[str, Any] | None = None,
    ) -> Sequence[Mapping[str, Any]]:
        """Run ``sql`` with ``bindings`` and return every result row."""
        ...
