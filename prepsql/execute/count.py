"""Row counting through ``EXPLAIN ANALYZE``.

Instead of writing a second ``COUNT(*)`` statement, the filtered (but not yet
paginated) query is executed under ``EXPLAIN (ANALYZE, TIMING OFF)`` and the
executed row count of the outermost plan node is read from the plan text::

    Seq Scan on articles  (cost=0.00..1.05 rows=5 width=36) (actual rows=3 loops=1)

PostgreSQL 18 prints fractional counts (``actual rows=3.00``), and with
timing left on the annotation reads ``actual time=0.010..0.012 rows=3``; all
of these forms are accepted.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from prepsql.config import DEFAULT_SETTINGS, QuerySettings
from prepsql.errors import ExecutionError
from prepsql.execute.base import QueryExecutor

logger = logging.getLogger(__name__)

_ACTUAL_ROWS = re.compile(r"actual (?:time=\S+ )?rows=(\d+)(?:\.\d+)?")


def explain_statement(query: str, settings: QuerySettings | None = None) -> str:
    """Wrap ``query`` in the configured ``EXPLAIN (...)`` statement."""
    settings = settings or DEFAULT_SETTINGS
    return f"EXPLAIN ({settings.explain_options}) {query}"


def parse_actual_rows(plan: str) -> int | None:
    """Return the first ``actual rows=N`` value in ``plan``, or ``None``."""
    match = _ACTUAL_ROWS.search(plan)
    if match is None:
        return None
    return int(match.group(1))


async def count_records(
    executor: QueryExecutor,
    query: str,
    bindings: Mapping[str, Any] | None = None,
    settings: QuerySettings | None = None,
) -> int:
    """Count the rows ``query`` returns by running it under EXPLAIN ANALYZE.

    The query is physically executed once here; fetching the page executes
    it again.

    Args:
        executor: Database driver.
        query: Fully filtered and grouped query, without ORDER BY/OFFSET/LIMIT.
        bindings: Values for the query's placeholders.
        settings: Supplies the EXPLAIN options and the plan column name.

    Returns:
        Number of rows the query produced.

    Raises:
        ExecutionError: If the plan has no readable ``actual rows`` annotation.
    """
    settings = settings or DEFAULT_SETTINGS
    statement = explain_statement(query, settings)
    rows = await executor.query(statement, bindings or {})

    if not rows:
        raise ExecutionError("EXPLAIN returned no plan rows.", sql=statement)
    plan = rows[0].get(settings.plan_column)
    if not isinstance(plan, str):
        raise ExecutionError(
            f"EXPLAIN result has no '{settings.plan_column}' column.", sql=statement
        )

    count = parse_actual_rows(plan)
    if count is None:
        raise ExecutionError(
            f"Cannot read the actual row count from plan line: {plan!r}", sql=statement
        )

    logger.debug("Counted %d rows for: %s", count, query)
    return count
