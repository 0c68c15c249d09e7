"""Query finishing: filters → WHERE → GROUP BY → count → ORDER/OFFSET/LIMIT.

``QueryFinisher`` is the top-level orchestrator.  Each step needs the
previous one, so the order is fixed:

1. compile ``filters`` and append them to the base conditions;
2. join every condition into one WHERE (or AND) clause;
3. append the GROUP BY clause;
4. count the rows of the query as built so far, i.e. the whole filtered
   result rather than one page (one database round trip);
5. append ordering and pagination;
6. merge WHERE and pagination bindings.

Pagination placeholders (``offset``, ``perPage``) are reserved; WHERE
bindings must not use them.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from prepsql.compile.base import PreparedQuery
from prepsql.compile.conditions import join_conditions
from prepsql.compile.filters import compile_filters
from prepsql.compile.pagination import build_meta_query, validate_meta
from prepsql.config import DEFAULT_SETTINGS, QuerySettings
from prepsql.execute.base import QueryExecutor
from prepsql.execute.count import count_records
from prepsql.schema.conditions import ConditionFragment, FilterRule
from prepsql.schema.meta import MetaParams

logger = logging.getLogger(__name__)

Conditions = Sequence[ConditionFragment | Mapping[str, Any]]


class QueryFinisher:
    """Turns a base query plus conditions into a paginated, counted query.

    Stateless across calls; one instance can be shared by concurrent
    requests.

    Args:
        executor: Database driver used for the count.
        settings: Paging and EXPLAIN defaults.
    """

    def __init__(self, executor: QueryExecutor, settings: QuerySettings | None = None) -> None:
        self._executor = executor
        self._settings = settings or DEFAULT_SETTINGS

    async def prepare(
        self,
        main_query: str,
        where: Conditions | None = None,
        *,
        do_not_add_where: bool = False,
        group_by: str | None = None,
        meta: MetaParams | Mapping[str, Any] | None = None,
        order_raw: str | None = None,
        sorting_table_name: str | None = None,
        filters: Mapping[str, Any] | None = None,
        filter_rules: Mapping[str, FilterRule | Mapping[str, Any]] | None = None,
        count: bool = True,
    ) -> PreparedQuery:
        """Prepare ``main_query`` for execution.

        Args:
            main_query: Base ``SELECT … FROM … [JOIN …]`` statement.
            where: Base condition fragments.
            do_not_add_where: ``main_query`` already has a WHERE; conditions
                are appended with AND.
            group_by: Complete GROUP BY clause
                (``"GROUP BY data.users.address_id"``).
            meta: Paging/ordering request.
            order_raw: Complete ORDER BY clause overriding ``meta`` ordering.
            sorting_table_name: Table (with schema) for ``meta.order_by`` and
                the default ordering (``"data.users"``).
            filters: Public filter name → value.
            filter_rules: Filter name → :class:`FilterRule`.
            count: Run the EXPLAIN count.  When ``False`` no database call is
                made and ``total_count`` is ``None``.

        Returns:
            :class:`PreparedQuery`.

        Raises:
            UnknownFilterError: If a filter has no rule (before any DB call).
            ValidationError: If ``meta`` is invalid (before any DB call).
            ExecutionError: If the count cannot be read from the plan.
        """
        params = validate_meta(meta, order_raw, self._settings)
        conditions: list[Any] = list(where or [])
        if filters:
            conditions.extend(compile_filters(filters, filter_rules))

        clause = join_conditions(conditions, do_not_add_where)
        prepared_query = main_query + clause.where
        if group_by:
            prepared_query += f" {group_by}"

        total_count = None
        if count:
            total_count = await count_records(
                self._executor, prepared_query, clause.bindings, self._settings
            )

        sorting = build_meta_query(params, sorting_table_name, order_raw, self._settings)
        prepared_query += sorting.sorting

        logger.debug("Prepared query: %s", prepared_query)
        return PreparedQuery(
            prepared_query=prepared_query,
            bindings={**clause.bindings, **sorting.bindings},
            total_count=total_count,
        )


async def prepare_sql_query(
    executor: QueryExecutor,
    main_query: str,
    where: Conditions | None = None,
    *,
    do_not_add_where: bool = False,
    group_by: str | None = None,
    meta: MetaParams | Mapping[str, Any] | None = None,
    order_raw: str | None = None,
    sorting_table_name: str | None = None,
    filters: Mapping[str, Any] | None = None,
    filter_rules: Mapping[str, FilterRule | Mapping[str, Any]] | None = None,
    count: bool = True,
    settings: QuerySettings | None = None,
) -> PreparedQuery:
    """Prepare a query for execution; see :meth:`QueryFinisher.prepare`.

    Example::

        prepared = await prepare_sql_query(
            executor,
            "SELECT * FROM data.articles",
            [],
            sorting_table_name="data.articles",
            filters={"isPublished": True},
            filter_rules=ARTICLE_FILTERS,
        )
        rows = await executor.query(prepared.prepared_query, prepared.bindings)
    """
    return await QueryFinisher(executor, settings).prepare(
        main_query,
        where,
        do_not_add_where=do_not_add_where,
        group_by=group_by,
        meta=meta,
        order_raw=order_raw,
        sorting_table_name=sorting_table_name,
        filters=filters,
        filter_rules=filter_rules,
        count=count,
    )
