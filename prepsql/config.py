"""Runtime configuration for query preparation.

``QuerySettings`` is created once by the calling application and passed to
:class:`~prepsql.pipeline.QueryFinisher` (or straight to
:func:`~prepsql.pipeline.prepare_sql_query`).  It holds the paging defaults,
the fallback sort order, and the shape of the ``EXPLAIN`` statement used for
counting.

Schema-level constants (a default currency, a default locale, …) do not
belong here; inject them into the field schema where it is built::

    def user_fields(settings: AppSettings) -> FieldSchema:
        return FieldSchema(
            table_name="data.users u",
            fields={
                "currency": ColumnField(
                    select=["COALESCE(uset.currency, :defaultCurrency) AS currency"],
                    join=["LEFT JOIN data.user_settings uset ON uset.user_id = u.id"],
                    where=ConditionFragment(binding={"defaultCurrency": settings.currency}),
                ),
            },
        )
"""
from __future__ import annotations

from dataclasses import dataclass

#: Placeholder names reserved for pagination bindings.
PER_PAGE_PARAM = "perPage"
OFFSET_PARAM = "offset"


@dataclass(frozen=True)
class QuerySettings:
    """Defaults applied when a caller omits paging or ordering values.

    Attributes:
        default_per_page: Page size used when ``meta.per_page`` is missing or 0.
        default_offset: Offset used when ``meta.offset`` is missing.
        default_order: Direction used with ``meta.order_by`` when no
            ``meta.order`` is given.
        default_sort_columns: ``(column, direction)`` pairs ordering a query
            that names a sorting table but no ``order_by``.
        explain_options: Options placed in ``EXPLAIN (...)`` for counting.
        plan_column: Result column holding the textual plan.
    """

    default_per_page: int = 25
    default_offset: int = 0
    default_order: str = "ASC"
    default_sort_columns: tuple[tuple[str, str], ...] = (
        ("id", "DESC"),
        ("created_at", "DESC"),
    )
    explain_options: str = "ANALYZE, TIMING OFF"
    plan_column: str = "QUERY PLAN"


DEFAULT_SETTINGS = QuerySettings()
