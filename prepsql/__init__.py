"""prepSQL – parameterized PostgreSQL query assembly from field schemas.

Describe each model once, then build exactly the query a request needs.

Public API
----------
``postgresql_builder``
    Compile requested fields (or a GraphQL selection) against a
    ``FieldSchema`` into a base query and WHERE fragments.  Relation fields
    become correlated ``jsonb_agg`` / ``to_jsonb`` subqueries.

``prepare_sql_query``
    Apply filters, grouping, ordering and pagination to a base query and
    count its rows with ``EXPLAIN ANALYZE`` (one database round trip).

``create_sql_query_for_builder``
    Join a builder result into one statement without paging or counting.

``remove_special_symbols``
    Strip characters unsafe for interpolation into SQL text.

Typical resolver::

    built = prepsql.postgresql_builder(FEEDBACK_FIELDS, info=info)
    prepared = await prepsql.prepare_sql_query(
        executor,
        built.main_query,
        built.where,
        meta=meta,
        sorting_table_name="f",
        filters=filters,
        filter_rules=FEEDBACK_FILTERS,
    )
    rows = await executor.query(prepared.prepared_query, prepared.bindings)
    return {"data": rows, "totalCount": prepared.total_count}

Re-exported types
-----------------
Schema models, result value objects, ``QuerySettings`` and all error
classes.
"""

from __future__ import annotations

from prepsql.compile.base import BuilderQuery, PreparedQuery, SortingClause, WhereClause
from prepsql.compile.builder import (
    FieldGraphBuilder,
    create_sql_query_for_builder,
    postgresql_builder,
)
from prepsql.compile.conditions import join_conditions
from prepsql.compile.filters import build_search_condition, compile_filters
from prepsql.compile.pagination import build_meta_query
from prepsql.config import QuerySettings
from prepsql.errors import (
    BindingConflictError,
    ConfigurationError,
    ExecutionError,
    PrepSQLError,
    UnknownFilterError,
    ValidationError,
)
from prepsql.execute.base import QueryExecutor
from prepsql.execute.count import count_records
from prepsql.pipeline import QueryFinisher, prepare_sql_query
from prepsql.sanitize import remove_special_symbols
from prepsql.schema import (
    ColumnField,
    ConditionFragment,
    FieldSchema,
    FilterRule,
    MetaParams,
    RelationField,
    RequestedFields,
)
from prepsql.selection import (
    SelectedField,
    get_fields_from_graphql,
    get_related_fields_from_graphql,
)

__all__ = [
    # Core pipeline
    "postgresql_builder",
    "prepare_sql_query",
    "create_sql_query_for_builder",
    "remove_special_symbols",
    # Building blocks
    "FieldGraphBuilder",
    "QueryFinisher",
    "build_meta_query",
    "build_search_condition",
    "compile_filters",
    "count_records",
    "join_conditions",
    # GraphQL selection
    "SelectedField",
    "get_fields_from_graphql",
    "get_related_fields_from_graphql",
    # Schema types
    "ColumnField",
    "ConditionFragment",
    "FieldSchema",
    "FilterRule",
    "MetaParams",
    "RelationField",
    "RequestedFields",
    # Results
    "BuilderQuery",
    "PreparedQuery",
    "SortingClause",
    "WhereClause",
    # Configuration and drivers
    "QueryExecutor",
    "QuerySettings",
    # Errors
    "PrepSQLError",
    "ConfigurationError",
    "UnknownFilterError",
    "BindingConflictError",
    "ValidationError",
    "ExecutionError",
]
