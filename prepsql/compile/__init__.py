"""prepSQL compilation layer: field schemas and request parameters → SQL text."""
from prepsql.compile.base import BuilderQuery, PreparedQuery, SortingClause, WhereClause
from prepsql.compile.builder import (
    FieldGraphBuilder,
    create_sql_query_for_builder,
    postgresql_builder,
)
from prepsql.compile.conditions import join_conditions
from prepsql.compile.filters import build_search_condition, compile_filters
from prepsql.compile.pagination import build_meta_query, validate_meta

__all__ = [
    "BuilderQuery",
    "FieldGraphBuilder",
    "PreparedQuery",
    "SortingClause",
    "WhereClause",
    "build_meta_query",
    "build_search_condition",
    "compile_filters",
    "create_sql_query_for_builder",
    "join_conditions",
    "postgresql_builder",
    "validate_meta",
]
