"""prepSQL execution layer: the driver interface and row counting.

The SQLAlchemy adapter lives in :mod:`prepsql.execute.sqlalchemy` and is not
imported here so that SQLAlchemy stays optional.
"""
from prepsql.execute.base import QueryExecutor
from prepsql.execute.count import count_records, explain_statement, parse_actual_rows

__all__ = [
    "QueryExecutor",
    "count_records",
    "explain_statement",
    "parse_actual_rows",
]
