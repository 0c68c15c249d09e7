"""Unit tests for EXPLAIN-based row counting."""

from __future__ import annotations

import asyncio

import pytest

from prepsql.config import QuerySettings
from prepsql.errors import ExecutionError
from prepsql.execute.count import count_records, explain_statement, parse_actual_rows
from tests.fixtures import FakeExecutor, plan_line


def _count(executor, query="SELECT * FROM data.articles", bindings=None, settings=None):
    return asyncio.run(count_records(executor, query, bindings, settings))


def test_explain_statement_wraps_query():
    assert explain_statement("SELECT 1") == "EXPLAIN (ANALYZE, TIMING OFF) SELECT 1"


def test_parse_actual_rows_reads_first_node():
    plan = "Hash Join  (cost=1.00..2.00 rows=10 width=8) (actual rows=7 loops=1)"
    assert parse_actual_rows(plan) == 7


def test_parse_actual_rows_accepts_fractional_counts():
    assert parse_actual_rows("Seq Scan on t  (actual rows=12.00 loops=1)") == 12


def test_parse_actual_rows_with_timing_on():
    plan = "Seq Scan on t  (cost=0.00..1.05 rows=5 width=36) (actual time=0.010..0.012 rows=3 loops=1)"
    assert parse_actual_rows(plan) == 3


def test_count_with_timing_enabled():
    executor = FakeExecutor(
        [{"QUERY PLAN": "Seq Scan on t  (cost=0.00..1.05 rows=5 width=36) (actual time=0.010..0.012 rows=3 loops=1)"}]
    )
    assert _count(executor, "SELECT 1", settings=QuerySettings(explain_options="ANALYZE")) == 3
    assert executor.calls[0][0] == "EXPLAIN (ANALYZE) SELECT 1"


def test_parse_actual_rows_ignores_estimates():
    assert parse_actual_rows("Seq Scan on t  (cost=0.00..1.00 rows=99 width=4)") is None


def test_count_executes_explain_with_bindings():
    executor = FakeExecutor([{"QUERY PLAN": plan_line(42)}])
    total = _count(executor, "SELECT * FROM t WHERE (a = :a)", {"a": 1})
    assert total == 42
    assert executor.calls == [("EXPLAIN (ANALYZE, TIMING OFF) SELECT * FROM t WHERE (a = :a)", {"a": 1})]


def test_count_uses_first_plan_row():
    executor = FakeExecutor(
        [
            {"QUERY PLAN": plan_line(5)},
            {"QUERY PLAN": "  ->  Seq Scan on inner  (actual rows=900 loops=1)"},
        ]
    )
    assert _count(executor) == 5


def test_zero_rows_is_a_valid_count():
    assert _count(FakeExecutor([{"QUERY PLAN": plan_line(0)}])) == 0


def test_custom_plan_column():
    settings = QuerySettings(plan_column="queryPlan")
    executor = FakeExecutor([{"queryPlan": plan_line(8)}])
    assert _count(executor, settings=settings) == 8


def test_missing_annotation_raises():
    executor = FakeExecutor([{"QUERY PLAN": "Seq Scan on t  (cost=0.00..1.00 rows=99 width=4)"}])
    with pytest.raises(ExecutionError) as exc_info:
        _count(executor)
    assert exc_info.value.sql.startswith("EXPLAIN")


def test_empty_result_raises():
    with pytest.raises(ExecutionError):
        _count(FakeExecutor([]))


def test_missing_plan_column_raises():
    with pytest.raises(ExecutionError):
        _count(FakeExecutor([{"plan": plan_line(3)}]))


def test_driver_errors_propagate():
    class BrokenExecutor:
        async def query(self, sql, bindings=None):
            raise ConnectionError("server closed the connection")

    with pytest.raises(ConnectionError):
        _count(BrokenExecutor())
