"""Test fixtures: sample field schemas, filter rules and a fake executor."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from prepsql.schema import ColumnField, ConditionFragment, FieldSchema, FilterRule

_FIXTURES_DIR = Path(__file__).parent


def load_field_schemas() -> dict[str, FieldSchema]:
    """Load every sample model from fields.json.

    Relations name another model of the file; they are inlined before the
    flat layout is validated with :meth:`FieldSchema.from_dict`.
    """
    raw = json.loads((_FIXTURES_DIR / "fields.json").read_text())

    def resolve(model: str) -> dict[str, Any]:
        data = dict(raw[model])
        for name, spec in data.items():
            if isinstance(spec, dict) and isinstance(spec.get("relation"), str):
                data[name] = {**spec, "relation": resolve(spec["relation"])}
        return data

    return {model: FieldSchema.from_dict(resolve(model)) for model in raw}


def user_settings_fields(default_currency: str, default_language: str) -> FieldSchema:
    """User settings schema with application defaults injected as bindings."""
    return FieldSchema(
        table_name="data.users u",
        fields={
            "id": ColumnField(select=["u.id"]),
            "currency": ColumnField(
                select=["COALESCE(uset.currency, :defaultPlatformCurrency) AS currency"],
                join=["LEFT JOIN data.user_settings uset ON uset.user_id = u.id"],
                where=ConditionFragment(binding={"defaultPlatformCurrency": default_currency}),
            ),
            "locale": ColumnField(
                select=["COALESCE(uset.locale, :defaultLanguage) AS locale"],
                join=["LEFT JOIN data.user_settings uset ON uset.user_id = u.id"],
                where=ConditionFragment(binding={"defaultLanguage": default_language}),
            ),
        },
    )


ARTICLE_FILTERS: dict[str, FilterRule] = {
    "isPublished": FilterRule(table="data.articles", field="is_published"),
    "month": FilterRule(
        table="data.articles",
        field="created_at",
        query="EXTRACT(MONTH FROM data.articles.created_at) = :value",
    ),
    "year": FilterRule(
        table="data.articles",
        field="created_at",
        query="EXTRACT(YEAR FROM data.articles.created_at) = :value",
    ),
    "tag": FilterRule(
        table="data.articles",
        field="tags",
        query=":value = ANY(data.articles.tags) OR :value = data.articles.main_tag",
    ),
}


def plan_line(rows: int | str) -> str:
    """A realistic outermost plan node line reporting ``rows`` actual rows."""
    return f"Seq Scan on articles  (cost=0.00..18.10 rows=810 width=44) (actual rows={rows} loops=1)"


class FakeExecutor:
    """In-memory :class:`~prepsql.execute.base.QueryExecutor` recording every call.

    Args:
        rows: Result rows returned for every statement.
    """

    def __init__(self, rows: Sequence[Mapping[str, Any]] | None = None) -> None:
        self.rows = list(rows) if rows is not None else [{"QUERY PLAN": plan_line(3)}]
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def query(
        self,
        sql: str,
        bindings: Mapping[str, Any] | None = None,
    ) -> Sequence[Mapping[str, Any]]:
        self.calls.append((sql, dict(bindings or {})))
        return self.rows
