"""Pydantic models for WHERE-clause contributions and filter rules."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConditionFragment(BaseModel):
    """A unit of WHERE-clause contribution.

    ``query`` may be absent when the fragment exists only to carry bindings,
    e.g. a default constant referenced by a field's SELECT expression.

    Attributes:
        query: SQL boolean expression using ``:name`` placeholders.
        binding: Values for the placeholders the expression (or a sibling
            SELECT expression) needs.  ``None`` is treated as no bindings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: str | None = None
    binding: dict[str, Any] | None = Field(default_factory=dict)


class FilterRule(BaseModel):
    """Describes how a public filter value becomes a condition.

    The joins for ``table`` must already be present in the base query.

    Example rule table::

        FILTER_RULES = {
            "month": FilterRule(
                table="data.users",
                field="created_at",
                query="EXTRACT(MONTH FROM data.users.created_at) = :value",
            ),
            "role": FilterRule(
                table="data.user_roles",
                field="role",
                query=":value = ANY(data.user_roles.roles)",
            ),
            "active": FilterRule(table="data.users", field="active"),
        }

    Attributes:
        table: Schema-qualified table (or alias) holding the column.
        field: Column compared with ``=`` when ``query`` is not set.
        query: Optional template; every ``:value`` is replaced by a
            placeholder named after the filter key.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: str
    field: str
    query: str | None = None
