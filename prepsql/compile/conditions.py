"""Joining condition fragments into one WHERE clause."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pydantic

from prepsql.compile.base import WhereClause
from prepsql.errors import ConfigurationError
from prepsql.schema.conditions import ConditionFragment


def join_conditions(
    conditions: Iterable[ConditionFragment | Mapping[str, Any] | None] | None,
    do_not_add_where: bool = False,
) -> WhereClause:
    """AND together every fragment's query and merge every binding.

    Each query is parenthesized on its own.  Bindings are merged in list
    order; a later fragment overrides an earlier binding of the same name.

    Args:
        conditions: Fragments (or plain ``{"query", "binding"}`` mappings).
            ``None`` entries are skipped.
        do_not_add_where: Prefix with ``AND`` instead of ``WHERE`` because the
            base query already has its own WHERE.

    Returns:
        :class:`WhereClause`; ``where`` is ``""`` when no fragment has a query.

    Raises:
        ConfigurationError: If a plain mapping is not a valid fragment.
    """
    queries: list[str] = []
    bindings: dict[str, Any] = {}

    for fragment in conditions or ():
        if fragment is None:
            continue
        if not isinstance(fragment, ConditionFragment):
            fragment = _to_fragment(fragment)
        if fragment.query:
            queries.append(f"({fragment.query})")
        bindings.update(fragment.binding or {})

    where = ""
    if queries:
        keyword = "AND" if do_not_add_where else "WHERE"
        where = f" {keyword} {' AND '.join(queries)}"
    return WhereClause(where=where, bindings=bindings)


def _to_fragment(fragment: Mapping[str, Any]) -> ConditionFragment:
    try:
        return ConditionFragment.model_validate(fragment)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            f"Invalid condition fragment: {exc}", details={"fragment": fragment}
        ) from exc
