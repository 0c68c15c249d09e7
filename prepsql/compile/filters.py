"""Filter and search conditions.

``compile_filters`` turns caller-supplied ``{filter_name: value}`` pairs into
:class:`~prepsql.schema.conditions.ConditionFragment` objects using a
declarative :class:`~prepsql.schema.conditions.FilterRule` table.  Composition
with AND happens later, in :func:`~prepsql.compile.conditions.join_conditions`.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pydantic

from prepsql.errors import ConfigurationError, UnknownFilterError
from prepsql.sanitize import remove_special_symbols
from prepsql.schema.conditions import ConditionFragment, FilterRule

#: Placeholder used inside FilterRule.query templates.
VALUE_PLACEHOLDER = ":value"


def compile_filters(
    filters: Mapping[str, Any],
    rules: Mapping[str, FilterRule | Mapping[str, Any]] | None,
) -> list[ConditionFragment]:
    """Compile every filter into one condition fragment.

    Args:
        filters: Filter name → value, in the order the caller supplied them.
        rules: Filter name → rule.  Plain mappings are validated as
            :class:`FilterRule`.

    Returns:
        One fragment per filter, in ``filters`` order, each binding the
        filter's value under a placeholder named after its key.

    Raises:
        UnknownFilterError: If a filter key has no rule.
        ConfigurationError: If filters are given without a rule table, or a
            rule mapping is malformed.
    """
    if not filters:
        return []
    if rules is None:
        raise ConfigurationError(
            "Filters were supplied without a filter rule table.",
            details={"filters": list(filters)},
        )

    fragments: list[ConditionFragment] = []
    for key, value in filters.items():
        if key not in rules:
            raise UnknownFilterError(key, list(rules))
        rule = _to_rule(key, rules[key])
        if rule.query:
            query = rule.query.replace(VALUE_PLACEHOLDER, f":{key}")
        else:
            query = f"{rule.table}.{rule.field} = :{key}"
        fragments.append(ConditionFragment(query=query, binding={key: value}))
    return fragments


def build_search_condition(
    search: str | None,
    columns: Sequence[str],
    name: str = "search",
) -> ConditionFragment | None:
    """Build a case-insensitive substring match over ``columns``.

    The term is sanitized first, which also strips ``%`` so callers cannot
    inject their own wildcards.

    Args:
        search: Free-text term from the caller.
        columns: Qualified columns to match (``u.first_name``).
        name: Placeholder name for the pattern.

    Returns:
        ``(<col> ILIKE :search OR …)`` with the ``%term%`` binding, or ``None``
        when the term is empty after sanitizing.
    """
    if not search or not columns:
        return None
    term = remove_special_symbols(search)
    if not term:
        return None
    query = " OR ".join(f"{column} ILIKE :{name}" for column in columns)
    return ConditionFragment(query=query, binding={name: f"%{term}%"})


def _to_rule(key: str, rule: FilterRule | Mapping[str, Any]) -> FilterRule:
    if isinstance(rule, FilterRule):
        return rule
    try:
        return FilterRule.model_validate(rule)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            f"Invalid rule for filter '{key}': {exc}", details={"filter": key}
        ) from exc
