"""Value objects produced by the compilation layer.

Every object here is built per call and discarded afterwards; nothing is
cached across queries.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from prepsql.schema.conditions import ConditionFragment


@dataclass
class WhereClause:
    """Joined WHERE conditions.

    Attributes:
        where: ``" WHERE (a) AND (b)"``, ``" AND (a) AND (b)"`` or ``""``.
        bindings: Merged placeholder values of every fragment.
    """

    where: str
    bindings: dict[str, Any]


@dataclass
class SortingClause:
    """ORDER BY / OFFSET / LIMIT tail of a query.

    Attributes:
        sorting: ``" ORDER BY … OFFSET :offset LIMIT :perPage"``.
        bindings: ``{"perPage": …, "offset": …}``.
    """

    sorting: str
    bindings: dict[str, Any]


@dataclass
class BuilderQuery:
    """Output of the field-graph compiler.

    Attributes:
        main_query: ``SELECT <items> FROM <table> [<joins>]`` without WHERE.
        where: Condition fragments; bindings are merged into one trailing
            binding-only fragment.
    """

    main_query: str
    where: list[ConditionFragment] = field(default_factory=list)

    @property
    def bindings(self) -> dict[str, Any]:
        """Returns every binding carried by :attr:`where`."""
        merged: dict[str, Any] = {}
        for fragment in self.where:
            merged.update(fragment.binding or {})
        return merged


@dataclass
class PreparedQuery:
    """A finished, executable query.

    Attributes:
        prepared_query: SQL text with ``:name`` placeholders.
        bindings: Values for every placeholder.
        total_count: Rows matched before pagination, or ``None`` when
            counting was skipped.
    """

    prepared_query: str
    bindings: dict[str, Any]
    total_count: int | None = None

    def merge_runtime_params(self, runtime: dict[str, Any]) -> dict[str, Any]:
        """Return a merged param dict ready for query execution.

        Args:
            runtime: Extra values (e.g. ``{"tenantId": 7}``) referenced by
                placeholders the caller wrote into the base query.

        Returns:
            A single dict combining prepared bindings and runtime params.
        """
        return {**self.bindings, **runtime}
