"""Field schema → SQL compilation.

``FieldGraphBuilder`` walks the requested fields of a model against its
:class:`~prepsql.schema.fields.FieldSchema` and collects SELECT expressions,
JOIN clauses and WHERE fragments.  Relation fields are compiled by recursing
into the related schema; the related query is wrapped in a correlated JSON
subquery so that a list of parents and all their children come back from a
single statement (no N+1 round trips)::

    (SELECT jsonb_agg(author_alias) FROM (SELECT … WHERE (u.id = f.author_id)) AS author_alias) AS author

The result is a :class:`~prepsql.compile.base.BuilderQuery` ready for
:func:`~prepsql.pipeline.prepare_sql_query` or
:func:`create_sql_query_for_builder`.

Binding conflicts
-----------------
Bindings are collected into one mapping keyed by placeholder name.  When two
requested fields bind the same placeholder to different values the last one
wins.  Pass ``strict_bindings=True`` to raise
:class:`~prepsql.errors.BindingConflictError` instead.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pydantic

from prepsql.compile.base import BuilderQuery, PreparedQuery
from prepsql.compile.conditions import join_conditions
from prepsql.errors import BindingConflictError, ConfigurationError
from prepsql.schema.conditions import ConditionFragment
from prepsql.schema.fields import ColumnField, FieldSchema, RelationField
from prepsql.schema.requested import RequestedFields
from prepsql.selection import get_related_fields_from_graphql

logger = logging.getLogger(__name__)

_JSON_WRAPPERS = {"many": "jsonb_agg", "one": "to_jsonb"}


@dataclass
class _Accumulator:
    """Ordered, de-duplicated fragments collected for one model."""

    strict_bindings: bool = False
    select: dict[str, None] = field(default_factory=dict)
    join: dict[str, None] = field(default_factory=dict)
    where: dict[str, None] = field(default_factory=dict)
    bindings: dict[str, Any] = field(default_factory=dict)

    def add_column(self, spec: ColumnField) -> None:
        self.select.update(dict.fromkeys(spec.select))
        self.join.update(dict.fromkeys(spec.join))
        if spec.where is not None:
            if spec.where.query:
                self.where[spec.where.query] = None
            self.add_bindings(spec.where.binding or {})

    def add_bindings(self, binding: Mapping[str, Any]) -> None:
        for name, value in binding.items():
            if self.strict_bindings and name in self.bindings and self.bindings[name] != value:
                raise BindingConflictError(name, self.bindings[name], value)
            self.bindings[name] = value


class FieldGraphBuilder:
    """Compiles a requested field set against a field schema.

    Args:
        strict_bindings: Raise on conflicting placeholder values instead of
            letting the last one win.
    """

    def __init__(self, strict_bindings: bool = False) -> None:
        self._strict_bindings = strict_bindings

    def build(self, schema: FieldSchema, request: RequestedFields) -> BuilderQuery:
        """Compile ``request`` against ``schema``.

        Fields are emitted in the schema's declaration order.  Requested names
        the schema does not define are ignored, as are relation fields
        requested without any nested fields.

        Args:
            schema: The model's field schema.
            request: Requested fields, with nested requests for relations.

        Returns:
            :class:`BuilderQuery` with the SELECT/FROM/JOIN text and the WHERE
            fragments (bindings merged into one trailing fragment).

        Raises:
            ConfigurationError: If nothing selectable was requested.
            BindingConflictError: In strict mode, on conflicting bindings.
        """
        acc = _Accumulator(strict_bindings=self._strict_bindings)
        requested = set(request.fields)

        for name, spec in schema.fields.items():
            if name not in requested:
                continue
            if isinstance(spec, RelationField):
                nested = request.nested(name)
                if nested is not None:
                    self._add_relation(acc, name, spec, nested)
            else:
                acc.add_column(spec)

        if not acc.select:
            raise ConfigurationError(
                f"None of the requested fields select anything from '{schema.table_name}'.",
                details={"requested": request.fields, "available": schema.field_names},
            )

        main_query = f"SELECT {','.join(acc.select)} FROM {schema.table_name}"
        if acc.join:
            main_query += f" {' '.join(acc.join)}"

        where = [ConditionFragment(query=query) for query in acc.where]
        if acc.bindings:
            where.append(ConditionFragment(binding=acc.bindings))

        logger.debug("Compiled %s: %s", schema.table_name, main_query)
        return BuilderQuery(main_query=main_query, where=where)

    def _add_relation(
        self,
        acc: _Accumulator,
        name: str,
        spec: RelationField,
        nested: RequestedFields,
    ) -> None:
        related = self.build(spec.relation, nested)
        related.where.append(spec.where)
        subquery = create_sql_query_for_builder(related.main_query, related.where)

        alias = f"{name}_alias"
        wrapper = _JSON_WRAPPERS[spec.cardinality]
        acc.select[
            f"(SELECT {wrapper}({alias}) FROM ({subquery.prepared_query}) AS {alias}) AS {name}"
        ] = None
        acc.add_bindings(subquery.bindings)


def create_sql_query_for_builder(
    main_query: str,
    where: Sequence[ConditionFragment | Mapping[str, Any]] | None = None,
) -> PreparedQuery:
    """Combine a builder result into one executable statement.

    No grouping, ordering, pagination or counting is applied.

    Args:
        main_query: ``SELECT … FROM …`` text.
        where: Condition fragments appended as a WHERE clause.

    Returns:
        :class:`PreparedQuery` with ``total_count`` left as ``None``.
    """
    clause = join_conditions(where)
    return PreparedQuery(prepared_query=main_query + clause.where, bindings=clause.bindings)


def postgresql_builder(
    model_sql_fields: FieldSchema | Mapping[str, Any] | None,
    fields_data: Sequence[str] | RequestedFields | None = None,
    related_fields_data: Mapping[str, Any] | None = None,
    info: Any = None,
    *,
    strict_bindings: bool = False,
) -> BuilderQuery:
    """Build the base query and WHERE fragments for a model.

    Example::

        built = postgresql_builder(FEEDBACK_FIELDS, info=info)
        prepared = await prepare_sql_query(
            executor, built.main_query, built.where, meta=meta,
        )

    Args:
        model_sql_fields: The model's :class:`FieldSchema`, or the flat
            ``{"tableName": …, <field>: {…}}`` mapping.
        fields_data: Requested field names (or a complete
            :class:`RequestedFields`).
        related_fields_data: Relation field name → requested nested fields.
        info: GraphQL resolve info.  When given, the requested fields are
            read from its selection set and the two arguments above are
            ignored.
        strict_bindings: Raise on conflicting placeholder values.

    Returns:
        :class:`BuilderQuery`.

    Raises:
        ConfigurationError: If the schema is missing or malformed, neither
            fields nor ``info`` are given, or the request selects nothing.
    """
    if not model_sql_fields:
        raise ConfigurationError("Invalid input: a field schema is required.")
    if not fields_data and info is None:
        raise ConfigurationError("Invalid input: fields or GraphQL info are required.")

    schema = model_sql_fields
    if not isinstance(schema, FieldSchema):
        try:
            schema = FieldSchema.from_dict(schema)
        except pydantic.ValidationError as exc:
            raise ConfigurationError(f"Invalid field schema: {exc}") from exc

    if info is not None:
        request = get_related_fields_from_graphql(info)
    elif isinstance(fields_data, RequestedFields):
        request = fields_data
    else:
        try:
            request = RequestedFields(
                fields=list(fields_data),
                related_fields=related_fields_data or {},
            )
        except pydantic.ValidationError as exc:
            raise ConfigurationError(f"Invalid field request: {exc}") from exc

    return FieldGraphBuilder(strict_bindings=strict_bindings).build(schema, request)
