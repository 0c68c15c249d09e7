"""Pydantic models describing how a model's fields map to SQL.

A :class:`FieldSchema` is defined once per model at configuration time and
shared by every query against that model.  Each logical field is one of two
variants:

* :class:`ColumnField` – SELECT expressions plus optional JOIN clauses and an
  implicit WHERE contribution;
* :class:`RelationField` – a nested ``FieldSchema`` compiled into a
  correlated JSON subquery (``to_jsonb`` for ``one``, ``jsonb_agg`` for
  ``many``).

Example::

    USER_FIELDS = FieldSchema(
        table_name="data.users u",
        fields={
            "id": ColumnField(select=["u.id"]),
            "firstName": ColumnField(select=["u.first_name"]),
            "address": ColumnField(
                select=["to_jsonb(a) AS address"],
                join=["INNER JOIN data.addresses a ON a.id = u.address_id"],
            ),
        },
    )

    FEEDBACK_FIELDS = FieldSchema(
        table_name="data.feedbacks f",
        fields={
            "id": ColumnField(select=["f.id"]),
            "author": RelationField(
                relation=USER_FIELDS,
                cardinality="one",
                where=ConditionFragment(query="u.id = f.author_id"),
            ),
        },
    )

Relation nesting depth is not limited here; it is bounded by how deeply the
caller's schemas (and requested fields) nest.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from prepsql.schema.conditions import ConditionFragment

Cardinality = Literal["one", "many"]

_FORBID = ConfigDict(extra="forbid", frozen=True)


class ColumnField(BaseModel):
    """A field realised by SELECT expressions on the model's own query.

    Attributes:
        select: SQL expressions, normally one aliased column or subexpression.
        join: JOIN clauses the expressions depend on.
        where: Condition and/or bindings added whenever the field is requested.
    """

    model_config = _FORBID

    select: list[str] = Field(default_factory=list)
    join: list[str] = Field(default_factory=list)
    where: ConditionFragment | None = None


class RelationField(BaseModel):
    """A field realised by a correlated subquery against another model.

    Attributes:
        relation: Field schema of the related model.
        cardinality: ``one`` yields a JSON object, ``many`` a JSON array.
        where: Condition tying related rows back to the parent row,
            e.g. ``u.id = f.author_id``.
    """

    model_config = _FORBID

    relation: FieldSchema
    cardinality: Cardinality
    where: ConditionFragment


def _field_discriminator(v: Any) -> str | None:
    """Return the tag for the Pydantic discriminated union."""
    if isinstance(v, Mapping):
        return "relation" if "relation" in v else "column"
    if isinstance(v, RelationField):
        return "relation"
    if isinstance(v, ColumnField):
        return "column"
    return None


FieldSpec = Annotated[
    Annotated[ColumnField, Tag("column")] | Annotated[RelationField, Tag("relation")],
    Discriminator(_field_discriminator),
]


class FieldSchema(BaseModel):
    """Declarative map of a model's logical fields to their SQL realisation.

    Attributes:
        table_name: Schema-qualified table with alias (``data.users u``).
        fields: Logical field name → spec, in declaration order.
    """

    model_config = _FORBID

    table_name: str = Field(min_length=1)
    fields: dict[str, FieldSpec] = Field(default_factory=dict)

    def get_field(self, name: str) -> ColumnField | RelationField | None:
        """Returns the spec for ``name``, or ``None`` if the model lacks it."""
        return self.fields.get(name)

    @property
    def field_names(self) -> list[str]:
        """Returns all field names in declaration order."""
        return list(self.fields)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldSchema:
        """Build a schema from the flat ``{"tableName": ..., <field>: {...}}`` layout.

        Relation fields use ``relation`` (a nested mapping or ``FieldSchema``)
        and ``type``: ``[]`` for many rows, ``{}`` for one row.  An explicit
        ``cardinality`` key is also accepted.

        Args:
            data: Mapping with a ``tableName`` key and one key per field.

        Returns:
            The validated ``FieldSchema``.
        """
        fields: dict[str, Any] = {}
        for name, spec in data.items():
            if name == "tableName":
                continue
            if isinstance(spec, Mapping) and "relation" in spec:
                spec = _relation_from_dict(spec)
            fields[name] = spec
        return cls(table_name=data.get("tableName", ""), fields=fields)


def _relation_from_dict(spec: Mapping[str, Any]) -> dict[str, Any]:
    relation = spec["relation"]
    if isinstance(relation, Mapping):
        relation = FieldSchema.from_dict(relation)

    cardinality = spec.get("cardinality")
    if cardinality is None:
        cardinality = "many" if isinstance(spec.get("type"), list) else "one"

    return {
        "relation": relation,
        "cardinality": cardinality,
        "where": spec.get("where") or {},
    }


# Resolve forward references in recursive types.
RelationField.model_rebuild()
FieldSchema.model_rebuild()
