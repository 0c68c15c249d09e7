"""Reading requested fields out of a GraphQL selection set.

Works on graphql-core's ``GraphQLResolveInfo`` (as passed to resolvers by
graphql-core, Strawberry, Ariadne, …).  Install the optional dependency
before using GraphQL info objects::

    pip install "prepsql[graphql]"

Paginated resolvers usually return ``{data: [...], totalCount}``; the model
fields then live under the ``data`` selection::

    query {
      feedbacks(meta: {perPage: 10}) {
        totalCount
        data { id message author { id firstName } }
      }
    }

``get_related_fields_from_graphql(info)`` turns that into::

    RequestedFields(
        fields=["id", "message", "author"],
        related_fields={"author": RequestedFields(fields=["id", "firstName"])},
    )
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from prepsql.schema.requested import RequestedFields

if TYPE_CHECKING:
    from graphql import GraphQLResolveInfo, SelectionSetNode

#: Introspection field never backed by a column.
TYPENAME_FIELD = "__typename"


@dataclass
class SelectedField:
    """A selected GraphQL field and its sub-selection.

    Attributes:
        name: Field name (not the alias).
        fields: Sub-selected fields, or ``None`` for a leaf.
    """

    name: str
    fields: list[SelectedField] | None = None

    def to_request(self) -> RequestedFields:
        """Convert the sub-selection into a :class:`RequestedFields`."""
        return _request_from(self.fields or [])


def get_fields_from_graphql(info: GraphQLResolveInfo | Any) -> list[SelectedField]:
    """Extract the selection tree of the field being resolved.

    ``__typename`` is skipped everywhere.  Inline fragments are flattened
    into their parent; named fragment spreads are resolved through
    ``info.fragments``.

    Args:
        info: GraphQL resolve info.

    Returns:
        The selected fields of ``info.field_nodes[0]``; empty if it has no
        selection set.
    """
    field_nodes = getattr(info, "field_nodes", None) or []
    if not field_nodes:
        return []
    fragments = getattr(info, "fragments", None) or {}
    return _extract(field_nodes[0].selection_set, fragments)


def get_related_fields_from_graphql(
    info: GraphQLResolveInfo | Any,
    root: str | None = "data",
) -> RequestedFields:
    """Build the field request for a model from GraphQL info.

    Args:
        info: GraphQL resolve info.
        root: Name of the wrapper field holding the model fields.  ``None``
            reads the top-level selection directly.

    Returns:
        :class:`RequestedFields`; fields with a sub-selection become nested
        requests.  Empty when the ``root`` field was not selected.
    """
    selected = get_fields_from_graphql(info)
    if root is not None:
        wrapper = next((item for item in selected if item.name == root), None)
        selected = (wrapper.fields or []) if wrapper is not None else []
    return _request_from(selected)


def _request_from(selected: list[SelectedField]) -> RequestedFields:
    return RequestedFields(
        fields=[item.name for item in selected],
        related_fields={
            item.name: item.to_request() for item in selected if item.fields
        },
    )


def _extract(
    selection_set: SelectionSetNode | None,
    fragments: dict[str, Any],
) -> list[SelectedField]:
    if selection_set is None:
        return []

    result: list[SelectedField] = []
    for selection in selection_set.selections:
        kind = getattr(selection, "kind", "field")
        if kind == "inline_fragment":
            result.extend(_extract(selection.selection_set, fragments))
            continue
        if kind == "fragment_spread":
            fragment = fragments.get(selection.name.value)
            if fragment is not None:
                result.extend(_extract(fragment.selection_set, fragments))
            continue

        name = selection.name.value
        if name == TYPENAME_FIELD:
            continue
        children = None
        if selection.selection_set is not None:
            children = _extract(selection.selection_set, fragments)
        result.append(SelectedField(name=name, fields=children))
    return result
