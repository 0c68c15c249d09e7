"""Unit tests for the field schema and request models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from prepsql.schema import (
    ColumnField,
    ConditionFragment,
    FieldSchema,
    MetaParams,
    RelationField,
    RequestedFields,
)


def test_flat_layout_builds_tagged_variants(feedback_fields):
    assert feedback_fields.table_name == "data.feedbacks f"
    assert isinstance(feedback_fields.get_field("id"), ColumnField)
    author = feedback_fields.get_field("author")
    assert isinstance(author, RelationField)
    assert author.cardinality == "one"
    assert author.relation.table_name == "data.users u"


def test_array_type_means_many(feedback_fields):
    answers = feedback_fields.get_field("answers")
    assert answers.cardinality == "many"
    assert answers.where.binding == {"answersDeleted": False}


def test_declaration_order_preserved(feedback_fields):
    assert feedback_fields.field_names == [
        "id", "score", "message", "authorId", "author", "answers", "createdAt",
    ]


def test_explicit_cardinality_key_wins():
    schema = FieldSchema.from_dict(
        {
            "tableName": "data.posts p",
            "tags": {
                "relation": {"tableName": "data.tags t", "id": {"select": ["t.id"]}},
                "type": {},
                "cardinality": "many",
                "where": {"query": "t.post_id = p.id"},
            },
        }
    )
    assert schema.fields["tags"].cardinality == "many"


def test_union_dispatches_on_relation_key():
    schema = FieldSchema(
        table_name="data.posts p",
        fields={
            "id": {"select": ["p.id"]},
            "author": {
                "relation": {"table_name": "data.users u", "fields": {"id": {"select": ["u.id"]}}},
                "cardinality": "one",
                "where": {"query": "u.id = p.author_id"},
            },
        },
    )
    assert isinstance(schema.fields["id"], ColumnField)
    assert isinstance(schema.fields["author"], RelationField)


def test_column_field_cannot_carry_relation_keys():
    with pytest.raises(PydanticValidationError):
        ColumnField(select=["p.id"], cardinality="one")


def test_unknown_cardinality_rejected():
    with pytest.raises(PydanticValidationError):
        RelationField(
            relation=FieldSchema(table_name="data.users u"),
            cardinality="several",
            where=ConditionFragment(query="u.id = p.author_id"),
        )


def test_schema_requires_table_name():
    with pytest.raises(PydanticValidationError):
        FieldSchema.from_dict({"id": {"select": ["x.id"]}})


def test_schema_is_immutable(user_fields):
    with pytest.raises(PydanticValidationError):
        user_fields.table_name = "data.other o"


def test_requested_fields_shorthand():
    request = RequestedFields(fields=["id", "author"], related_fields={"author": ("id", "avatar")})
    assert request.related_fields["author"].fields == ["id", "avatar"]
    assert request.nested("author").fields == ["id", "avatar"]
    assert request.nested("id") is None


def test_requested_fields_empty_nested_request_is_none():
    request = RequestedFields(fields=["author"], related_fields={"author": []})
    assert request.nested("author") is None


def test_meta_params_aliases():
    meta = MetaParams.model_validate({"perPage": 10, "orderBy": "name", "order": "desc"})
    assert meta.per_page == 10
    assert meta.order_by == "name"


def test_condition_fragment_accepts_null_binding():
    fragment = ConditionFragment.model_validate({"query": "u.active", "binding": None})
    assert fragment.binding is None
