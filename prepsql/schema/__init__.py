"""prepSQL schema models: field schemas, conditions, paging parameters."""
from prepsql.schema.conditions import ConditionFragment, FilterRule
from prepsql.schema.fields import (
    Cardinality,
    ColumnField,
    FieldSchema,
    FieldSpec,
    RelationField,
)
from prepsql.schema.meta import MetaParams
from prepsql.schema.requested import RequestedFields

__all__ = [
    "Cardinality",
    "ColumnField",
    "ConditionFragment",
    "FieldSchema",
    "FieldSpec",
    "FilterRule",
    "MetaParams",
    "RelationField",
    "RequestedFields",
]
