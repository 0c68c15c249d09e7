"""The field request a query is compiled for."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestedFields(BaseModel):
    """Logical field names requested for one model, with nested requests.

    ``related_fields`` values may be given as plain name lists::

        RequestedFields(
            fields=["id", "message", "author"],
            related_fields={"author": ["id", "firstName"]},
        )

    Attributes:
        fields: Requested field names of this model.
        related_fields: Relation field name → request against the related model.
    """

    model_config = ConfigDict(extra="forbid")

    fields: list[str] = Field(default_factory=list)
    related_fields: dict[str, RequestedFields] = Field(default_factory=dict)

    @field_validator("related_fields", mode="before")
    @classmethod
    def _coerce_name_lists(cls, value: Any) -> Any:
        """Accept ``{"author": ["id", "name"]}`` as shorthand."""
        if not isinstance(value, Mapping):
            return value
        return {
            name: {"fields": list(nested)} if isinstance(nested, (list, tuple)) else nested
            for name, nested in value.items()
        }

    def nested(self, name: str) -> RequestedFields | None:
        """Returns the nested request for ``name`` when it selects anything."""
        request = self.related_fields.get(name)
        if request is None or not request.fields:
            return None
        return request


RequestedFields.model_rebuild()
