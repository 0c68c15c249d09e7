"""Paging and ordering parameters supplied by API callers."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MetaParams(BaseModel):
    """Paging and ordering request (``metaInput`` in the public API).

    Both snake_case and the camelCase wire names (``perPage``, ``orderBy``)
    are accepted.

    Attributes:
        per_page: Page size.  ``None`` or ``0`` means the configured default.
        offset: Rows to skip.  ``None`` means the configured default.
        order: ``ASC`` or ``DESC`` (any case).  Checked when the ordering
            clause is compiled, not here.
        order_by: Field to order by; sanitized before use.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    per_page: int | None = Field(None, ge=0, alias="perPage")
    offset: int | None = Field(None, ge=0)
    order: str | None = None
    order_by: str | None = Field(None, alias="orderBy")
