"""ORDER BY / OFFSET / LIMIT compilation.

The tail built here is always the last element of a query.  Pagination is
unconditional: even without any ordering, ``OFFSET :offset LIMIT :perPage``
is appended and bound.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pydantic

from prepsql.compile.base import SortingClause
from prepsql.config import DEFAULT_SETTINGS, OFFSET_PARAM, PER_PAGE_PARAM, QuerySettings
from prepsql.errors import ValidationError
from prepsql.sanitize import remove_special_symbols
from prepsql.schema.meta import MetaParams

SORT_DIRECTIONS = ("ASC", "DESC")


def build_meta_query(
    meta: MetaParams | Mapping[str, Any] | None,
    table: str | None = None,
    order_raw: str | None = None,
    settings: QuerySettings | None = None,
) -> SortingClause:
    """Build the sorting and pagination tail of a query.

    Ordering is chosen in this order of precedence:

    1. ``order_raw`` verbatim (e.g. ``"ORDER BY t.year DESC, t.week DESC"``);
    2. ``meta.order_by`` sanitized and qualified with ``table``;
    3. the configured default columns of ``table``;
    4. no ORDER BY at all.

    Args:
        meta: Paging/ordering request; plain mappings are validated.
        table: Table (with schema) used to qualify ``order_by`` and for the
            default ordering.
        order_raw: Complete ORDER BY clause overriding everything else.
        settings: Paging defaults; :data:`~prepsql.config.DEFAULT_SETTINGS`
            when omitted.

    Returns:
        :class:`SortingClause` with ``perPage``/``offset`` bindings.

    Raises:
        ValidationError: If ``meta`` is malformed or ``meta.order`` is
            neither ASC nor DESC.
    """
    settings = settings or DEFAULT_SETTINGS
    params = validate_meta(meta, order_raw, settings)

    if order_raw:
        sorting = f" {order_raw}"
    else:
        sorting = _order_from_meta(params, table, settings)

    sorting += f" OFFSET :{OFFSET_PARAM} LIMIT :{PER_PAGE_PARAM}"
    bindings = {
        PER_PAGE_PARAM: params.per_page or settings.default_per_page,
        OFFSET_PARAM: settings.default_offset if params.offset is None else params.offset,
    }
    return SortingClause(sorting=sorting, bindings=bindings)


def validate_meta(
    meta: MetaParams | Mapping[str, Any] | None,
    order_raw: str | None = None,
    settings: QuerySettings | None = None,
) -> MetaParams:
    """Validate a paging/ordering request without building any SQL.

    The sort direction is only checked when ``order_raw`` does not replace
    the ordering.

    Raises:
        ValidationError: If ``meta`` is malformed or ``meta.order`` is
            neither ASC nor DESC.
    """
    params = _to_meta(meta)
    if not order_raw:
        _sort_direction(params, settings or DEFAULT_SETTINGS)
    return params


def _sort_direction(params: MetaParams, settings: QuerySettings) -> str:
    order = (params.order or settings.default_order).upper()
    if order not in SORT_DIRECTIONS:
        raise ValidationError(
            f"Incorrect order value '{params.order}'; use ASC or DESC.",
            details={"order": params.order, "allowed": list(SORT_DIRECTIONS)},
        )
    return order


def _order_from_meta(params: MetaParams, table: str | None, settings: QuerySettings) -> str:
    order = _sort_direction(params, settings)

    if params.order_by:
        field = remove_special_symbols(params.order_by)
        if table:
            field = f"{table}.{field}"
        return f" ORDER BY {field} {order}"

    if table:
        columns = ", ".join(
            f"{table}.{column} {direction}" for column, direction in settings.default_sort_columns
        )
        return f" ORDER BY {columns}"

    return ""


def _to_meta(meta: MetaParams | Mapping[str, Any] | None) -> MetaParams:
    if meta is None:
        return MetaParams()
    if isinstance(meta, MetaParams):
        return meta
    try:
        return MetaParams.model_validate(meta)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid meta parameters: {exc}", details={"meta": dict(meta)}) from exc
