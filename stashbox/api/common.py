"""Shared route plumbing: URL prefix, pagination parameters, success envelope."""

from typing import Any

from fastapi import Query

from ..schemas.common import Envelope, PageParams, SortBy, SortOrder

API_PREFIX = "/api/file-system"


def success(data: Any, message: str) -> Envelope:
    return Envelope(data=data, message=message)


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: SortBy = Query(SortBy.CREATED_AT),
    sort_order: SortOrder = Query(SortOrder.DESC),
) -> PageParams:
    """Pagination/sort query parameters as a dependency."""
    return PageParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
