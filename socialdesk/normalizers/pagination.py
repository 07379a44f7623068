# socialdesk/normalizers/pagination.py
import math
from collections.abc import Mapping
from typing import Any, List, Optional

from .fields import resolve_field
from .types import PageMeta

LIST_KEYS = ("data", "items")
META_KEYS = ("meta", "pagination")
TOTAL_PAGES_KEYS = ("totalPages", "total_pages")


def normalize_list(payload: Any) -> List[Any]:
    """
    Raw items of a list response.

    Accepts a bare array, or an envelope with an array under `data` or `items`.
    Anything else is an empty list. The returned list is new; items are not copied.
    """
    if isinstance(payload, list):
        return list(payload)
    items = resolve_field(payload, LIST_KEYS, accept=lambda v: isinstance(v, list))
    return list(items) if items is not None else []


def unwrap_record(payload: Any) -> Any:
    """`payload["data"]` for single-record envelopes, else the payload itself."""
    inner = resolve_field(payload, ("data",), accept=lambda v: isinstance(v, Mapping))
    return inner if inner is not None else payload


def _whole(value: Any, minimum: int) -> Optional[int]:
    """Integer (or integral float) >= minimum; bools and strings don't count."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value < minimum:
        return None
    return value


def normalize_meta(
    payload: Any,
    requested_page: int,
    requested_limit: int,
    observed_count: int,
) -> PageMeta:
    """
    Pagination meta for a list response.

    Explicit, well-typed `page`/`limit`/`total`/`totalPages` from the payload's
    meta object win. `totalPages` is derived from `total` and `limit` when
    missing, and `total` falls back to the number of items observed on this page.
    Never raises.
    """
    meta = resolve_field(payload, META_KEYS, accept=lambda v: isinstance(v, Mapping)) or {}

    fallback_page = _whole(requested_page, 1) or 1
    fallback_limit = _whole(requested_limit, 1) or 1

    page = _whole(meta.get("page"), 1) or fallback_page
    limit = _whole(meta.get("limit"), 1) or fallback_limit
    total = _whole(meta.get("total"), 0)
    if total is None:
        total = _whole(observed_count, 0) or 0
    total_pages = _whole(resolve_field(meta, TOTAL_PAGES_KEYS), 1)
    if total_pages is None:
        total_pages = max(1, math.ceil(total / limit))

    return PageMeta(page=page, limit=limit, total=total, total_pages=total_pages)
