from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from socialdesk.normalizers import get_default_normalizer
from socialdesk.normalizers.types import EntityKind
from socialdesk.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, OPTIONS_PAGE_SIZE
from socialdesk.upstream import UpstreamClient, UpstreamError, get_upstream

router = APIRouter(prefix="", tags=["read"])

# resource path -> entity kind its records normalize as
RESOURCE_KINDS: Dict[str, EntityKind] = {
    "threads-accounts": "account",
    "contents": "content",
    "publish-jobs": "job",
    "proxies": "proxy",
    "watchlist-accounts": "watchlist",
}
OPTION_RESOURCES = ("proxies", "categories", "watchlist-accounts")


def _upstream_failed(e: UpstreamError) -> HTTPException:
    return HTTPException(502, f"Upstream request failed: {e.message}")


# -------------------------------------------------------------------
# Shared handlers
# -------------------------------------------------------------------
def _list(resource: str, upstream: UpstreamClient, page: int, limit: int, **filters) -> Dict[str, Any]:
    try:
        payload = upstream.list(resource, page, limit, **filters)
    except UpstreamError as e:
        raise _upstream_failed(e)
    result = get_default_normalizer().normalize_page(RESOURCE_KINDS[resource], payload, page, limit)
    return result.to_payload()


def _detail(resource: str, item_id: str, upstream: UpstreamClient) -> Dict[str, Any]:
    try:
        payload = upstream.get(resource, item_id)
    except UpstreamError as e:
        if e.status_code == 404:
            raise HTTPException(404, e.message)
        raise _upstream_failed(e)
    rec = get_default_normalizer().normalize_record(RESOURCE_KINDS[resource], payload)
    if rec is None:
        raise HTTPException(404, f"{resource} record {item_id} not found")
    return rec.to_payload()


# -------------------------------------------------------------------
# List endpoints
# -------------------------------------------------------------------
@router.get("/threads-accounts")
def list_threads_accounts(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Username contains"),
    status: Optional[str] = Query(None, pattern="^(active|inactive)$"),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    """Threads accounts, most recent session activity first."""
    return _list("threads-accounts", upstream, page, limit, search=search, status=status)


@router.get("/contents")
def list_contents(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    return _list("contents", upstream, page, limit)


@router.get("/publish-jobs")
def list_publish_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    return _list("publish-jobs", upstream, page, limit)


@router.get("/proxies")
def list_proxies(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    return _list("proxies", upstream, page, limit)


@router.get("/watchlist-accounts")
def list_watchlist_accounts(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Username contains"),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    return _list("watchlist-accounts", upstream, page, limit, search=search)


# -------------------------------------------------------------------
# Option lists for selects
# -------------------------------------------------------------------
@router.get("/options/{resource}")
def list_options(resource: str, upstream: UpstreamClient = Depends(get_upstream)) -> Dict[str, Any]:
    """First page of proxies / categories / watchlist accounts as {id, name, username} options."""
    if resource not in OPTION_RESOURCES:
        raise HTTPException(404, f"No options for {resource}")
    try:
        payload = upstream.list(resource, 1, OPTIONS_PAGE_SIZE)
    except UpstreamError as e:
        raise _upstream_failed(e)
    result = get_default_normalizer().normalize_page("option", payload, 1, OPTIONS_PAGE_SIZE)
    return {"resource": resource, "options": [o.to_payload() for o in result.data]}


# -------------------------------------------------------------------
# Detail endpoints
# -------------------------------------------------------------------
@router.get("/{resource}/{item_id}")
def get_record(
    resource: str,
    item_id: str,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Dict[str, Any]:
    """
    Fetch a single record by ID from one of the list resources.

    - 404 for unknown resources, upstream 404s, and records without an id
    - 502 for any other upstream failure
    """
    if resource not in RESOURCE_KINDS:
        raise HTTPException(404, f"Unknown resource: {resource}")
    return _detail(resource, item_id, upstream)
