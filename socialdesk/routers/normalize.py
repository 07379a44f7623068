from typing import Any, Dict, get_args
from fastapi import APIRouter, Body, HTTPException, Query

from socialdesk.normalizers import (
    derive_sort_key,
    get_default_normalizer,
    parse_session_history,
    pick_latest,
)
from socialdesk.normalizers.types import EntityKind
from socialdesk.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

# --------------------------------------------------------------------
# Router setup
# --------------------------------------------------------------------
router = APIRouter(prefix="", tags=["normalize"])

ENTITY_KINDS = get_args(EntityKind)


def _check_kind(kind: str) -> EntityKind:
    if kind not in ENTITY_KINDS:
        raise HTTPException(404, f"Unknown entity kind: {kind} (expected one of {', '.join(ENTITY_KINDS)})")
    return kind


@router.post("/normalize/{kind}")
def normalize_payload(
    kind: str,
    payload: Any = Body(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> Dict[str, Any]:
    """
    Normalize a raw backend list response.

    Accepts:
        Any JSON: a bare array, or an envelope with `data`/`items`
        and optional `meta`/`pagination`.

    Behavior:
        * Records without an identity are left out; the rest still go through.
        * `page`/`limit` are only used when the payload carries no meta.
        * Accounts come back ordered by their session sort key.

    Returns:
        {"ok": True, "kind": <kind>, "data": [...], "meta": {...}}
    """
    kind = _check_kind(kind)
    result = get_default_normalizer().normalize_page(kind, payload, page, limit)
    return {"ok": True, "kind": kind, **result.to_payload()}


@router.post("/normalize/{kind}/record")
def normalize_single(kind: str, payload: Any = Body(None)) -> Dict[str, Any]:
    """Normalize one record (optionally wrapped as {"data": {...}})."""
    kind = _check_kind(kind)
    rec = get_default_normalizer().normalize_record(kind, payload)
    if rec is None:
        raise HTTPException(422, "Record has no resolvable id")
    return {"ok": True, "kind": kind, "item": rec.to_payload()}


@router.post("/sessions/history")
def session_history(payload: Any = Body(None)) -> Dict[str, Any]:
    """
    Parse a raw session-mode payload into success/failure attempts,
    plus the latest of each and the account sort key they imply.
    """
    history = parse_session_history(payload)
    latest_success = pick_latest(history.successes)
    latest_failure = pick_latest(history.failures)
    return {
        **history.to_payload(),
        "latestSuccess": latest_success.to_payload() if latest_success else None,
        "latestFailure": latest_failure.to_payload() if latest_failure else None,
        "sortKey": derive_sort_key(history),
    }
