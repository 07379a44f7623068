# socialdesk/upstream.py
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from fastapi import Request

from socialdesk.settings import UPSTREAM_BASE_URL, UPSTREAM_LANG, UPSTREAM_TIMEOUT

log = logging.getLogger(__name__)

# Upstream paths per resource exposed by this service
RESOURCE_PATHS = {
    "threads-accounts": "threads-accounts",
    "contents": "contents",
    "publish-jobs": "publish-jobs",
    "proxies": "proxies",
    "watchlist-accounts": "threads/watchlist/accounts",
    "categories": "categories",
}


class UpstreamError(Exception):
    """The dashboard backend could not be reached or answered with an error."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: requests.Response, payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error"):
            if isinstance(payload.get(key), str) and payload[key].strip():
                return payload[key]
    return resp.reason or "Request failed. Please try again."


class UpstreamClient:
    """
    Thin JSON client for the dashboard backend.
    Returns parsed JSON as-is; shaping it is the normalizers' job.
    """
    def __init__(self, base_url: str = UPSTREAM_BASE_URL, timeout: float = UPSTREAM_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"accept": "application/json", "x-custom-lang": UPSTREAM_LANG})

    def close(self):
        self.session.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path}"
        log.debug("GET %s params=%s", url, params)
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("upstream unreachable: %s (%s)", url, e)
            raise UpstreamError(f"Upstream unreachable: {e}") from e

        if not r.content:
            payload: Any = {}
        else:
            try:
                payload = r.json()
            except ValueError:
                payload = None
                if r.ok:
                    raise UpstreamError("Invalid server response.", r.status_code)

        if not r.ok:
            msg = _error_message(r, payload)
            log.warning("upstream error %s on %s: %s", r.status_code, url, msg)
            raise UpstreamError(msg, r.status_code)
        return payload

    def list(self, resource: str, page: int, limit: int, **filters) -> Any:
        """Raw list payload for `resource`; None-valued filters are not sent."""
        params = {"page": page, "limit": limit}
        params.update({k: v for k, v in filters.items() if v is not None and v != ""})
        return self._get(RESOURCE_PATHS[resource], params)

    def get(self, resource: str, item_id: str) -> Any:
        return self._get(f"{RESOURCE_PATHS[resource]}/{quote(str(item_id), safe='')}")


def get_upstream(request: Request) -> UpstreamClient:
    """FastAPI dependency: the per-process client created in the app lifespan."""
    return request.app.state.upstream
