# socialdesk/normalizers/entities.py
from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional, Sequence

from .base import Normalizer
from .fields import is_scalar_id, is_text, resolve_field, resolve_nested_field
from .ranking import derive_sort_key, pick_latest
from .rules import coerce_status, norm_bool, parse_timestamp, to_int, to_iso, to_text
from .sessions import parse_session_history
from .types import (
    CanonicalModel, ContentItem, EntityKind, OptionItem, Proxy, PublishJob,
    ThreadsAccount, WatchlistAccount,
)

# -------------------------------------------------------------------
# Candidate keys, in precedence order. One tuple per logical field.
# -------------------------------------------------------------------
ID_KEYS = ("id", "_id", "uuid")
CREATED_AT_KEYS = ("createdAt", "created_at", "createdOn")
UPDATED_AT_KEYS = ("updatedAt", "updated_at", "updatedOn")
RELATION_ID_KEYS = ("id", "_id", "uuid")

# accounts
ACCOUNT_ID_KEYS = ID_KEYS + ("threadsAccountId", "threads_account_id")
USERNAME_KEYS = ("username", "userName", "login")
ACCOUNT_TYPE_KEYS = ("type", "accountType", "account_type")
ACCOUNT_TYPES = ("default", "watcher")
ACCOUNT_STATUS_KEYS = ("status", "state", "isActive", "active", "enabled")
SESSION_MODE_SOURCE_KEYS = ("sessionMode", "session_mode", "mode")
LAST_LOGIN_KEYS = (
    "lastLoginAt", "last_login_at",
    "lastLoggedInAt", "last_logged_in_at",
    "loggedInAt", "logged_in_at",
)
PROXY_RELATION_KEYS = ("proxy", "proxyInfo", "proxy_info")
PROXY_REF_ID_KEYS = RELATION_ID_KEYS + ("proxyId", "proxy_id", "proxyUuid", "proxy_uuid")
PROXY_REF_NAME_KEYS = ("name", "label", "title")
CATEGORY_RELATION_KEYS = ("category", "categoryInfo", "category_info")
CATEGORY_REF_ID_KEYS = RELATION_ID_KEYS + ("categoryId", "category_id", "categoryUuid", "category_uuid")
CATEGORY_REF_NAME_KEYS = ("name", "label", "title")
WATCHLIST_ACCOUNTS_KEYS = (
    "watchlistAccounts", "watchlist_accounts", "watchlist",
    "watchListAccounts", "watch_list_accounts",
)
WATCHLIST_IDS_KEYS = (
    "watchlistAccountIds", "watchlist_account_ids",
    "watchlistAccountId", "watchlist_account_id",
)

# option-list items (proxies, categories, watchlist accounts in selects)
OPTION_ID_KEYS = ID_KEYS + (
    "value", "watchlistAccountId", "watchlist_account_id",
    "proxyId", "proxy_id", "categoryId", "category_id",
)
OPTION_NAME_KEYS = ("accountName", "account_name", "name", "label", "title", "displayName", "host")
OPTION_USERNAME_KEYS = ("username", "userName", "handle", "accountUsername")

# content items and publish jobs
ACCOUNT_RELATION_KEYS = ("account", "threadsAccount", "accountInfo", "account_info")
ACCOUNT_REF_ID_FLAT_KEYS = ("threadsAccountId", "threads_account_id", "accountId", "account_id")
ACCOUNT_REF_NAME_KEYS = ("name", "accountName", "account_name", "displayName", "username")
ACCOUNT_REF_NAME_FLAT_KEYS = ("accountName", "account_name")
CONTENT_ID_KEYS = ID_KEYS + ("contentId", "content_id")
CONTENT_TITLE_KEYS = ("title", "name")
CONTENT_BODY_KEYS = ("body", "content", "text")
CONTENT_TYPE_KEYS = ("type", "contentType", "content_type", "kind")
CONTENT_STATUS_KEYS = ("status", "state")
CONTENT_SCHEDULED_KEYS = ("scheduledAt", "scheduled_at", "scheduleAt", "publishAt", "publish_at")
MEDIA_KEYS = ("mediaUrls", "media_urls", "media", "attachments")
MEDIA_URL_KEYS = ("url", "href", "path", "source", "location")

JOB_ID_KEYS = ID_KEYS + ("jobId", "job_id")
CONTENT_RELATION_KEYS = ("content", "contentInfo", "content_info")
CONTENT_REF_ID_FLAT_KEYS = ("contentId", "content_id")
CONTENT_REF_TITLE_KEYS = ("title", "name", "headline")
CONTENT_REF_TITLE_FLAT_KEYS = ("contentTitle", "content_title")
JOB_STATUS_KEYS = ("status", "state", "jobStatus", "job_status", "result")
JOB_SCHEDULED_KEYS = ("scheduledAt", "scheduled_at", "scheduledTime", "scheduled_time")
PLATFORM_RESPONSE_KEYS = (
    "platformResponse", "platform_response", "response",
    "providerResponse", "provider_response",
)

# proxies
PROXY_ID_KEYS = ID_KEYS + ("proxyId", "proxy_id")
PROXY_NAME_KEYS = ("name", "label", "title")
PROXY_HOST_KEYS = ("host", "hostname", "address")
PROXY_PORT_KEYS = ("port",)
PROXY_USERNAME_KEYS = ("username", "user", "login")
PROXY_STATUS_KEYS = ("isActive", "is_active", "active", "enabled", "status", "state")

# watchlist accounts
WATCHLIST_ID_KEYS = ID_KEYS + ("watchlistAccountId", "watchlist_account_id")
WATCHLIST_USERNAME_KEYS = ("username", "userName", "handle")
WATCHLIST_NAME_KEYS = ("accountName", "account_name", "name")
PLATFORM_KEYS = ("platform", "platformName", "platform_name")
AVATAR_KEYS = ("avatarUrl", "avatar_url", "avatar", "profilePicUrl", "profile_pic_url")
FOLLOWER_COUNT_KEYS = ("followerCount", "followers", "followers_count")
VERIFIED_KEYS = ("isVerified", "verified", "is_verified")
NOTE_KEYS = ("note", "notes")
LAST_SYNCED_KEYS = ("lastSyncedAt", "last_synced_at")
WATCHLIST_STATUS_KEYS = ("status", "state", "isActive", "active", "enabled")


# --- Small shared helpers ---

def _identity(raw: Mapping, keys: Sequence[str]) -> Optional[str]:
    return to_text(resolve_field(raw, keys, accept=is_scalar_id))


def _text(raw: Any, keys: Sequence[str]) -> Optional[str]:
    return to_text(resolve_field(raw, keys, accept=is_text))


def _label(raw: Any, keys: Sequence[str]) -> Optional[str]:
    # Status/type codes may arrive as numbers
    return to_text(resolve_field(raw, keys, accept=is_scalar_id))


def _date(raw: Any, keys: Sequence[str]) -> Optional[str]:
    return to_iso(resolve_field(raw, keys, accept=lambda v: parse_timestamp(v) is not None))


def _ref_id(raw: Mapping, relation_keys, field_keys, flat_keys) -> Optional[str]:
    return to_text(resolve_nested_field(raw, relation_keys, field_keys, flat_keys, accept=is_scalar_id))


def _ref_text(raw: Mapping, relation_keys, field_keys, flat_keys) -> Optional[str]:
    return to_text(resolve_nested_field(raw, relation_keys, field_keys, flat_keys, accept=is_text))


# -------------------------------------------------------------------
# Option-list items
# -------------------------------------------------------------------
def normalize_option(raw: Any) -> Optional[OptionItem]:
    """Select-list entry. The label falls back to the username, then to the id."""
    if not isinstance(raw, Mapping):
        return None
    oid = _identity(raw, OPTION_ID_KEYS)
    if oid is None:
        return None
    username = _text(raw, OPTION_USERNAME_KEYS)
    name = _text(raw, OPTION_NAME_KEYS) or username or oid
    return OptionItem(id=oid, name=name, username=username)


# -------------------------------------------------------------------
# Threads accounts
# -------------------------------------------------------------------
def _collect_watchlist_ids(value: Any, out: List[str]) -> None:
    # Accepts scalars, mappings carrying an id, or (nested) lists of both
    if isinstance(value, list):
        for entry in value:
            _collect_watchlist_ids(entry, out)
        return
    if isinstance(value, Mapping):
        wid = _identity(value, OPTION_ID_KEYS)
    else:
        wid = to_text(value)
    if wid and wid not in out:
        out.append(wid)


def _account_type(raw: Mapping) -> Optional[str]:
    value = _text(raw, ACCOUNT_TYPE_KEYS)
    if value is None:
        return None
    lowered = value.lower()
    return lowered if lowered in ACCOUNT_TYPES else None


def normalize_account(raw: Any) -> Optional[ThreadsAccount]:
    """
    Threads account with its proxy/category references, watchlist links and
    session history. `sort_key` comes from the session history alone;
    `last_login_at` prefers an explicit field and otherwise uses the latest
    attempt of any outcome.
    """
    if not isinstance(raw, Mapping):
        return None
    aid = _identity(raw, ACCOUNT_ID_KEYS)
    if aid is None:
        return None

    source = resolve_field(raw, WATCHLIST_ACCOUNTS_KEYS, accept=lambda v: isinstance(v, list)) or []
    watchlist_accounts = [o for o in (normalize_option(item) for item in source) if o is not None]
    watchlist_ids: List[str] = []
    _collect_watchlist_ids(resolve_field(raw, WATCHLIST_IDS_KEYS), watchlist_ids)
    _collect_watchlist_ids([o.id for o in watchlist_accounts], watchlist_ids)

    history = parse_session_history(resolve_field(raw, SESSION_MODE_SOURCE_KEYS))
    latest_success = pick_latest(history.successes)
    latest_any = pick_latest([*history.successes, *history.failures])
    last_login_at = _date(raw, LAST_LOGIN_KEYS)
    if last_login_at is None and latest_any is not None:
        last_login_at = to_iso(latest_any.last_attempt_at)

    status = coerce_status(resolve_field(raw, ACCOUNT_STATUS_KEYS))

    return ThreadsAccount(
        id=aid,
        username=_text(raw, USERNAME_KEYS) or "",
        type=_account_type(raw),
        proxy_id=_ref_id(raw, PROXY_RELATION_KEYS, PROXY_REF_ID_KEYS, ("proxyId", "proxy_id")),
        proxy_name=_ref_text(raw, PROXY_RELATION_KEYS, PROXY_REF_NAME_KEYS, ("proxyName", "proxy_name")),
        category_id=_ref_id(raw, CATEGORY_RELATION_KEYS, CATEGORY_REF_ID_KEYS, ("categoryId", "category_id")),
        category_name=_ref_text(
            raw, CATEGORY_RELATION_KEYS, CATEGORY_REF_NAME_KEYS, ("categoryName", "category_name")
        ),
        watchlist_account_ids=watchlist_ids,
        watchlist_accounts=watchlist_accounts,
        session_history=history,
        session_mode=latest_success.session_mode if latest_success is not None else None,
        sort_key=derive_sort_key(history),
        last_login_at=last_login_at,
        status=status.label,
        is_active=status.is_active,
        created_at=_date(raw, CREATED_AT_KEYS),
        updated_at=_date(raw, UPDATED_AT_KEYS),
    )


# -------------------------------------------------------------------
# Content items
# -------------------------------------------------------------------
def _media_urls(raw: Mapping) -> List[str]:
    media = resolve_field(raw, MEDIA_KEYS, accept=lambda v: isinstance(v, list)) or []
    urls: List[str] = []
    for item in media:
        url = to_text(item) if isinstance(item, str) else _text(item, MEDIA_URL_KEYS)
        if url:
            urls.append(url)
    return urls


def normalize_content(raw: Any) -> Optional[ContentItem]:
    if not isinstance(raw, Mapping):
        return None
    cid = _identity(raw, CONTENT_ID_KEYS)
    if cid is None:
        return None
    return ContentItem(
        id=cid,
        threads_account_id=_ref_id(raw, ACCOUNT_RELATION_KEYS, RELATION_ID_KEYS, ACCOUNT_REF_ID_FLAT_KEYS),
        account_name=_ref_text(raw, ACCOUNT_RELATION_KEYS, ACCOUNT_REF_NAME_KEYS, ACCOUNT_REF_NAME_FLAT_KEYS),
        title=_text(raw, CONTENT_TITLE_KEYS),
        body=_text(raw, CONTENT_BODY_KEYS),
        type=_label(raw, CONTENT_TYPE_KEYS),
        status=_label(raw, CONTENT_STATUS_KEYS),
        scheduled_at=_date(raw, CONTENT_SCHEDULED_KEYS),
        created_at=_date(raw, CREATED_AT_KEYS),
        updated_at=_date(raw, UPDATED_AT_KEYS),
        media_urls=_media_urls(raw),
    )


# -------------------------------------------------------------------
# Publish jobs
# -------------------------------------------------------------------
def normalize_job(raw: Any) -> Optional[PublishJob]:
    if not isinstance(raw, Mapping):
        return None
    jid = _identity(raw, JOB_ID_KEYS)
    if jid is None:
        return None
    return PublishJob(
        id=jid,
        threads_account_id=_ref_id(raw, ACCOUNT_RELATION_KEYS, RELATION_ID_KEYS, ACCOUNT_REF_ID_FLAT_KEYS),
        account_name=_ref_text(raw, ACCOUNT_RELATION_KEYS, ACCOUNT_REF_NAME_KEYS, ACCOUNT_REF_NAME_FLAT_KEYS),
        content_id=_ref_id(raw, CONTENT_RELATION_KEYS, RELATION_ID_KEYS, CONTENT_REF_ID_FLAT_KEYS),
        content_title=_ref_text(
            raw, CONTENT_RELATION_KEYS, CONTENT_REF_TITLE_KEYS, CONTENT_REF_TITLE_FLAT_KEYS
        ),
        status=_label(raw, JOB_STATUS_KEYS),
        scheduled_at=_date(raw, JOB_SCHEDULED_KEYS),
        created_at=_date(raw, CREATED_AT_KEYS),
        updated_at=_date(raw, UPDATED_AT_KEYS),
        # opaque provider payload, copied so the result never aliases the input
        platform_response=deepcopy(resolve_field(raw, PLATFORM_RESPONSE_KEYS)),
    )


# -------------------------------------------------------------------
# Proxies
# -------------------------------------------------------------------
def normalize_proxy(raw: Any) -> Optional[Proxy]:
    if not isinstance(raw, Mapping):
        return None
    pid = _identity(raw, PROXY_ID_KEYS)
    if pid is None:
        return None
    status = coerce_status(resolve_field(raw, PROXY_STATUS_KEYS))
    return Proxy(
        id=pid,
        name=_text(raw, PROXY_NAME_KEYS) or "",
        host=_text(raw, PROXY_HOST_KEYS) or "",
        port=to_int(resolve_field(raw, PROXY_PORT_KEYS)),
        username=_text(raw, PROXY_USERNAME_KEYS),
        status=status.label,
        is_active=status.is_active,
        created_at=_date(raw, CREATED_AT_KEYS),
        updated_at=_date(raw, UPDATED_AT_KEYS),
    )


# -------------------------------------------------------------------
# Watchlist accounts
# -------------------------------------------------------------------
def normalize_watchlist_account(raw: Any) -> Optional[WatchlistAccount]:
    if not isinstance(raw, Mapping):
        return None
    wid = _identity(raw, WATCHLIST_ID_KEYS)
    if wid is None:
        return None
    status = coerce_status(resolve_field(raw, WATCHLIST_STATUS_KEYS))
    verified = resolve_field(raw, VERIFIED_KEYS, accept=lambda v: norm_bool(v) is not None)
    return WatchlistAccount(
        id=wid,
        username=_text(raw, WATCHLIST_USERNAME_KEYS) or "",
        account_name=_text(raw, WATCHLIST_NAME_KEYS),
        platform=_text(raw, PLATFORM_KEYS),
        avatar_url=_text(raw, AVATAR_KEYS),
        follower_count=to_int(resolve_field(raw, FOLLOWER_COUNT_KEYS)),
        category_id=_ref_id(raw, CATEGORY_RELATION_KEYS, RELATION_ID_KEYS, ("categoryId", "category_id")),
        category_name=_ref_text(
            raw, CATEGORY_RELATION_KEYS, CATEGORY_REF_NAME_KEYS, ("categoryName", "category_name")
        ),
        note=_text(raw, NOTE_KEYS),
        last_synced_at=_date(raw, LAST_SYNCED_KEYS),
        is_verified=bool(norm_bool(verified)),
        status=status.label,
        is_active=status.is_active,
        created_at=_date(raw, CREATED_AT_KEYS),
        updated_at=_date(raw, UPDATED_AT_KEYS),
    )


# -------------------------------------------------------------------
# Kind registry
# -------------------------------------------------------------------
ENTITY_NORMALIZERS: Dict[str, Callable[[Any], Optional[CanonicalModel]]] = {
    "account": normalize_account,
    "content": normalize_content,
    "job": normalize_job,
    "option": normalize_option,
    "proxy": normalize_proxy,
    "watchlist": normalize_watchlist_account,
}


class RuleNormalizer(Normalizer):
    """
    Rule-based normalizer: picks the entity function for `kind` and returns
    a canonical record, or None when the record has no usable identity.
    """
    def normalize_record(self, kind: EntityKind, rec: Any) -> Optional[CanonicalModel]:
        fn = ENTITY_NORMALIZERS.get(kind)
        if fn is None:
            raise KeyError(f"unknown entity kind: {kind}")
        return fn(rec)
