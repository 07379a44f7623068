# socialdesk/normalizers/types.py
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EntityKind = Literal["account", "content", "job", "option", "proxy", "watchlist"]
Record = Dict[str, Any]  # raw, untyped backend record


class CanonicalModel(BaseModel):
    """snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# -----------------------------
# Session history
# -----------------------------
class SuccessAttempt(CanonicalModel):
    session_mode: Optional[str] = None
    last_attempt_at: Optional[str] = None   # upstream string, trimmed, not reformatted
    reason: Optional[str] = None

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class FailureAttempt(SuccessAttempt):
    error_message: Optional[str] = None


class SessionHistory(CanonicalModel):
    successes: List[SuccessAttempt] = Field(default_factory=list)
    failures: List[FailureAttempt] = Field(default_factory=list)


# -----------------------------
# Pagination
# -----------------------------
class PageMeta(CanonicalModel):
    page: int = Field(1, ge=1)
    limit: int = Field(1, ge=1)
    total_pages: int = Field(1, ge=1)
    total: int = Field(0, ge=0)


class NormalizedPage(CanonicalModel):
    data: List[Any] = Field(default_factory=list)   # canonical entities of one kind
    meta: PageMeta

    def to_payload(self) -> Dict[str, Any]:
        return {
            "data": [item.to_payload() for item in self.data],
            "meta": self.meta.to_payload(),
        }


# -----------------------------
# Canonical entities
# -----------------------------
class OptionItem(CanonicalModel):
    # Select-list entry: proxies, categories, watchlist accounts
    id: str
    name: str
    username: Optional[str] = None


class ThreadsAccount(CanonicalModel):
    id: str
    username: str = ""
    type: Optional[Literal["default", "watcher"]] = None
    proxy_id: Optional[str] = None
    proxy_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    watchlist_account_ids: List[str] = Field(default_factory=list)
    watchlist_accounts: List[OptionItem] = Field(default_factory=list)
    session_history: SessionHistory = Field(default_factory=SessionHistory)
    session_mode: Optional[str] = None       # mode of the latest success
    sort_key: Optional[str] = None           # derived from session_history only
    last_login_at: Optional[str] = None
    status: str = "Inactive"
    is_active: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ContentItem(CanonicalModel):
    id: str
    threads_account_id: Optional[str] = None
    account_name: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    scheduled_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    media_urls: List[str] = Field(default_factory=list)


class PublishJob(CanonicalModel):
    id: str
    threads_account_id: Optional[str] = None
    account_name: Optional[str] = None
    content_id: Optional[str] = None
    content_title: Optional[str] = None
    status: Optional[str] = None
    scheduled_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    platform_response: Any = None


class Proxy(CanonicalModel):
    id: str
    name: str = ""
    host: str = ""
    port: Optional[int] = None
    username: Optional[str] = None
    status: str = "Inactive"
    is_active: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WatchlistAccount(CanonicalModel):
    id: str
    username: str = ""
    account_name: Optional[str] = None
    platform: Optional[str] = None
    avatar_url: Optional[str] = None
    follower_count: Optional[int] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    note: Optional[str] = None
    last_synced_at: Optional[str] = None
    is_verified: bool = False
    status: str = "Inactive"
    is_active: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
