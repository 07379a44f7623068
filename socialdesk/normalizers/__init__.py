from .pipeline import get_default_normalizer, NormalizerPipeline
from .entities import (
    RuleNormalizer,
    ENTITY_NORMALIZERS,
    normalize_account,
    normalize_content,
    normalize_job,
    normalize_option,
    normalize_proxy,
    normalize_watchlist_account,
)
from .fields import resolve_field, resolve_nested_field
from .sessions import parse_session_history, classify_session_payload, SessionShape
from .ranking import pick_latest, derive_sort_key, rank_accounts
from .pagination import normalize_list, normalize_meta, unwrap_record
from .rules import coerce_status
from .types import (
    EntityKind,
    Record,
    SessionHistory,
    SuccessAttempt,
    FailureAttempt,
    PageMeta,
    NormalizedPage,
)
from .base import Normalizer

__all__ = [
    "get_default_normalizer",
    "NormalizerPipeline",
    "RuleNormalizer",
    "ENTITY_NORMALIZERS",
    "normalize_account",
    "normalize_content",
    "normalize_job",
    "normalize_option",
    "normalize_proxy",
    "normalize_watchlist_account",
    "resolve_field",
    "resolve_nested_field",
    "parse_session_history",
    "classify_session_payload",
    "SessionShape",
    "pick_latest",
    "derive_sort_key",
    "rank_accounts",
    "normalize_list",
    "normalize_meta",
    "unwrap_record",
    "coerce_status",
    "EntityKind",
    "Record",
    "SessionHistory",
    "SuccessAttempt",
    "FailureAttempt",
    "PageMeta",
    "NormalizedPage",
    "Normalizer",
]
