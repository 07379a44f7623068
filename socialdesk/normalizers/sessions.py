# socialdesk/normalizers/sessions.py
"""
Session-mode payloads come back from the backend in several shapes:

    "persistent"                                   -> TEXT
    [{"sessionMode": ..., "lastLoggedInAt": ...}]  -> LIST
    {"successResults": [...], "failureResults": [...]} -> STRUCTURED
    {"sessionMode": ..., "lastLoginAt": ...}        -> SINGLE
    None / numbers / anything else                  -> EMPTY

`parse_session_history` classifies the payload first and then hands it to the
handler registered for that shape. Attempts that resolve to all-None fields
are dropped.
"""
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar

from .fields import is_text, resolve_field, resolve_nested_field
from .types import FailureAttempt, SessionHistory, SuccessAttempt

# -------------------------------------------------------------------
# Candidate keys (precedence order)
# -------------------------------------------------------------------
SUCCESS_LIST_KEYS = ("successResults", "success_results", "SuccessResults")
FAILURE_LIST_KEYS = ("failureResults", "failure_results", "FailureResults")

SESSION_MODE_KEYS = ("sessionMode", "session_mode", "mode")
LAST_ATTEMPT_KEYS = (
    "lastAttemptAt", "last_attempt_at",
    "lastLoggedInAt", "last_logged_in_at",
    "lastLoginAt", "last_login_at",
    "loggedInAt", "logged_in_at",
    "attemptedAt", "attempted_at",
)
REASON_KEYS = ("reason", "failureReason", "failure_reason")

FAILURE_INFO_KEYS = ("failureInfo", "failure_info", "failure", "error")
ERROR_MESSAGE_KEYS = ("errorMessage", "error_message", "message")
FLAT_ERROR_MESSAGE_KEYS = ("errorMessage", "error_message", "error")


class SessionShape(str, Enum):
    TEXT = "text"
    LIST = "list"
    STRUCTURED = "structured"
    SINGLE = "single"
    EMPTY = "empty"


def _text(record: Any, keys: Sequence[str]) -> Optional[str]:
    value = resolve_field(record, keys, accept=is_text)
    return value.strip() if value is not None else None


def _structured_list(raw: Mapping, keys: Sequence[str]) -> Optional[list]:
    return resolve_field(raw, keys, accept=lambda v: isinstance(v, list))


def classify_session_payload(raw: Any) -> SessionShape:
    """Decide which parsing branch a raw session-mode payload takes."""
    if isinstance(raw, str):
        return SessionShape.TEXT if raw.strip() else SessionShape.EMPTY
    if isinstance(raw, list):
        return SessionShape.LIST
    if isinstance(raw, Mapping):
        if _structured_list(raw, SUCCESS_LIST_KEYS) is not None or \
           _structured_list(raw, FAILURE_LIST_KEYS) is not None:
            return SessionShape.STRUCTURED
        return SessionShape.SINGLE
    return SessionShape.EMPTY


# -------------------------------------------------------------------
# Per-attempt extraction
# -------------------------------------------------------------------
A = TypeVar("A", bound=SuccessAttempt)


def _attempt_fields(entry: Any) -> Dict[str, Optional[str]]:
    return {
        "session_mode": _text(entry, SESSION_MODE_KEYS),
        "last_attempt_at": _text(entry, LAST_ATTEMPT_KEYS),
        "reason": _text(entry, REASON_KEYS),
    }


def _build(model: Type[A], fields: Dict[str, Optional[str]]) -> Optional[A]:
    attempt = model(**fields)
    return None if attempt.is_empty() else attempt


def parse_success_attempt(entry: Any) -> Optional[SuccessAttempt]:
    """One success attempt from a string (its session mode) or a mapping."""
    if isinstance(entry, str):
        mode = entry.strip()
        return SuccessAttempt(session_mode=mode) if mode else None
    if not isinstance(entry, Mapping):
        return None
    return _build(SuccessAttempt, _attempt_fields(entry))


def parse_failure_attempt(entry: Any) -> Optional[FailureAttempt]:
    """Like parse_success_attempt, plus an error message that may sit under failureInfo."""
    if not isinstance(entry, Mapping):
        return None
    fields = _attempt_fields(entry)
    message = resolve_nested_field(
        entry, FAILURE_INFO_KEYS, ERROR_MESSAGE_KEYS, FLAT_ERROR_MESSAGE_KEYS, accept=is_text
    )
    fields["error_message"] = message.strip() if message is not None else None
    return _build(FailureAttempt, fields)


def _collect(entries: list, parse: Callable[[Any], Optional[A]]) -> List[A]:
    out: List[A] = []
    for entry in entries:
        attempt = parse(entry)
        if attempt is not None:
            out.append(attempt)
    return out


# -------------------------------------------------------------------
# Shape handlers
# -------------------------------------------------------------------
def _from_text(raw: str) -> SessionHistory:
    return SessionHistory(successes=[SuccessAttempt(session_mode=raw.strip())])


def _from_list(raw: list) -> SessionHistory:
    # Arrays never imply failures
    return SessionHistory(successes=_collect(raw, parse_success_attempt))


def _from_structured(raw: Mapping) -> SessionHistory:
    return SessionHistory(
        successes=_collect(_structured_list(raw, SUCCESS_LIST_KEYS) or [], parse_success_attempt),
        failures=_collect(_structured_list(raw, FAILURE_LIST_KEYS) or [], parse_failure_attempt),
    )


def _from_single(raw: Mapping) -> SessionHistory:
    success = parse_success_attempt(raw)
    if success is not None:
        return SessionHistory(successes=[success])
    failure = parse_failure_attempt(raw)
    if failure is not None:
        return SessionHistory(failures=[failure])
    return SessionHistory()


def _from_nothing(raw: Any) -> SessionHistory:
    return SessionHistory()


SHAPE_HANDLERS: Dict[SessionShape, Callable[[Any], SessionHistory]] = {
    SessionShape.TEXT: _from_text,
    SessionShape.LIST: _from_list,
    SessionShape.STRUCTURED: _from_structured,
    SessionShape.SINGLE: _from_single,
    SessionShape.EMPTY: _from_nothing,
}


def parse_session_history(raw: Any) -> SessionHistory:
    """Turn any session-mode payload into a fresh SessionHistory. Never raises."""
    return SHAPE_HANDLERS[classify_session_payload(raw)](raw)
