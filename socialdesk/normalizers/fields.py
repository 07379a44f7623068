# socialdesk/normalizers/fields.py
import math
from collections.abc import Mapping
from typing import Any, Callable, Optional, Sequence

Accept = Callable[[Any], bool]


def resolve_field(record: Any, candidate_keys: Sequence[str], *, accept: Optional[Accept] = None):
    """
    Return the value of the first candidate key present on `record`.

    A key counts as present when it exists and its value is not None
    (and, if `accept` is given, `accept(value)` is true).
    Non-mapping records and unmatched keys yield None. Never raises.
    """
    if not isinstance(record, Mapping):
        return None
    for key in candidate_keys:
        value = record.get(key)
        if value is None:
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


def resolve_relation(record: Any, relation_keys: Sequence[str]) -> Optional[Mapping]:
    """First mapping-valued relation on `record`, or None."""
    return resolve_field(record, relation_keys, accept=lambda v: isinstance(v, Mapping))


def resolve_nested_field(
    record: Any,
    relation_keys: Sequence[str],
    field_keys: Sequence[str],
    flat_keys: Sequence[str] = (),
    *,
    accept: Optional[Accept] = None,
):
    """
    Resolve a field that may live on a nested relation object.

    Looks up the relation (e.g. `proxy`, `proxyInfo`), resolves `field_keys`
    on it, then falls back to `flat_keys` on the top-level record when the
    relation is absent or carries none of the fields.
    """
    relation = resolve_relation(record, relation_keys)
    if relation is not None:
        value = resolve_field(relation, field_keys, accept=accept)
        if value is not None:
            return value
    return resolve_field(record, flat_keys, accept=accept)


# --- Common accept predicates ---

def is_text(value: Any) -> bool:
    """Non-blank string."""
    return isinstance(value, str) and bool(value.strip())


def is_scalar_id(value: Any) -> bool:
    """String or number that stringifies to something non-blank."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return is_text(value)
