# socialdesk/normalizers/rules.py
import math
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional, Union

# Lower-cased strings that mean "active" for the status rule
ACTIVE_STATUS_VALUES = frozenset({"active", "enabled", "true", "1"})

TRUTHY_PHRASES = frozenset({"true", "yes", "y", "1", "enabled", "on", "verified"})
FALSY_PHRASES = frozenset({"false", "no", "n", "0", "disabled", "off", "unverified"})


class StatusResult(NamedTuple):
    label: str
    is_active: bool


# --- Individual value helpers (never raise; bad input -> None) ---

def coerce_status(value: Any) -> StatusResult:
    """
    Resolve the boolean/status ambiguity shared by accounts and proxies.

      bool         -> passes through, label "Active"/"Inactive"
      number       -> 1 is active, anything else inactive
      string       -> active if its lower-cased form is in ACTIVE_STATUS_VALUES;
                      the label keeps the original (trimmed) text
      anything else-> inactive
    """
    if isinstance(value, bool):
        return StatusResult("Active" if value else "Inactive", value)
    if isinstance(value, (int, float)):
        active = value == 1
        return StatusResult("Active" if active else "Inactive", active)
    if isinstance(value, str):
        text = value.strip()
        active = text.lower() in ACTIVE_STATUS_VALUES
        return StatusResult(text or ("Active" if active else "Inactive"), active)
    return StatusResult("Inactive", False)


def norm_bool(value: Any) -> Optional[bool]:
    """Convert bools, 0/1 and free-form yes/no strings into True/False/None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if not isinstance(value, str):
        return None
    t = value.strip().lower()
    if t in TRUTHY_PHRASES:
        return True
    if t in FALSY_PHRASES:
        return False
    return None


def to_text(value: Any) -> Optional[str]:
    """Trimmed non-empty string; numbers are stringified; everything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:  # beyond the interpreter's int digit limit
            return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    return None


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Parse ints, floats and numeric strings; drop NaN/inf and everything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def to_int(value: Any) -> Optional[int]:
    n = to_number(value)
    if n is None:
        return None
    return int(n)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-ish string, a datetime, or epoch milliseconds into an
    aware UTC datetime. Naive values are taken as UTC; anything that falls
    outside the datetime range after conversion is None.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)):
            if not math.isfinite(value):
                return None
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            dt = datetime.fromisoformat(text.replace("Z", "+00:00").replace("z", "+00:00"))
        else:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def to_iso(value: Any) -> Optional[str]:
    """ISO-8601 UTC with millisecond precision (2024-01-01T00:00:00.000Z), or None."""
    dt = parse_timestamp(value)
    if dt is None:
        return None
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
