import pytest

from datetime import datetime, timezone

from socialdesk.normalizers.rules import (
    coerce_status, norm_bool, parse_timestamp, to_int, to_iso, to_number, to_text,
)

# --- status coercion ---

def test_status_bool_passes_through():
    assert coerce_status(True) == ("Active", True)
    assert coerce_status(False) == ("Inactive", False)

def test_status_numbers():
    assert coerce_status(1) == ("Active", True)
    assert coerce_status(0) == ("Inactive", False)
    assert coerce_status(2) == ("Inactive", False)

def test_status_string_keeps_original_label():
    s = coerce_status("ENABLED")
    assert s.label == "ENABLED"
    assert s.is_active is True

    s = coerce_status("  suspended ")
    assert s.label == "suspended"
    assert s.is_active is False

def test_status_allow_list():
    for v in ("active", "Enabled", "TRUE", "1"):
        assert coerce_status(v).is_active, v
    for v in ("inactive", "yes", "0", "running"):
        assert not coerce_status(v).is_active, v

def test_status_empty_string_gets_derived_label():
    assert coerce_status("   ") == ("Inactive", False)

def test_status_other_types():
    assert coerce_status(None) == ("Inactive", False)
    assert coerce_status({"active": True}) == ("Inactive", False)

# --- booleans / text / numbers ---

def test_norm_bool_phrases():
    assert norm_bool("Yes") is True
    assert norm_bool("verified") is True
    assert norm_bool("unverified") is False
    assert norm_bool(0) is False
    assert norm_bool("maybe") is None
    assert norm_bool(None) is None

def test_to_text():
    assert to_text("  hi ") == "hi"
    assert to_text("   ") is None
    assert to_text(42) == "42"
    assert to_text(42.0) == "42"
    assert to_text(True) is None
    assert to_text(float("nan")) is None
    assert to_text(["x"]) is None

def test_to_number_discards_non_finite():
    assert to_number("8080") == 8080
    assert to_number(" 1.5 ") == 1.5
    assert to_number("inf") is None
    assert to_number("nan") is None
    assert to_number(float("inf")) is None
    assert to_number("abc") is None
    assert to_number(True) is None
    assert to_int("12.9") == 12

# --- dates ---

def test_parse_timestamp_variants():
    utc = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T00:00:00Z") == utc
    assert parse_timestamp("2024-01-01T02:00:00+02:00") == utc
    assert parse_timestamp("2024-01-01") == utc
    assert parse_timestamp(1704067200000) == utc
    assert parse_timestamp(datetime(2024, 1, 1)) == utc

def test_parse_timestamp_rejects_garbage():
    for v in ("not-a-date", "", None, True, [], float("nan")):
        assert parse_timestamp(v) is None

def test_to_iso_format():
    assert to_iso("2024-01-01T00:00:00Z") == "2024-01-01T00:00:00.000Z"
    assert to_iso("2024-05-06T07:08:09.123+00:00") == "2024-05-06T07:08:09.123Z"
    assert to_iso("bad") is None


# --- values at the edge of the datetime range ---

@pytest.mark.parametrize("value", [
    "0001-01-01T00:00:00+01:00",
    "9999-12-31T23:00:00-05:00",
    10**20,
    10**400,
    float("inf"),
])
def test_out_of_range_timestamps_are_none(value):
    assert parse_timestamp(value) is None
    assert to_iso(value) is None

def test_edge_of_range_still_parses():
    assert to_iso("0001-01-01T00:00:00Z") == "0001-01-01T00:00:00.000Z"
    assert to_iso("9999-12-31T23:59:59Z") == "9999-12-31T23:59:59.000Z"

def test_text_of_oversized_int_is_none():
    assert to_text(10**5000) is None
