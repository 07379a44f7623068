import pytest

from socialdesk.normalizers.sessions import (
    SessionShape, classify_session_payload, parse_failure_attempt, parse_session_history,
)

@pytest.mark.parametrize("raw", [None, 0, 12.5, True, "", "   ", object()])
def test_unusable_payloads_give_empty_history(raw):
    h = parse_session_history(raw)
    assert h.successes == []
    assert h.failures == []

def test_string_is_one_success():
    h = parse_session_history("persistent")
    assert len(h.successes) == 1
    assert h.successes[0].session_mode == "persistent"
    assert h.successes[0].last_attempt_at is None
    assert h.failures == []

def test_array_elements_are_successes_only():
    h = parse_session_history([
        {"sessionMode": "ephemeral", "lastLoggedInAt": "2024-02-02T00:00:00Z"},
        {},                                  # empty -> dropped
        "persistent",
        {"failureInfo": {"errorMessage": "x"}},  # no success field -> dropped, never a failure
        42,
    ])
    assert [a.session_mode for a in h.successes] == ["ephemeral", "persistent"]
    assert h.successes[0].last_attempt_at == "2024-02-02T00:00:00Z"
    assert h.failures == []

def test_structured_success_and_failure_lists():
    h = parse_session_history({
        "successResults": [{"sessionMode": "ephemeral", "lastLoggedInAt": "2024-02-02T00:00:00Z"}],
        "failureResults": [{"sessionMode": "persistent", "failureInfo": {"errorMessage": "bad proxy"}}],
    })
    assert len(h.successes) == 1
    assert len(h.failures) == 1
    assert h.successes[0].session_mode == "ephemeral"
    assert h.failures[0].session_mode == "persistent"
    assert h.failures[0].error_message == "bad proxy"

@pytest.mark.parametrize("succ_key,fail_key", [
    ("success_results", "failure_results"),
    ("SuccessResults", "FailureResults"),
])
def test_structured_casing_variants(succ_key, fail_key):
    h = parse_session_history({
        succ_key: [{"mode": "a"}],
        fail_key: [{"last_login_at": "2024-01-01T00:00:00Z", "error_message": "timeout"}],
    })
    assert h.successes[0].session_mode == "a"
    assert h.failures[0].last_attempt_at == "2024-01-01T00:00:00Z"
    assert h.failures[0].error_message == "timeout"

def test_structured_beats_whole_object_fallback():
    # top-level fields must not be folded into an extra attempt
    raw = {"sessionMode": "persistent", "successResults": []}
    assert classify_session_payload(raw) is SessionShape.STRUCTURED
    h = parse_session_history(raw)
    assert h.successes == []
    assert h.failures == []

def test_single_object_as_success():
    h = parse_session_history({"mode": "persistent", "loggedInAt": "2024-01-01T00:00:00Z"})
    assert len(h.successes) == 1
    assert h.successes[0].last_attempt_at == "2024-01-01T00:00:00Z"
    assert h.failures == []

def test_single_object_falls_back_to_failure():
    h = parse_session_history({"failureInfo": {"errorMessage": "checkpoint required"}})
    assert h.successes == []
    assert h.failures[0].error_message == "checkpoint required"

def test_single_object_with_nothing_usable():
    h = parse_session_history({"foo": "bar", "sessionMode": "  "})
    assert h.successes == []
    assert h.failures == []

def test_failure_message_flat_fallback():
    f = parse_failure_attempt({"error": "rate limited"})
    assert f.error_message == "rate limited"
    f = parse_failure_attempt({"error": {"message": "nested"}})
    assert f.error_message == "nested"

def test_attempt_values_are_trimmed_strings():
    h = parse_session_history([{"sessionMode": " persistent ", "lastAttemptAt": 1704067200000}])
    assert h.successes[0].session_mode == "persistent"
    assert h.successes[0].last_attempt_at is None   # non-string timestamps are not attempt timestamps

def test_output_does_not_alias_input():
    raw = {"successResults": [{"sessionMode": "a"}]}
    h = parse_session_history(raw)
    raw["successResults"].append({"sessionMode": "b"})
    assert len(h.successes) == 1
