def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_normalize_account_list(client, raw_accounts):
    r = client.post("/normalize/account", json=raw_accounts)
    assert r.status_code == 200, r.text
    out = r.json()
    assert out["ok"] is True
    assert out["kind"] == "account"
    assert [a["id"] for a in out["data"]] == ["acc-new", "acc-old", "acc-never"]
    old = out["data"][1]
    assert old["sortKey"] == "2024-01-01T00:00:00Z"
    assert old["sessionHistory"]["failures"][0]["errorMessage"] == "bad proxy"
    assert old["status"] == "ACTIVE" and old["isActive"] is True


def test_normalize_uses_requested_page_without_meta(client):
    r = client.post("/normalize/content?page=2&limit=20", json={"items": [{"id": str(i)} for i in range(5)]})
    assert r.status_code == 200
    assert r.json()["meta"] == {"page": 2, "limit": 20, "totalPages": 1, "total": 5}


def test_normalize_unknown_kind(client):
    r = client.post("/normalize/device", json=[])
    assert r.status_code == 404


def test_normalize_single_record(client):
    r = client.post("/normalize/proxy/record", json={"data": {"uuid": "p-1", "port": "3128"}})
    assert r.status_code == 200
    assert r.json()["item"]["port"] == 3128

    r = client.post("/normalize/proxy/record", json={"name": "no id"})
    assert r.status_code == 422


def test_session_history_endpoint(client):
    body = {
        "successResults": [{"sessionMode": "ephemeral", "lastLoggedInAt": "2024-02-02T00:00:00Z"}],
        "failureResults": [{"sessionMode": "persistent", "failureInfo": {"errorMessage": "bad proxy"}}],
    }
    r = client.post("/sessions/history", json=body)
    assert r.status_code == 200
    out = r.json()
    assert len(out["successes"]) == 1
    assert out["failures"][0]["errorMessage"] == "bad proxy"
    assert out["latestSuccess"]["sessionMode"] == "ephemeral"
    assert out["sortKey"] == "2024-02-02T00:00:00Z"


def test_session_history_from_plain_string(client):
    r = client.post("/sessions/history", json="persistent")
    out = r.json()
    assert out["successes"] == [{"sessionMode": "persistent", "lastAttemptAt": None, "reason": None}]
    assert out["failures"] == []
    assert out["latestFailure"] is None
    assert out["sortKey"] is None
