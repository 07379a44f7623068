from socialdesk.upstream import UpstreamError


def test_list_threads_accounts(client, upstream, raw_accounts):
    upstream.lists["threads-accounts"] = raw_accounts
    r = client.get("/threads-accounts", params={"page": 1, "limit": 10, "search": "ne", "status": "active"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["data"][0]["id"] == "acc-new"
    assert data["meta"]["total"] == 4
    assert upstream.calls[0] == ("list", "threads-accounts", 1, 10, {"search": "ne", "status": "active"})


def test_list_rejects_bad_status_filter(client):
    r = client.get("/threads-accounts", params={"status": "everything"})
    assert r.status_code == 422


def test_list_contents_derives_meta(client, upstream):
    upstream.lists["contents"] = [{"id": "c-1", "body": "hi"}, {"title": "no id"}]
    r = client.get("/contents", params={"page": 1, "limit": 10})
    assert r.status_code == 200
    data = r.json()
    assert [c["id"] for c in data["data"]] == ["c-1"]
    assert data["meta"] == {"page": 1, "limit": 10, "totalPages": 1, "total": 2}


def test_list_publish_jobs_and_proxies(client, upstream):
    upstream.lists["publish-jobs"] = {"data": [{"id": "j-1", "status": "QUEUED"}]}
    upstream.lists["proxies"] = {"items": [{"id": "p-1", "active": 1}]}
    assert client.get("/publish-jobs").json()["data"][0]["status"] == "QUEUED"
    assert client.get("/proxies").json()["data"][0]["isActive"] is True


def test_list_watchlist_accounts(client, upstream):
    upstream.lists["watchlist-accounts"] = {"data": [{"id": "w-1", "handle": "news"}]}
    r = client.get("/watchlist-accounts")
    assert r.status_code == 200
    assert r.json()["data"][0]["username"] == "news"


def test_upstream_failure_is_502(client, upstream):
    upstream.errors["contents"] = UpstreamError("boom", 500)
    r = client.get("/contents")
    assert r.status_code == 502
    assert "boom" in r.json()["detail"]


def test_options(client, upstream):
    upstream.lists["categories"] = {"data": [{"id": "c-1", "title": "News"}, {"name": "no id"}]}
    r = client.get("/options/categories")
    assert r.status_code == 200
    assert r.json()["options"] == [{"id": "c-1", "name": "News", "username": None}]
    assert upstream.calls[-1] == ("list", "categories", 1, 100, {})


def test_options_unknown_resource(client):
    assert client.get("/options/contents").status_code == 404


def test_get_record(client, upstream):
    upstream.records[("threads-accounts", "acc-1")] = {"data": {"id": "acc-1", "sessionMode": "persistent"}}
    r = client.get("/threads-accounts/acc-1")
    assert r.status_code == 200
    assert r.json()["sessionMode"] == "persistent"


def test_get_record_not_found(client, upstream):
    assert client.get("/contents/missing").status_code == 404
    upstream.records[("contents", "empty")] = {"data": {}}
    assert client.get("/contents/empty").status_code == 404


def test_get_record_unknown_resource(client):
    assert client.get("/devices/D001").status_code == 404
