# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from socialdesk.main import app
from socialdesk.upstream import UpstreamError, get_upstream


class FakeUpstream:
    """
    Stand-in for UpstreamClient.
    Serves canned payloads per resource and records every call.
    """
    def __init__(self):
        self.lists = {}      # resource -> payload
        self.records = {}    # (resource, id) -> payload
        self.errors = {}     # resource -> UpstreamError
        self.calls = []

    def list(self, resource, page, limit, **filters):
        self.calls.append(("list", resource, page, limit, filters))
        if resource in self.errors:
            raise self.errors[resource]
        return self.lists.get(resource, [])

    def get(self, resource, item_id):
        self.calls.append(("get", resource, item_id))
        if resource in self.errors:
            raise self.errors[resource]
        if (resource, item_id) not in self.records:
            raise UpstreamError("Not Found", 404)
        return self.records[(resource, item_id)]


@pytest.fixture
def upstream():
    return FakeUpstream()


# --- Override FastAPI's upstream dependency with the fake ---
@pytest.fixture(autouse=True)
def override_upstream(upstream):
    app.dependency_overrides[get_upstream] = lambda: upstream
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


# --- Sample raw payloads in the shapes the backend actually sends ---
@pytest.fixture
def raw_accounts():
    return {
        "data": [
            {
                "id": "acc-old",
                "username": "old.one",
                "status": "ACTIVE",
                "sessionMode": {
                    "successResults": [
                        {"sessionMode": "persistent", "lastLoggedInAt": "2024-01-01T00:00:00Z"},
                    ],
                    "failureResults": [
                        {"sessionMode": "persistent", "lastLoggedInAt": "2024-06-01T00:00:00Z",
                         "failureInfo": {"errorMessage": "bad proxy"}},
                    ],
                },
            },
            {
                "_id": "acc-new",
                "userName": "new.one",
                "isActive": True,
                "session_mode": [{"mode": "ephemeral", "lastLoginAt": "2024-03-01T00:00:00Z"}],
            },
            {"username": "no-id"},
            {"uuid": "acc-never", "username": "never", "sessionMode": None},
        ],
        "meta": {"total": 4, "page": 1, "limit": 10},
    }
