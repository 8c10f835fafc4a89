import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import mock_client, platform, user_record
from cp_tracker.api.deps import get_fetcher, get_settings, get_store
from cp_tracker.main import app
from cp_tracker.services.external.fetcher import PlatformFetcher

CODECHEF_PAGE = '<div class="rating-number">1700</div><div class="rating-title">Specialist</div>'


def upstream(request):
    if request.url.host == "codeforces.com":
        return httpx.Response(400, json={"status": "FAILED", "comment": "handles: User with handle ghost not found"})
    if request.url.host == "leetcode.com":
        return httpx.Response(502, text="bad gateway")
    return httpx.Response(200, text=CODECHEF_PAGE)


@pytest.fixture
def client(store, config):
    async def fetcher_override():
        async with mock_client(upstream) as http:
            yield PlatformFetcher(config, http)

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: config
    app.dependency_overrides[get_fetcher] = fetcher_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def seed(store):
    store.put("users", "A", user_record("A", batch="2024", platforms={"codeforces": platform("a", solved=120, rating=1600)}))
    store.put("users", "B", user_record("B", batch="2024", platforms={"codeforces": platform("b", solved=120, rating=1800)}))
    store.put("users", "C", user_record("C", batch="2025", platforms={"codechef": platform("c", solved=90, rating=2000)}))
    store.put("users", "M", user_record("M", role="mentor", platforms={"leetcode": platform("m", solved=900)}))


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_leaderboard_all_time(client, store):
    seed(store)
    body = client.get("/api/v1/leaderboard").json()
    assert [e["userId"] for e in body] == ["B", "A", "C"]
    assert [e["rank"] for e in body] == [1, 2, 3]
    assert body[0]["averageRating"] == 1800
    assert body[0]["platforms"]["codeforces"] == 120


def test_leaderboard_rejects_unknown_timeframe(client):
    assert client.get("/api/v1/leaderboard", params={"timeframe": "yearly"}).status_code == 422


def test_analytics_endpoints(client, store):
    seed(store)
    batches = client.get("/api/v1/analytics/batches").json()
    assert [(b["batch"], b["avgSolved"]) for b in batches] == [("2024", 120), ("2025", 90)]

    top = client.get("/api/v1/analytics/top-performers", params={"n": 2}).json()
    assert [e["userId"] for e in top] == ["B", "A"]

    summary = client.get("/api/v1/analytics/summary").json()
    assert summary["totalMembers"] == 3
    assert summary["mentors"] == 1
    assert summary["totalSolved"] == 330


def test_register_and_get_user(client):
    created = client.post("/api/v1/users", json={"name": "Ada", "batch": "2025", "rollNumber": "21CS001"})
    assert created.status_code == 201
    user_id = created.json()["id"]
    fetched = client.get(f"/api/v1/users/{user_id}").json()
    assert fetched["rollNumber"] == "21CS001"
    assert fetched["approved"] is False


def test_register_mentor_with_bad_code(client):
    resp = client.post("/api/v1/users", json={"name": "Mo", "mentorCode": "nope"})
    assert resp.status_code == 403


def test_unknown_user_is_404(client):
    assert client.get("/api/v1/users/missing").status_code == 404


def test_connect_codechef(client, store):
    store.put("users", "u1", user_record("u1"))
    resp = client.post("/api/v1/users/u1/platforms/codechef", json={"username": "chef"})
    assert resp.status_code == 200
    profile = resp.json()["platforms"]["codechef"]
    assert profile["rating"] == 1700
    assert profile["stars"] == "Unrated"
    assert profile["rank"] == "Specialist"


def test_connect_maps_platform_errors(client, store):
    store.put("users", "u1", user_record("u1"))
    not_found = client.post("/api/v1/users/u1/platforms/codeforces", json={"username": "ghost"})
    assert not_found.status_code == 404
    upstream_down = client.post("/api/v1/users/u1/platforms/leetcode", json={"username": "x"})
    assert upstream_down.status_code == 502


def test_connect_rejects_unknown_platform(client, store):
    store.put("users", "u1", user_record("u1"))
    resp = client.post("/api/v1/users/u1/platforms/atcoder", json={"username": "x"})
    assert resp.status_code == 422


def test_refresh_reports_partial_failures(client, store):
    store.put("users", "u1", user_record("u1", platforms={
        "leetcode": platform("x", solved=4),
        "codechef": platform("chef", solved=1),
    }))
    body = client.post("/api/v1/users/u1/refresh").json()
    assert set(body["errors"]) == {"leetcode"}
    assert body["user"]["platforms"]["codechef"]["rating"] == 1700
    assert body["user"]["platforms"]["leetcode"]["problemsSolved"] == 4


def test_platform_lookup(client):
    resp = client.get("/api/v1/platforms/codechef/chef")
    assert resp.status_code == 200
    body = resp.json()
    assert body["platform"] == "codechef"
    assert body["profile"]["rating"] == 1700
    assert "submissions" not in body


def test_topics_empty_without_codeforces(client, store):
    store.put("users", "u1", user_record("u1"))
    assert client.get("/api/v1/users/u1/topics").json() == []


def test_connect_rejects_blank_username(client, store):
    store.put("users", "u1", user_record("u1"))
    resp = client.post("/api/v1/users/u1/platforms/codechef", json={"username": "   "})
    assert resp.status_code == 422
    assert store.get("users", "u1")["platforms"] == {}


def test_connect_strips_username(client, store):
    store.put("users", "u1", user_record("u1"))
    resp = client.post("/api/v1/users/u1/platforms/codechef", json={"username": "  chef "})
    assert resp.status_code == 200
    assert resp.json()["platforms"]["codechef"]["username"] == "chef"


def test_malformed_user_record_is_409(client, store):
    store.put("users", "bad", user_record("bad", platforms={"leetcode": {"problemsSolved": "lots"}}))
    assert client.get("/api/v1/users/bad").status_code == 409
    assert client.post("/api/v1/users/bad/refresh").status_code == 409
    assert client.get("/api/v1/users/bad/topics").status_code == 409
