"""HTTP tests for the war tracker API.

The app is built through the real factory with fake collaborators
injected via AppContext, so routing, serialization and error handling
are exercised end to end without a database.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from tests.conftest import make_attack, make_participant, make_war
from tests.fakes.fake_war_store import FakeIPClient, FakeWarStore, failing_store
from warapi.app_factory import AppContext, create_app


def build_client(war_store, ip_client=None) -> TestClient:
    context = AppContext(war_store=war_store, ip_client=ip_client or FakeIPClient())
    app = create_app(context=context)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def war_documents(two_war_documents):
    unfinalized = make_war(
        "war-live",
        "2024-01-15T00:00:00.000Z",
        finalized=False,
        preparation_start_time="2024-01-14T00:00:00.000Z",
        participants=[make_participant("#A", "Alpha")],
    )
    cwl = make_war(
        "war-cwl",
        "2024-01-05T00:00:00.000Z",
        war_type="cwl",
        clan_score=20,
        opponent_score=10,
        participants=[make_participant("#B", "Bravo", 1, 1, [make_attack(2, 80)])],
    )
    return two_war_documents + [unfinalized, cwl]


@pytest.fixture
def store(war_documents):
    return FakeWarStore(war_documents)


@pytest.fixture
def client(store):
    with build_client(store) as test_client:
        yield test_client


class TestHealth:
    def test_health_reports_ok(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "OK"
        assert payload["timestamp"].endswith("Z")

    def test_myip_reports_outbound_ip(self, client):
        response = client.get("/api/myip")

        assert response.status_code == 200
        payload = response.json()
        assert payload["outboundIP"] == "203.0.113.7"
        assert "Clash of Clans API token" in payload["message"]
        assert "developer.clashofclans.com" in payload["instructions"]
        assert payload["timestamp"]

    def test_myip_lookup_failure_returns_500_with_message(self, store):
        with build_client(store, FakeIPClient(error="Failed to parse IP data")) as client:
            response = client.get("/api/myip")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse IP data"}


class TestCurrentWar:
    def test_returns_latest_by_preparation_start(self, client):
        response = client.get("/api/wars/current")

        assert response.status_code == 200
        assert response.json()["warId"] == "war-live"

    def test_no_wars_returns_404(self):
        with build_client(FakeWarStore()) as client:
            response = client.get("/api/wars/current")

        assert response.status_code == 404
        assert response.json() == {"message": "No war data found"}


class TestWarStats:
    def test_default_uses_ten_finalized_wars(self, client, store):
        response = client.get("/api/wars/stats")

        assert response.status_code == 200
        assert store.calls[-1] == ("find_finalized_wars", 10, None)
        payload = response.json()
        assert payload["summary"]["totalWarsAnalyzed"] == 3
        assert payload["summary"]["totalMembers"] == 2
        assert set(payload) == {"summary", "memberStats", "warTrends", "attackUsageDistribution"}

    def test_count_and_war_type_are_forwarded(self, client, store):
        response = client.get("/api/wars/stats", params={"count": "2", "warType": "regular"})

        assert response.status_code == 200
        assert store.calls[-1] == ("find_finalized_wars", 2, "regular")
        payload = response.json()
        [member] = payload["memberStats"]
        assert member["tag"] == "#A"
        assert member["attackUsedPercentage"] == "50.00"
        assert member["averageStarsPerAttack"] == "3.00"
        assert member["averageDestructionPercentage"] == "100.00"
        assert [t["won"] for t in payload["warTrends"]] == [True, False]
        assert payload["summary"]["dateRange"] == {
            "from": "2024-01-01T00:00:00.000Z",
            "to": "2024-01-08T00:00:00.000Z",
        }
        assert payload["attackUsageDistribution"]["26-50%"] == 1

    @pytest.mark.parametrize("raw_count", ["abc", "0", "-3", ""])
    def test_invalid_count_falls_back_to_default(self, client, store, raw_count):
        client.get("/api/wars/stats", params={"count": raw_count})

        assert store.calls[-1] == ("find_finalized_wars", 10, None)

    def test_no_finalized_wars_returns_message(self, client):
        response = client.get("/api/wars/stats", params={"warType": "friendly"})

        assert response.status_code == 200
        assert response.json() == {"message": "No finalized wars found", "stats": None}

    def test_store_failure_returns_generic_500(self):
        with build_client(failing_store()) as client:
            response = client.get("/api/wars/stats")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch war statistics"}


class TestMemberHistory:
    def test_history_for_member(self, client, store):
        response = client.get("/api/members/%23A/history")

        assert response.status_code == 200
        assert store.calls[-1] == ("find_member_wars", "#A", 10)
        payload = response.json()
        assert payload["memberTag"] == "#A"
        assert payload["memberName"] == "Alpha"
        assert payload["warsFound"] == 2
        newest = payload["history"][0]
        assert newest["warId"] == "war-b"
        assert newest["won"] is False
        assert newest["warType"] == "regular"
        assert newest["teamSize"] == 1
        assert newest["memberData"]["tag"] == "#A"
        assert newest["memberData"]["attacksUsed"] == 0

    def test_count_limits_history(self, client, store):
        response = client.get("/api/members/%23A/history", params={"count": "1"})

        assert store.calls[-1] == ("find_member_wars", "#A", 1)
        assert response.json()["warsFound"] == 1

    def test_unknown_member_gets_empty_history(self, client):
        response = client.get("/api/members/%23NOPE/history")

        assert response.status_code == 200
        assert response.json() == {
            "memberTag": "#NOPE",
            "memberName": "Unknown",
            "warsFound": 0,
            "history": [],
        }

    def test_store_failure_returns_500(self):
        with build_client(failing_store()) as client:
            response = client.get("/api/members/%23A/history")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch member history"}


class TestListWars:
    def test_first_page(self, client, store):
        response = client.get("/api/wars")

        assert response.status_code == 200
        assert ("list_finalized_wars", 0, 20) in store.calls
        payload = response.json()
        assert [w["warId"] for w in payload["wars"]] == ["war-b", "war-cwl", "war-a"]
        assert payload["pagination"] == {"page": 1, "limit": 20, "totalWars": 3, "totalPages": 1}

    def test_second_page(self, client, store):
        response = client.get("/api/wars", params={"page": "2", "limit": "2"})

        assert ("list_finalized_wars", 2, 2) in store.calls
        payload = response.json()
        assert [w["warId"] for w in payload["wars"]] == ["war-a"]
        assert payload["pagination"] == {"page": 2, "limit": 2, "totalWars": 3, "totalPages": 2}

    def test_object_ids_and_datetimes_are_serialized(self):
        war = make_war("w1", "2024-01-01")
        war["_id"] = ObjectId("65a1b2c3d4e5f6a7b8c9d0e1")
        war["endTime"] = datetime(2024, 1, 1, tzinfo=timezone.utc)

        with build_client(FakeWarStore([war])) as client:
            response = client.get("/api/wars")

        [listed] = response.json()["wars"]
        assert listed["_id"] == "65a1b2c3d4e5f6a7b8c9d0e1"
        assert listed["endTime"] == "2024-01-01T00:00:00+00:00"

    def test_store_failure_returns_500(self):
        with build_client(failing_store()) as client:
            response = client.get("/api/wars")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch wars"}


class TestGetWar:
    def test_returns_war_by_id(self, client):
        response = client.get("/api/wars/war-cwl")

        assert response.status_code == 200
        assert response.json()["warType"] == "cwl"

    def test_unknown_id_returns_404_with_message(self, client):
        response = client.get("/api/wars/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"message": "War not found"}

    def test_store_failure_returns_500(self):
        with build_client(failing_store()) as client:
            response = client.get("/api/wars/war-a")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch war"}


class TestUnhandledErrors:
    def test_unexpected_exception_returns_generic_500(self):
        store = FakeWarStore(error=RuntimeError("boom"))

        with build_client(store) as client:
            response = client.get("/api/wars/war-a")

        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong!"}


class TestQueryLimits:
    def test_oversized_count_is_capped_before_reaching_store(self, client, store):
        response = client.get("/api/wars/stats", params={"count": "9" * 30})

        assert response.status_code == 200
        assert store.calls[-1] == ("find_finalized_wars", 2**31 - 1, None)

    def test_underscored_limit_falls_back_to_default(self, client, store):
        client.get("/api/wars", params={"limit": "1_000"})

        assert ("list_finalized_wars", 0, 20) in store.calls
