"""
API endpoint tests using FastAPI TestClient.

The app is wired with a real store, aggregator and scheduler over mock
collectors; no network access is needed.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.main import UpdatePipeline
from trend_search.processing.pipeline import TrendAggregator
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.memory import TrendStore
from trend_search.types import SourceType, TriggerResult
from tests.fixtures import create_item, create_trend
from tests.mocks import FailingCollector, MockCollector


def build_components(collectors=None):
    store = TrendStore()
    orchestrator = CollectorOrchestrator()
    for collector in collectors or []:
        orchestrator.register(collector)
    pipeline = UpdatePipeline(orchestrator, TrendAggregator(), store)
    scheduler = UpdateScheduler(pipeline.run, interval_seconds=3600)
    return store, scheduler, orchestrator


@pytest.fixture
def components():
    collectors = [
        MockCollector(
            name="Feeds",
            source=SourceType.RSS,
            items=[
                create_item(title="Google releases new AI model", source=SourceType.RSS),
                create_item(title="Bakery opens downtown", source=SourceType.RSS),
            ],
        ),
        MockCollector(
            name="Tweets",
            source=SourceType.TWITTER,
            items=[create_item(title="Baseball final tonight", source=SourceType.TWITTER)],
        ),
    ]
    return build_components(collectors)


@pytest.fixture
def client(components):
    store, scheduler, orchestrator = components
    app = create_app(store, scheduler, orchestrator)
    return TestClient(app)


@pytest.fixture
def seeded(components):
    """Store pre-populated with three trends in rank order."""
    store, _, _ = components
    trends = [
        create_trend(
            topic="AI chip launch",
            category="technology",
            score=40.0,
            sources=[
                create_item(title="AI chip launch", source=SourceType.RSS),
                create_item(title="AI chip launch reaction", source=SourceType.TWITTER),
            ],
        ),
        create_trend(topic="Stock rally", category="business", score=20.0),
        create_trend(topic="New gadget review", category="technology", score=10.0),
    ]
    store.set_aggregated(trends)
    return trends


# ============================================================================
# Root and Health
# ============================================================================


def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "operational"
    assert data["endpoints"]["trends"] == "/api/trends"


def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "timestamp" in data


def test_health_check_on_empty_system():
    app = create_app(*build_components())
    response = TestClient(app).get("/api/health")
    assert response.status_code == 200


def test_collector_health(components):
    store, scheduler, orchestrator = components
    orchestrator.register(FailingCollector(RuntimeError("dns"), name="Broken"))
    client = TestClient(create_app(store, scheduler, orchestrator))

    response = client.get("/api/health/collectors")

    assert response.status_code == 200
    data = response.json()
    assert data["healthy"] is False
    assert data["collectors"] == {"Feeds": True, "Tweets": True, "Broken": False}


# ============================================================================
# Trends
# ============================================================================


def test_list_trends_empty(client):
    response = client.get("/api/trends")

    assert response.status_code == 200
    data = response.json()
    assert data["trends"] == []
    assert data["count"] == 0
    assert data["last_update"] is None


def test_list_trends_in_rank_order(client, seeded):
    response = client.get("/api/trends")

    data = response.json()
    assert data["count"] == 3
    assert [t["topic"] for t in data["trends"]] == [t.topic for t in seeded]


def test_list_trends_filter_by_category(client, seeded):
    response = client.get("/api/trends", params={"category": "Technology"})

    data = response.json()
    assert data["count"] == 2
    assert {t["category"] for t in data["trends"]} == {"technology"}


def test_list_trends_filter_by_source(client, seeded):
    response = client.get("/api/trends", params={"source": "twitter"})

    data = response.json()
    assert [t["topic"] for t in data["trends"]] == ["AI chip launch"]


def test_list_trends_limit(client, seeded):
    response = client.get("/api/trends", params={"limit": 1})

    data = response.json()
    assert data["count"] == 1
    assert data["trends"][0]["topic"] == "AI chip launch"


@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"source": "fax"}])
def test_list_trends_invalid_query(client, params):
    response = client.get("/api/trends", params=params)

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_get_trend_by_id(client, seeded):
    response = client.get(f"/api/trends/{seeded[1].id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == seeded[1].id
    assert data["topic"] == "Stock rally"
    assert data["sources"][0]["source"] == "rss"


def test_get_trend_not_found(client):
    response = client.get("/api/trends/does-not-exist")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Trend not found"
    assert data["code"] == "HTTP_404"
    assert "timestamp" in data


# ============================================================================
# Update and Status
# ============================================================================


def test_manual_update(client):
    response = client.post("/api/update")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Update completed"
    assert data["item_count"] == 3
    assert data["trend_count"] == 3

    trends = client.get("/api/trends").json()
    assert trends["count"] == 3
    assert trends["last_update"] is not None


def test_manual_update_conflict(client, components, monkeypatch):
    _, scheduler, _ = components

    async def busy():
        return TriggerResult(started=False)

    monkeypatch.setattr(scheduler, "trigger_now", busy)

    response = client.post("/api/update")

    assert response.status_code == 409
    assert response.json() == {"message": "Update already in progress"}


def test_status_before_update(client):
    response = client.get("/api/status")

    assert response.status_code == 200
    data = response.json()
    assert data["is_running"] is False
    assert data["is_scheduled"] is False
    assert data["last_update_at"] is None
    assert data["interval_ms"] == 3_600_000
    assert data["item_count"] == 0
    assert data["trend_count"] == 0
    assert [c["name"] for c in data["collectors"]] == ["Feeds", "Tweets"]
    assert all(c["healthy"] is False for c in data["collectors"])


def test_status_after_update(client):
    client.post("/api/update")

    data = client.get("/api/status").json()

    assert data["last_update_at"] is not None
    assert data["item_count"] == 3
    collectors = {c["name"]: c for c in data["collectors"]}
    assert collectors["Feeds"]["healthy"] is True
    assert collectors["Feeds"]["last_item_count"] == 2
    assert collectors["Tweets"]["source"] == "twitter"


# ============================================================================
# Metrics and Errors
# ============================================================================


def test_metrics_endpoint(client):
    client.get("/api/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "api_requests_total" in response.text


class BrokenStore(TrendStore):
    def get_aggregated(self):
        raise RuntimeError("cache corrupted")


def test_unexpected_error_returns_500():
    _, scheduler, orchestrator = build_components()
    app = create_app(BrokenStore(), scheduler, orchestrator)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/trends")

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "cache corrupted" not in data["detail"]
