"""
Test suite for the dashboard HTTP surface.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from daily_climate.app import build_dashboard, create_app
from daily_climate.config import ConfigError, Settings
from daily_climate.external_api import NYTimesClient, OpenWeatherMapClient, ProviderError


@pytest.fixture
def client(make_dashboard):
    """Create a test client around a dashboard backed by client doubles."""
    with TestClient(create_app(make_dashboard())) as test_client:
        yield test_client


class TestRootEndpoint:
    """Test cases for the root endpoint."""

    def test_root_endpoint_success(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "The Daily Climate"
        assert data["status"] == "active"
        assert data["endpoints"]["dashboard"] == "/dashboard"


class TestLocationEndpoint:
    """Test cases for location submission."""

    def test_submit_and_wait(self, client):
        response = client.post("/location?wait_for_forecast=true", json={"query": "New York"})

        assert response.status_code == 202
        data = response.json()
        assert data["resolved"] is True
        assert data["coordinates"]["latitude"] == 40.7128
        assert data["error"] is None

        view = client.get("/dashboard").json()
        assert view["current"]["temperature"] == 72
        assert view["unit_label"] == "°F"
        assert len(view["hourly"]) == 8
        assert len(view["daily"]) == 7

    def test_empty_query(self, client, weather_client):
        response = client.post("/location", json={"query": "  "})

        assert response.status_code == 422
        assert "empty" in response.json()["detail"]
        weather_client.geocode.assert_not_called()

    def test_missing_body(self, client):
        assert client.post("/location", json={}).status_code == 422

    def test_unresolved_query(self, client, weather_client):
        weather_client.geocode.return_value = []

        response = client.post("/location", json={"query": "Atlantis"})

        assert response.status_code == 202
        assert response.json()["resolved"] is False
        assert "not found" in response.json()["error"]


class TestDashboardEndpoint:
    """Test cases for the dashboard view."""

    def test_headlines_loaded_at_startup(self, client, news_client):
        client.portal.call(client.app.state.dashboard.wait_idle)

        view = client.get("/dashboard").json()

        assert news_client.top_stories.await_count == 1
        assert [h["title"] for h in view["headlines"]] == [f"Story {i}" for i in range(5)]
        assert view["coordinates"] is None

    def test_hourly_limit_parameter(self, client):
        client.post("/location?wait_for_forecast=true", json={"query": "New York"})

        assert len(client.get("/dashboard?hourly_limit=24").json()["hourly"]) == 24
        assert client.get("/dashboard?hourly_limit=-1").status_code == 422


class TestHealthEndpoint:
    """Test cases for the health check endpoint."""

    def test_healthy(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["checks"] == {"openweathermap_api": "healthy", "nytimes_api": "healthy"}

    def test_unhealthy_provider(self, client, news_client):
        news_client.health_check.return_value = False

        data = client.get("/health").json()

        assert data["status"] == "unhealthy"
        assert data["checks"]["nytimes_api"] == "unhealthy"


class TestErrorHandling:
    """Test the global exception handler."""

    def test_unhandled_error_returns_error_body(self, make_dashboard, weather_client):
        weather_client.health_check.side_effect = RuntimeError("unexpected")

        with TestClient(create_app(make_dashboard()), raise_server_exceptions=False) as test_client:
            response = test_client.get("/health")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": 500,
        }


class TestShutdown:
    """Test that shutdown cancels in-flight fetches."""

    def test_pending_headline_fetch_cancelled(self, make_dashboard, news_client):
        started = []

        async def never_returns():
            started.append(True)
            await asyncio.Event().wait()

        news_client.top_stories = AsyncMock(side_effect=never_returns)
        board = make_dashboard()

        with TestClient(create_app(board)) as test_client:
            test_client.portal.call(asyncio.sleep, 0.01)
            assert test_client.get("/").status_code == 200

        assert started == [True]
        assert board._tasks == set()
        assert board.headlines == []


class TestStartup:
    """Test dashboard construction from the environment."""

    def test_missing_credentials_abort_startup(self):
        with patch.dict("os.environ", {"OPENWEATHER_API_KEY": "", "NYT_API_KEY": ""}):
            with pytest.raises(ConfigError):
                with TestClient(create_app()):
                    pass

    def test_build_dashboard_wires_settings(self):
        settings = Settings(
            openweather_api_key="w", nyt_api_key="n", request_timeout=15, discard_stale_forecasts=True
        )

        board = build_dashboard(settings)

        assert isinstance(board.resolver.client, OpenWeatherMapClient)
        assert board.resolver.client is board.aggregator.client
        assert isinstance(board.headline_fetcher.client, NYTimesClient)
        assert board.resolver.client.timeout.total == 15
        assert board.discard_stale is True

    def test_startup_from_environment(self):
        env = {"OPENWEATHER_API_KEY": "w", "NYT_API_KEY": "n"}
        with patch.dict("os.environ", env), patch.object(
            NYTimesClient, "top_stories", side_effect=ProviderError("offline")
        ):
            with TestClient(create_app()) as test_client:
                test_client.portal.call(test_client.app.state.dashboard.wait_idle)
                view = test_client.get("/dashboard").json()

        assert view["headlines"] == []
        assert view["errors"] == {"headlines": "offline"}
