"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from daily_climate.aggregator import ForecastAggregator
from daily_climate.dashboard import Dashboard
from daily_climate.external_api import (
    DailyForecastResponse,
    GeocodingMatch,
    HourlyForecastResponse,
    OpenWeatherMapResponse,
    TopStoriesResponse,
)
from daily_climate.headlines import HeadlineFetcher
from daily_climate.models import Coordinates
from daily_climate.resolver import QueryResolver


@pytest.fixture
def sample_api_key() -> str:
    """Sample API key for testing."""
    return "test_openweather_api_key_123"


@pytest.fixture
def new_york() -> Coordinates:
    return Coordinates(latitude=40.7128, longitude=-74.0060, name="New York", country="US")


@pytest.fixture
def mock_geocoding_response() -> list:
    """Mock OpenWeatherMap direct geocoding response with several matches."""
    return [
        {"name": "New York", "lat": 40.7128, "lon": -74.0060, "country": "US", "state": "New York"},
        {"name": "New York", "lat": 39.6840, "lon": -93.9270, "country": "US", "state": "Missouri"},
        {"name": "New York", "lat": 55.0270, "lon": -1.4870, "country": "GB", "state": "England"},
    ]


@pytest.fixture
def mock_current_response() -> dict:
    """Mock OpenWeatherMap current weather response (imperial units)."""
    return {
        "name": "New York",
        "main": {"temp": 72, "feels_like": 71.2, "humidity": 55, "pressure": 1013},
        "weather": [{"main": "Clouds", "description": "scattered clouds", "icon": "03d"}],
        "dt": 1700000000,
    }


@pytest.fixture
def mock_hourly_response() -> dict:
    """Mock hourly forecast with 24 points, one hour apart."""
    return {
        "cnt": 24,
        "list": [
            {
                "dt": 1700000000 + hour * 3600,
                "main": {"temp": 60 + hour},
                "weather": [{"main": "Clear", "description": "clear sky", "icon": "01n"}],
            }
            for hour in range(24)
        ],
    }


@pytest.fixture
def mock_daily_response() -> dict:
    """Mock daily forecast with 7 points, one day apart."""
    return {
        "cnt": 7,
        "list": [
            {
                "dt": 1700000000 + day * 86400,
                "temp": {"day": 70 + day, "min": 55 + day, "max": 75 + day, "night": 58 + day},
                "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
            }
            for day in range(7)
        ],
    }


@pytest.fixture
def mock_top_stories_response() -> dict:
    """Mock New York Times top stories response with eight stories."""
    return {
        "status": "OK",
        "results": [
            {
                "title": f"Story {index}",
                "byline": f"By Reporter {index}",
                "abstract": f"Abstract {index}",
                "url": f"https://www.nytimes.com/story-{index}.html",
                "multimedia": (
                    [{"url": f"https://static01.nyt.com/img-{index}.jpg"}] if index % 2 == 0 else None
                ),
            }
            for index in range(8)
        ],
    }


@pytest.fixture
def weather_client(
    mock_geocoding_response, mock_current_response, mock_hourly_response, mock_daily_response
) -> MagicMock:
    """OpenWeatherMap client double returning the mock payloads."""
    client = MagicMock()
    client.units = "imperial"
    client.geocode = AsyncMock(
        return_value=[GeocodingMatch(**item) for item in mock_geocoding_response]
    )
    client.get_current = AsyncMock(
        return_value=OpenWeatherMapResponse(**mock_current_response).to_current()
    )
    client.get_hourly = AsyncMock(
        return_value=[
            entry.to_point()
            for entry in HourlyForecastResponse.model_validate(mock_hourly_response).entries
        ]
    )
    client.get_daily = AsyncMock(
        return_value=[
            entry.to_point()
            for entry in DailyForecastResponse.model_validate(mock_daily_response).entries
        ]
    )
    client.health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def news_client(mock_top_stories_response) -> MagicMock:
    """New York Times client double returning the mock payload."""
    client = MagicMock()
    client.top_stories = AsyncMock(
        return_value=[
            story.to_headline()
            for story in TopStoriesResponse.model_validate(mock_top_stories_response).results
        ]
    )
    client.health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def make_dashboard(weather_client, news_client):
    """Factory building a dashboard over the client doubles."""

    def _make(discard_stale: bool = False) -> Dashboard:
        return Dashboard(
            resolver=QueryResolver(weather_client),
            aggregator=ForecastAggregator(weather_client),
            headline_fetcher=HeadlineFetcher(news_client),
            discard_stale=discard_stale,
        )

    return _make
