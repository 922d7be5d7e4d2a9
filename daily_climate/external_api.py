"""
External API clients for the OpenWeatherMap and New York Times services.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from daily_climate.config import ExternalAPIConfig
from daily_climate.models import (
    Condition,
    Coordinates,
    CurrentConditions,
    DayPoint,
    DayTemperature,
    Headline,
    HourPoint,
)

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Network, HTTP or parse failure from an external provider."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.provider = provider
        super().__init__(message)


def _condition(weather: list) -> Condition:
    if weather:
        first = weather[0]
        return Condition(
            main=first.get("main", ""),
            description=first.get("description", "Unknown"),
            icon=first.get("icon", ""),
        )
    return Condition()


class GeocodingMatch(BaseModel):
    """Model for one OpenWeatherMap direct geocoding result."""

    name: Optional[str] = None
    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")
    country: Optional[str] = None
    state: Optional[str] = None

    def to_coordinates(self) -> Coordinates:
        return Coordinates(
            latitude=self.lat,
            longitude=self.lon,
            name=self.name,
            country=self.country,
            state=self.state,
        )


class OpenWeatherMapResponse(BaseModel):
    """Model for OpenWeatherMap current weather response."""

    name: Optional[str] = Field(None, description="Location name")
    main: Dict[str, Any] = Field(..., description="Main weather data")
    weather: list = Field(default_factory=list, description="Weather conditions")
    dt: int = Field(..., description="Data calculation time")

    @property
    def temperature(self) -> float:
        """Temperature in the requested unit system. Raises KeyError when absent."""
        return float(self.main["temp"])

    @property
    def humidity(self) -> Optional[int]:
        return self.main.get("humidity")

    def to_current(self) -> CurrentConditions:
        return CurrentConditions(
            timestamp=self.dt,
            temperature=self.temperature,
            feels_like=self.main.get("feels_like"),
            humidity=self.humidity,
            condition=_condition(self.weather),
            location_name=self.name,
        )


class HourlyEntry(BaseModel):
    dt: int
    main: Dict[str, Any]
    weather: list = Field(default_factory=list)

    def to_point(self) -> HourPoint:
        return HourPoint(
            timestamp=self.dt,
            temperature=self.main["temp"],
            condition=_condition(self.weather),
        )


class DailyEntry(BaseModel):
    dt: int
    temp: DayTemperature
    weather: list = Field(default_factory=list)

    def to_point(self) -> DayPoint:
        return DayPoint(
            timestamp=self.dt,
            temperature=self.temp,
            condition=_condition(self.weather),
        )


class HourlyForecastResponse(BaseModel):
    """Model for the hourly forecast list."""

    entries: List[HourlyEntry] = Field(..., alias="list")


class DailyForecastResponse(BaseModel):
    """Model for the daily forecast list."""

    entries: List[DailyEntry] = Field(..., alias="list")


class TopStory(BaseModel):
    """Model for one New York Times top story."""

    title: str = ""
    byline: Optional[str] = ""
    abstract: Optional[str] = ""
    url: str = ""
    multimedia: Optional[List[Dict[str, Any]]] = None

    def to_headline(self) -> Headline:
        image_url = None
        if self.multimedia and self.multimedia[0].get("url"):
            image_url = self.multimedia[0]["url"]
        return Headline(
            title=self.title,
            byline=self.byline or "",
            abstract=self.abstract or "",
            url=self.url,
            image_url=image_url,
        )


class TopStoriesResponse(BaseModel):
    results: List[TopStory] = Field(default_factory=list)


class _JSONClient:
    """Shared GET-and-decode behaviour for provider clients."""

    provider = "provider"

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = aiohttp.ClientTimeout(
            total=timeout or ExternalAPIConfig.REQUEST_TIMEOUT
        )

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Raises:
            ProviderError: On network errors, timeouts, non-200 status or bad JSON
        """
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                logger.debug("Requesting %s", url)

                async with session.get(url, params=params) as response:
                    if response.status == 401:
                        raise ProviderError(
                            "Invalid API key", status_code=401, provider=self.provider
                        )
                    if response.status != 200:
                        raise ProviderError(
                            f"{self.provider} returned status {response.status}",
                            status_code=response.status,
                            provider=self.provider,
                        )
                    return await response.json(content_type=None)

        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"{self.provider} request timed out", provider=self.provider
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(
                f"{self.provider} request failed: {e}", provider=self.provider
            ) from e
        except ValueError as e:
            raise ProviderError(
                f"{self.provider} returned invalid JSON", provider=self.provider
            ) from e

    def _parse(self, model, payload: Any):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(
                f"Unexpected {self.provider} response shape: {e.error_count()} errors",
                provider=self.provider,
            ) from e


class OpenWeatherMapClient(_JSONClient):
    """
    Asynchronous client for OpenWeatherMap geocoding and forecast endpoints.
    """

    provider = "openweathermap"

    def __init__(
        self,
        api_key: str,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        pro_base_url: Optional[str] = None,
        units: str = ExternalAPIConfig.UNITS,
    ):
        """
        Initialize the OpenWeatherMap client.

        Args:
            api_key: OpenWeatherMap API key
            timeout: Request timeout in seconds (defaults to config value)
            base_url: Override for the public API host
            pro_base_url: Override for the host serving hourly forecasts
            units: Unit system passed to every forecast request
        """
        super().__init__(timeout)
        self.api_key = api_key
        self.base_url = (base_url or ExternalAPIConfig.OPENWEATHER_BASE_URL).rstrip("/")
        self.pro_base_url = (
            pro_base_url or ExternalAPIConfig.OPENWEATHER_PRO_BASE_URL
        ).rstrip("/")
        self.units = units

    def _forecast_params(self, coords: Coordinates, **extra) -> Dict[str, Any]:
        params = {
            "lat": coords.latitude,
            "lon": coords.longitude,
            "units": self.units,
            "appid": self.api_key,
        }
        params.update(extra)
        return params

    async def geocode(
        self, query: str, limit: int = ExternalAPIConfig.GEOCODING_LIMIT
    ) -> List[GeocodingMatch]:
        """
        Resolve free text to candidate locations, in provider order.

        Args:
            query: Place description (city, zip, etc.)
            limit: Maximum number of matches requested

        Returns:
            List of matches, possibly empty
        """
        payload = await self._get_json(
            f"{self.base_url}/geo/1.0/direct",
            {"q": query, "limit": limit, "appid": self.api_key},
        )
        if not isinstance(payload, list):
            raise ProviderError(
                "Geocoding response is not a list", provider=self.provider
            )
        return [self._parse(GeocodingMatch, item) for item in payload]

    async def get_current(self, coords: Coordinates) -> CurrentConditions:
        payload = await self._get_json(
            f"{self.base_url}/data/2.5/weather", self._forecast_params(coords)
        )
        try:
            return self._parse(OpenWeatherMapResponse, payload).to_current()
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                "Current weather is missing a temperature", provider=self.provider
            ) from e

    async def get_hourly(
        self, coords: Coordinates, count: int = ExternalAPIConfig.HOURLY_POINTS
    ) -> List[HourPoint]:
        payload = await self._get_json(
            f"{self.pro_base_url}/data/2.5/forecast/hourly",
            self._forecast_params(coords, cnt=count),
        )
        try:
            return [
                entry.to_point()
                for entry in self._parse(HourlyForecastResponse, payload).entries
            ]
        except (KeyError, ValidationError) as e:
            raise ProviderError(
                "Hourly entry is missing a temperature", provider=self.provider
            ) from e

    async def get_daily(
        self, coords: Coordinates, count: int = ExternalAPIConfig.DAILY_POINTS
    ) -> List[DayPoint]:
        payload = await self._get_json(
            f"{self.base_url}/data/2.5/forecast/daily",
            self._forecast_params(coords, cnt=count),
        )
        return [
            entry.to_point()
            for entry in self._parse(DailyForecastResponse, payload).entries
        ]

    async def health_check(self) -> bool:
        """
        Check if the OpenWeatherMap API is accessible.

        Returns:
            bool: True if API is accessible, False otherwise
        """
        try:
            await self.geocode("London")
            logger.info("OpenWeatherMap API health check passed")
            return True
        except ProviderError as e:
            logger.warning("OpenWeatherMap API health check failed: %s", str(e))
            return False


class NYTimesClient(_JSONClient):
    """
    Asynchronous client for the New York Times Top Stories API.
    """

    provider = "nytimes"

    def __init__(
        self,
        api_key: str,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        section: str = "home",
    ):
        super().__init__(timeout)
        self.api_key = api_key
        self.base_url = (base_url or ExternalAPIConfig.NYT_BASE_URL).rstrip("/")
        self.section = section

    async def top_stories(self) -> List[Headline]:
        """
        Get the current top stories in provider order.

        Returns:
            List[Headline]: Every story the provider returned
        """
        payload = await self._get_json(
            f"{self.base_url}/svc/topstories/v2/{self.section}.json",
            {"api-key": self.api_key},
        )
        response = self._parse(TopStoriesResponse, payload)
        return [story.to_headline() for story in response.results]

    async def health_check(self) -> bool:
        try:
            await self.top_stories()
            logger.info("New York Times API health check passed")
            return True
        except ProviderError as e:
            logger.warning("New York Times API health check failed: %s", str(e))
            return False
