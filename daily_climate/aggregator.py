"""
Forecast aggregation: current, hourly and daily weather assembled into one snapshot.
"""

import asyncio
import logging

from daily_climate.config import ExternalAPIConfig
from daily_climate.external_api import OpenWeatherMapClient, ProviderError
from daily_climate.models import Coordinates, ForecastSnapshot, Outcome

logger = logging.getLogger(__name__)


class ForecastAggregator:
    """
    Fetches every part of a forecast and only yields a snapshot when all succeed.
    """

    def __init__(
        self,
        client: OpenWeatherMapClient,
        hourly_points: int = ExternalAPIConfig.HOURLY_POINTS,
        daily_points: int = ExternalAPIConfig.DAILY_POINTS,
    ):
        """
        Initialize the aggregator.

        Args:
            client: OpenWeatherMap client
            hourly_points: Number of hourly points requested
            daily_points: Number of daily points requested
        """
        self.client = client
        self.hourly_points = hourly_points
        self.daily_points = daily_points

    async def aggregate(self, coords: Coordinates) -> Outcome[ForecastSnapshot]:
        """
        Build a forecast snapshot for the given coordinates.

        Args:
            coords: Resolved coordinates

        Returns:
            Outcome holding a complete ForecastSnapshot, or the first ProviderError
        """
        results = await asyncio.gather(
            self.client.get_current(coords),
            self.client.get_hourly(coords, count=self.hourly_points),
            self.client.get_daily(coords, count=self.daily_points),
            return_exceptions=True,
        )

        failures = [
            (part, result)
            for part, result in zip(("current", "hourly", "daily"), results)
            if isinstance(result, BaseException)
        ]
        if failures:
            part, error = failures[0]
            if not isinstance(error, ProviderError):
                if not isinstance(error, Exception):
                    raise error
                error = ProviderError(f"{part} forecast failed: {error}")
            if len(failures) > 1:
                logger.debug(
                    "Additional forecast failures: %s",
                    ", ".join(name for name, _ in failures[1:]),
                )
            return Outcome.failure(error)

        current, hourly, daily = results
        return Outcome.success(
            ForecastSnapshot(
                coordinates=coords,
                units=self.client.units,
                current=current,
                hourly=hourly,
                daily=daily,
            )
        )
