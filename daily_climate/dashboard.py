"""
Dashboard state holder wiring the resolver, aggregator and headline fetcher together.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from daily_climate.aggregator import ForecastAggregator
from daily_climate.headlines import HeadlineFetcher
from daily_climate.models import Coordinates, ForecastSnapshot, Headline, Outcome
from daily_climate.observable import Observable
from daily_climate.resolver import (
    LocationNotFoundError,
    QueryResolver,
    QueryValidationError,
)

logger = logging.getLogger(__name__)


class Dashboard:
    """
    Owns the dashboard state and reacts to coordinate changes.

    Coordinates are written only by submit(), the snapshot only by the
    aggregation tasks, headlines only by the startup fetch. A failed fetch
    never clears what is already held.

    Aggregations are not cancelled when newer coordinates arrive. By default
    the last one to complete wins, even if it was started for older
    coordinates. With discard_stale=True a completion is dropped unless its
    coordinates are still the current ones.
    """

    def __init__(
        self,
        resolver: QueryResolver,
        aggregator: ForecastAggregator,
        headline_fetcher: HeadlineFetcher,
        discard_stale: bool = False,
    ):
        self.resolver = resolver
        self.aggregator = aggregator
        self.headline_fetcher = headline_fetcher
        self.discard_stale = discard_stale

        self.coordinates: Observable[Coordinates] = Observable("coordinates")
        self.coordinates.subscribe(self._on_coordinates)

        self.snapshot: Optional[ForecastSnapshot] = None
        self.headlines: List[Headline] = []
        self.resolving = False
        self.last_errors: Dict[str, str] = {}

        self._generation = 0
        self._started = False
        self._tasks: Set[asyncio.Task] = set()

    def start(self) -> None:
        """Schedule the one-off headline fetch. Later calls do nothing."""
        if self._started:
            return
        self._started = True
        self._spawn(self._load_headlines())

    async def submit(self, query: str) -> Outcome[Coordinates]:
        """
        Resolve a query and publish the coordinates on success.

        Args:
            query: Free-text place description

        Returns:
            The resolver outcome
        """
        if not query or not query.strip():
            # Suppressed locally: no call, no busy flag, no state change
            return Outcome.failure(QueryValidationError("Location query cannot be empty"))

        self.resolving = True
        try:
            outcome = await self.resolver.resolve(query)
        finally:
            self.resolving = False

        if outcome.ok:
            logger.info(
                "Resolved '%s' to %.4f, %.4f",
                query.strip(),
                outcome.value.latitude,
                outcome.value.longitude,
            )
            self.last_errors.pop("location", None)
            self.coordinates.publish(outcome.value)
        elif isinstance(outcome.error, LocationNotFoundError):
            logger.warning("No geocoding match for '%s'", query.strip())
            self.last_errors["location"] = str(outcome.error)
        elif isinstance(outcome.error, QueryValidationError):
            logger.debug("Rejected query: %s", outcome.error)
        else:
            logger.error("Error fetching geolocation: %s", outcome.error)
            self.last_errors["location"] = str(outcome.error)

        return outcome

    async def wait_idle(self) -> None:
        """Wait until every in-flight fetch has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel in-flight fetches and wait for them to unwind."""
        pending = list(self._tasks)
        if not pending:
            return
        logger.info("Cancelling %d in-flight fetches", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _on_coordinates(self, coords: Coordinates) -> None:
        self._generation += 1
        self._spawn(self._refresh_forecast(coords, self._generation))

    async def _refresh_forecast(self, coords: Coordinates, generation: int) -> None:
        outcome = await self.aggregator.aggregate(coords)

        # Superseded results are dropped whether they succeeded or failed
        if self.discard_stale and generation != self._generation:
            logger.info(
                "Discarding forecast for %.4f, %.4f: superseded by newer coordinates",
                coords.latitude,
                coords.longitude,
            )
            return

        if not outcome.ok:
            logger.error("Error fetching weather: %s", outcome.error)
            self.last_errors["forecast"] = str(outcome.error)
            return

        self.snapshot = outcome.value
        self.last_errors.pop("forecast", None)
        logger.info(
            "Forecast updated: %d hourly, %d daily points",
            len(outcome.value.hourly),
            len(outcome.value.daily),
        )

    async def _load_headlines(self) -> None:
        outcome = await self.headline_fetcher.fetch_headlines()
        if not outcome.ok:
            logger.error("Error fetching news: %s", outcome.error)
            self.last_errors["headlines"] = str(outcome.error)
            return
        self.headlines = outcome.value
        logger.info("Loaded %d headlines", len(self.headlines))
