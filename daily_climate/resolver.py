"""
Query resolution: free-text location to a single coordinate pair.
"""

import logging

from daily_climate.config import ExternalAPIConfig
from daily_climate.external_api import OpenWeatherMapClient, ProviderError
from daily_climate.models import Coordinates, Outcome

logger = logging.getLogger(__name__)


class QueryValidationError(Exception):
    """The submitted query is empty or whitespace only."""


class LocationNotFoundError(Exception):
    """The geocoding provider returned no match for the query."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Location '{query}' not found")


class QueryResolver:
    """
    Resolves a location query to the provider's first geocoding match.
    """

    def __init__(self, client: OpenWeatherMapClient):
        self.client = client

    async def resolve(self, query: str) -> Outcome[Coordinates]:
        """
        Resolve a query to coordinates.

        Args:
            query: Free-text place description

        Returns:
            Outcome holding Coordinates, or one of QueryValidationError,
            LocationNotFoundError, ProviderError
        """
        if not query or not query.strip():
            return Outcome.failure(QueryValidationError("Location query cannot be empty"))

        query = query.strip()
        try:
            matches = await self.client.geocode(
                query, limit=ExternalAPIConfig.GEOCODING_LIMIT
            )
        except ProviderError as e:
            return Outcome.failure(e)

        if not matches:
            return Outcome.failure(LocationNotFoundError(query))

        # Provider order is the ranking; the rest are discarded
        return Outcome.success(matches[0].to_coordinates())
