"""
Headline fetching, independent of location state.
"""

from typing import List

from daily_climate.config import ExternalAPIConfig
from daily_climate.external_api import NYTimesClient, ProviderError
from daily_climate.models import Headline, Outcome


class HeadlineFetcher:
    """Fetches top stories and keeps the first few, in source order."""

    def __init__(self, client: NYTimesClient, limit: int = ExternalAPIConfig.MAX_HEADLINES):
        self.client = client
        self.limit = limit

    async def fetch_headlines(self) -> Outcome[List[Headline]]:
        try:
            stories = await self.client.top_stories()
        except ProviderError as e:
            return Outcome.failure(e)
        return Outcome.success(stories[: self.limit])
