"""
FastAPI application exposing the dashboard.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daily_climate.aggregator import ForecastAggregator
from daily_climate.config import DisplayConfig, Settings
from daily_climate.dashboard import Dashboard
from daily_climate.external_api import NYTimesClient, OpenWeatherMapClient
from daily_climate.headlines import HeadlineFetcher
from daily_climate.models import (
    DashboardView,
    ErrorResponse,
    LocationRequest,
    LocationResponse,
)
from daily_climate.resolver import QueryResolver, QueryValidationError
from daily_climate.views import build_view

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "The Daily Climate"
SERVICE_VERSION = "1.0.0"


def build_dashboard(settings: Settings) -> Dashboard:
    """Create the provider clients and the dashboard from settings."""
    weather_client = OpenWeatherMapClient(
        settings.openweather_api_key, timeout=settings.request_timeout
    )
    news_client = NYTimesClient(settings.nyt_api_key, timeout=settings.request_timeout)
    return Dashboard(
        resolver=QueryResolver(weather_client),
        aggregator=ForecastAggregator(weather_client),
        headline_fetcher=HeadlineFetcher(news_client),
        discard_stale=settings.discard_stale_forecasts,
    )


def create_app(dashboard: Optional[Dashboard] = None) -> FastAPI:
    """
    Create the application.

    Args:
        dashboard: Prebuilt dashboard; when omitted, one is built from the
            environment at startup (missing credentials abort startup)
    """

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        if application.state.dashboard is None:
            settings = Settings.from_env()
            logging.getLogger().setLevel(settings.log_level)
            application.state.dashboard = build_dashboard(settings)
            logger.info("Dashboard configured for %s", settings.environment)
        application.state.dashboard.start()
        yield
        await application.state.dashboard.close()

    application = FastAPI(
        title=f"{SERVICE_NAME} API",
        description="Weather and headlines dashboard",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    application.state.dashboard = dashboard

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def current_dashboard(request: Request) -> Dashboard:
        board = request.app.state.dashboard
        if board is None:
            raise HTTPException(status_code=503, detail="Dashboard not started")
        return board

    @application.get("/")
    async def root():
        """Root endpoint providing API information."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "active",
            "endpoints": {
                "submit_location": "/location",
                "dashboard": "/dashboard",
                "health_check": "/health",
                "documentation": "/docs",
            },
        }

    @application.post("/location", response_model=LocationResponse, status_code=202)
    async def submit_location(
        body: LocationRequest, request: Request, wait_for_forecast: bool = False
    ):
        """
        Resolve a location query and trigger a forecast refresh.

        Args:
            body: The location query
            wait_for_forecast: Block until the triggered forecast fetch finishes

        Returns:
            LocationResponse: Whether the query resolved, and to what
        """
        board = current_dashboard(request)
        outcome = await board.submit(body.query)

        if isinstance(outcome.error, QueryValidationError):
            raise HTTPException(status_code=422, detail=str(outcome.error))

        if wait_for_forecast:
            await board.wait_idle()

        return LocationResponse(
            resolved=outcome.ok,
            coordinates=outcome.value,
            error=None if outcome.ok else str(outcome.error),
        )

    @application.get("/dashboard", response_model=DashboardView)
    async def get_dashboard(
        request: Request,
        hourly_limit: int = Query(DisplayConfig.HOURLY_LIMIT, ge=0, le=48),
    ):
        """Current dashboard view."""
        return build_view(current_dashboard(request), hourly_limit=hourly_limit)

    @application.get("/health")
    async def health_check(request: Request):
        """Health check endpoint with provider reachability."""
        board = current_dashboard(request)
        weather_ok = await board.resolver.client.health_check()
        news_ok = await board.headline_fetcher.client.health_check()
        healthy = weather_ok and news_ok
        return {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                "openweathermap_api": "healthy" if weather_ok else "unhealthy",
                "nytimes_api": "healthy" if news_ok else "unhealthy",
            },
        }

    @application.exception_handler(Exception)
    async def global_exception_handler(request, exc):  # pylint: disable=unused-argument
        """Global exception handler for unhandled errors."""
        logger.error("Unhandled exception: %s", str(exc))
        body = ErrorResponse(
            error="Internal Server Error",
            message="An unexpected error occurred",
            status_code=500,
        )
        return JSONResponse(status_code=body.status_code, content=body.model_dump())

    return application
