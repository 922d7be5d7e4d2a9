"""
Builds the JSON view handed to the rendering layer.
"""

from typing import Optional

from daily_climate.config import DisplayConfig, ExternalAPIConfig
from daily_climate.dashboard import Dashboard
from daily_climate.models import (
    Condition,
    ConditionView,
    CurrentView,
    DashboardView,
    DayView,
    HourView,
)


def icon_url(icon: str) -> Optional[str]:
    if not icon:
        return None
    return ExternalAPIConfig.OPENWEATHER_ICON_URL.format(icon=icon)


def _condition_view(condition: Condition) -> ConditionView:
    return ConditionView(
        description=condition.description, icon_url=icon_url(condition.icon)
    )


def build_view(
    dashboard: Dashboard, hourly_limit: int = DisplayConfig.HOURLY_LIMIT
) -> DashboardView:
    """
    Project dashboard state into a view.

    Only the first `hourly_limit` hourly points are shown; the snapshot itself
    keeps the full sequence.

    Args:
        dashboard: Dashboard to read from
        hourly_limit: Number of hourly points to include

    Returns:
        DashboardView
    """
    snapshot = dashboard.snapshot
    units = snapshot.units if snapshot else ExternalAPIConfig.UNITS
    view = DashboardView(
        resolving=dashboard.resolving,
        unit_label=DisplayConfig.UNIT_LABELS.get(units, units),
        coordinates=dashboard.coordinates.value,
        headlines=list(dashboard.headlines),
        errors=dict(dashboard.last_errors),
    )
    if snapshot is None:
        return view

    current = snapshot.current
    view.current = CurrentView(
        temperature=current.temperature,
        feels_like=current.feels_like,
        humidity=current.humidity,
        location_name=current.location_name,
        condition=_condition_view(current.condition),
    )
    view.hourly = [
        HourView(
            timestamp=point.timestamp,
            temperature=point.temperature,
            condition=_condition_view(point.condition),
        )
        for point in snapshot.hourly[: max(hourly_limit, 0)]
    ]
    view.daily = [
        DayView(
            timestamp=point.timestamp,
            day=point.temperature.day,
            min=point.temperature.min,
            max=point.temperature.max,
            condition=_condition_view(point.condition),
        )
        for point in snapshot.daily
    ]
    return view
