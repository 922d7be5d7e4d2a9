"""
Pydantic models for dashboard state, request/response validation and fetch outcomes.
"""

from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Coordinates(BaseModel):
    """A resolved location. Always fully populated."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    name: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None

    @property
    def pair(self) -> tuple:
        return (self.latitude, self.longitude)


class Condition(BaseModel):
    """Weather condition descriptor."""

    main: str = ""
    description: str = "Unknown"
    icon: str = ""


class CurrentConditions(BaseModel):
    """Current weather at the resolved location."""

    timestamp: int
    temperature: float
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    condition: Condition
    location_name: Optional[str] = None


class HourPoint(BaseModel):
    """One hourly forecast entry."""

    timestamp: int
    temperature: float
    condition: Condition


class DayTemperature(BaseModel):
    """Temperature variants for one forecast day."""

    day: float
    min: float
    max: float
    night: Optional[float] = None


class DayPoint(BaseModel):
    """One daily forecast entry."""

    timestamp: int
    temperature: DayTemperature
    condition: Condition


class ForecastSnapshot(BaseModel):
    """Complete current/hourly/daily bundle, replaced as a whole."""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    units: str
    current: CurrentConditions
    hourly: List[HourPoint] = Field(default_factory=list)
    daily: List[DayPoint] = Field(default_factory=list)


class Headline(BaseModel):
    """A single news story summary."""

    title: str
    byline: str = ""
    abstract: str = ""
    url: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a fetch operation: either a value or the error that prevented it."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[T]":
        return cls(error=error)


class LocationRequest(BaseModel):
    """Request model for location submission."""

    query: str


class LocationResponse(BaseModel):
    """Response model for location submission."""

    resolved: bool
    coordinates: Optional[Coordinates] = None
    error: Optional[str] = None


class ConditionView(BaseModel):
    """Condition with a ready-to-use icon URL."""

    description: str
    icon_url: Optional[str] = None


class CurrentView(BaseModel):
    temperature: float
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    location_name: Optional[str] = None
    condition: ConditionView


class HourView(BaseModel):
    timestamp: int
    temperature: float
    condition: ConditionView


class DayView(BaseModel):
    timestamp: int
    day: float
    min: float
    max: float
    condition: ConditionView


class DashboardView(BaseModel):
    """Response model for the full dashboard."""

    resolving: bool
    unit_label: str
    coordinates: Optional[Coordinates] = None
    current: Optional[CurrentView] = None
    hourly: List[HourView] = Field(default_factory=list)
    daily: List[DayView] = Field(default_factory=list)
    headlines: List[Headline] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Response model for error cases."""

    error: str
    message: str
    status_code: int
