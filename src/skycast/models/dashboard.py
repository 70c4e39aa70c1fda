"""Dashboard state published to the presentation layer."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import QueryError
from .weather import WeatherSnapshot


class PipelineStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class Notice(BaseModel):
    """Transient message shown above the dashboard.

    Example:
        >>> Notice(kind="success", message="Weather data refreshed successfully!").kind
        'success'
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["error", "success"]
    message: str


class DashboardState(BaseModel):
    """Single slot of displayed state, replaced wholesale on every transition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: PipelineStatus = PipelineStatus.IDLE
    snapshot: WeatherSnapshot | None = None
    error: QueryError | None = None
    notice: Notice | None = None
    last_resolved_city: str | None = None
    history: tuple[str, ...] = Field(default_factory=tuple)
