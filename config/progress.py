# config/progress.py
from typing import Callable, Final

from pydantic import BaseModel, ConfigDict, Field

from config.settings import settings
from model.average import AverageResolution
from repository.namespaces import ROOT

DEFAULT_CACHE_PREFIX: Final[str] = ROOT
DEFAULT_CACHE_DURATION: Final[int] = 60 * 15  # 15 minutes
DEFAULT_CACHE_STORE: Final[str] = "default"
DEFAULT_CANCEL_THRESHOLD: Final[float] = 0.0


class ProgressSettings(BaseModel):
    """
    Resolved settings for one job type.

    cancel_threshold is exclusive: at 0.75 a processing job can be cancelled
    at 74.99% but not at 75%. 0.0 disables cancelling once processing starts,
    1.0 (or above) allows it at any point before completion.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cache_store: str = DEFAULT_CACHE_STORE
    cache_prefix: str | Callable[[], str | None] = DEFAULT_CACHE_PREFIX
    cache_duration: int = Field(default=DEFAULT_CACHE_DURATION, ge=1)
    make_cache_key: Callable[[str, str], str] | None = None
    cancel_threshold: float = Field(default=DEFAULT_CANCEL_THRESHOLD, ge=0.0)
    # None disables duration tracking.
    average_resolution: AverageResolution | None = None

    @classmethod
    def from_env(cls) -> "ProgressSettings":
        return cls(
            cache_store=settings.JOB_PROGRESS_CACHE_STORE,
            cache_prefix=settings.JOB_PROGRESS_CACHE_PREFIX,
            cache_duration=settings.JOB_PROGRESS_CACHE_DURATION,
            cancel_threshold=settings.JOB_PROGRESS_CANCEL_THRESHOLD,
            average_resolution=settings.JOB_PROGRESS_AVERAGE_RESOLUTION,
        )
