# core/average_duration.py
from datetime import datetime, timedelta, timezone
from typing import Self

from pydantic import BaseModel, Field, model_validator

from model.average import AverageResolution
from util.functions import round_half_up


def to_milliseconds(duration: timedelta | int | float) -> int:
    if isinstance(duration, timedelta):
        return round_half_up((duration // timedelta(microseconds=1)) / 1000)
    return round_half_up(duration)


class AverageDuration(BaseModel):
    """
    Rolling average of job durations (milliseconds) for one job type.

    Flow:
    - Raw samples pile up in `durations` until `carry_threshold` is reached,
      then they are folded into `carry_average` on the next add().
    - `carry_average` counts as `carry_weight` samples in interval().
    - Once `reset_at` has passed, everything is forgotten and the next
      resolution boundary is picked.
    """

    resolution: AverageResolution
    reset_at: datetime
    durations: list[int] = Field(default_factory=list)
    carry_average: int | None = None
    carry_threshold: int = Field(default=20, ge=1)
    carry_weight: float = Field(default=5.0, ge=0)

    @model_validator(mode="after")
    def _require_samples(self) -> Self:
        if not self.durations:
            raise ValueError("At least 1 duration needs to be passed")
        return self

    @classmethod
    def new(
        cls,
        resolution: AverageResolution,
        duration: timedelta | int,
        now: datetime | None = None,
    ) -> "AverageDuration":
        return cls(
            resolution=resolution,
            reset_at=resolution.calculate_reset_date(now),
            durations=[to_milliseconds(duration)],
        )

    def interval(self) -> timedelta:
        count = max(1, len(self.durations))
        weighted_carry = (self.carry_average or 0) * self.carry_weight
        divider = count + (self.carry_weight if self.carry_average is not None else 0)

        avg_ms = round_half_up((sum(self.durations) + weighted_carry) / divider)
        return timedelta(milliseconds=avg_ms)

    def add(self, duration: timedelta | int, now: datetime | None = None) -> Self:
        now = now or datetime.now(timezone.utc)
        count = max(1, len(self.durations))

        if count >= self.carry_threshold:
            self.carry_average = round_half_up(sum(self.durations) / count)
            self.durations = []

        if now >= self.reset_at:
            self.carry_average = None
            self.durations = []
            self.reset_at = self.resolution.calculate_reset_date(now)

        self.durations.append(to_milliseconds(duration))
        return self
