# model/average.py
from datetime import datetime, timedelta, timezone
from enum import Enum


class AverageResolution(str, Enum):
    per_minute = "per_minute"
    per_hour = "per_hour"
    per_day = "per_day"
    per_week = "per_week"
    per_month = "per_month"
    per_year = "per_year"

    def calculate_reset_date(self, date: datetime | None = None) -> datetime:
        """Start of the bucket following `date` (now, UTC, by default)."""
        date = date or datetime.now(timezone.utc)
        start = date.replace(microsecond=0)

        if self is AverageResolution.per_minute:
            return start.replace(second=0) + timedelta(minutes=1)
        if self is AverageResolution.per_hour:
            return start.replace(minute=0, second=0) + timedelta(hours=1)

        day = start.replace(hour=0, minute=0, second=0)
        if self is AverageResolution.per_day:
            return day + timedelta(days=1)
        if self is AverageResolution.per_week:
            # Weeks start on Monday.
            return day - timedelta(days=day.weekday()) + timedelta(weeks=1)
        if self is AverageResolution.per_month:
            if day.month == 12:
                return day.replace(year=day.year + 1, month=1, day=1)
            return day.replace(month=day.month + 1, day=1)
        return day.replace(year=day.year + 1, month=1, day=1)
