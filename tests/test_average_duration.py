"""Tests for AverageDuration and AverageResolution."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.average_duration import AverageDuration, to_milliseconds
from model.average import AverageResolution

NOW = datetime(2024, 5, 15, 12, 30, 45, 123000, tzinfo=timezone.utc)  # Wednesday


def make(**kwargs) -> AverageDuration:
    kwargs.setdefault("resolution", AverageResolution.per_day)
    kwargs.setdefault("reset_at", AverageResolution.per_day.calculate_reset_date(NOW))
    return AverageDuration(**kwargs)


class TestInterval:
    def test_plain_mean(self):
        average = make(durations=[1000, 2000, 3000, 4000])
        assert average.interval() == timedelta(milliseconds=2500)

    @pytest.mark.parametrize("weight, expected", [(5, 1667), (10, 1429)])
    def test_weighted_carry(self, weight, expected):
        average = make(
            durations=[1000, 2000, 3000, 4000], carry_average=1000, carry_weight=weight
        )
        assert average.interval() == timedelta(milliseconds=expected)

    def test_zero_carry_keeps_its_weight(self):
        average = make(durations=[6000], carry_average=0, carry_weight=5)
        assert average.interval() == timedelta(milliseconds=1000)

    def test_rounds_half_up(self):
        assert make(durations=[1, 2]).interval() == timedelta(milliseconds=2)
        assert make(durations=[2, 3]).interval() == timedelta(milliseconds=3)

    def test_requires_a_sample(self):
        with pytest.raises(ValueError):
            make(durations=[])


class TestAdd:
    def test_add_with_carry(self):
        average = make(
            durations=[1000, 2000, 3000, 4000], carry_average=1000, carry_weight=5
        )
        average.add(timedelta(milliseconds=5000), now=NOW)
        assert average.interval() == timedelta(milliseconds=2000)

    def test_compaction_at_threshold(self):
        average = make(
            durations=[1000, 2000, 3000, 4000, 5003],
            carry_threshold=5,
            carry_weight=2,
        )
        assert average.interval() == timedelta(milliseconds=3001)

        average.add(timedelta(milliseconds=5000), now=NOW)

        assert average.carry_average == 3001
        assert average.durations == [5000]
        assert average.interval() == timedelta(milliseconds=3667)

    def test_compaction_leaves_durations_empty_before_append(self):
        average = make(durations=[1000, 2000, 3000, 4000, 5000], carry_threshold=5)
        average.add(0, now=NOW)
        assert average.carry_average == 3000
        assert average.durations == [0]

    def test_reset_after_boundary(self):
        reset_at = AverageResolution.per_day.calculate_reset_date(NOW) - timedelta(
            days=2
        )
        average = make(
            reset_at=reset_at,
            durations=[1000, 2000, 3000, 4000, 5003],
            carry_average=2000,
            carry_threshold=6,
            carry_weight=2,
        )
        assert average.interval() == timedelta(milliseconds=2715)

        average.add(timedelta(milliseconds=5000), now=NOW)

        assert average.carry_average is None
        assert average.durations == [5000]
        assert average.interval() == timedelta(milliseconds=5000)
        assert average.reset_at == datetime(2024, 5, 16, tzinfo=timezone.utc)

    def test_no_reset_before_boundary(self):
        average = make(durations=[1000], carry_average=500)
        average.add(timedelta(seconds=2), now=NOW)
        assert average.carry_average == 500
        assert average.durations == [1000, 2000]

    def test_durations_are_rounded_to_ms(self):
        average = make(durations=[1000])
        average.add(timedelta(microseconds=1500), now=NOW)
        average.add(timedelta(microseconds=2499), now=NOW)
        assert average.durations == [1000, 2, 2]

    def test_new(self):
        average = AverageDuration.new(
            AverageResolution.per_hour, timedelta(seconds=20), now=NOW
        )
        assert average.durations == [20000]
        assert average.carry_average is None
        assert average.carry_threshold == 20
        assert average.carry_weight == 5
        assert average.reset_at == datetime(2024, 5, 15, 13, tzinfo=timezone.utc)

    def test_json_round_trip_keeps_state(self):
        average = make(durations=[10, 20], carry_average=15)
        restored = AverageDuration.model_validate_json(average.model_dump_json())
        assert restored == average


def test_to_milliseconds():
    assert to_milliseconds(timedelta(seconds=1.2345)) == 1235
    assert to_milliseconds(42) == 42


@pytest.mark.parametrize(
    "resolution, expected",
    [
        (AverageResolution.per_minute, datetime(2024, 5, 15, 12, 31)),
        (AverageResolution.per_hour, datetime(2024, 5, 15, 13, 0)),
        (AverageResolution.per_day, datetime(2024, 5, 16)),
        (AverageResolution.per_week, datetime(2024, 5, 20)),
        (AverageResolution.per_month, datetime(2024, 6, 1)),
        (AverageResolution.per_year, datetime(2025, 1, 1)),
    ],
)
def test_reset_dates(resolution, expected):
    assert resolution.calculate_reset_date(NOW) == expected.replace(tzinfo=timezone.utc)


def test_month_rolls_over_year():
    december = datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc)
    assert AverageResolution.per_month.calculate_reset_date(december) == datetime(
        2025, 1, 1, tzinfo=timezone.utc
    )
