"""Tests for the rolling cycle (week, day) resolver."""
from datetime import datetime, timedelta, timezone

import pytest

from app.services.cycle import (
    CyclePosition,
    elapsed_days,
    is_program_finished,
    resolve_cycle_position,
    to_naive_utc,
    total_span_days,
)

START = datetime(2026, 3, 2, 8, 30)


class TestElapsedDays:
    def test_same_moment_is_day_one(self):
        assert elapsed_days(START, START) == 1

    def test_partial_day_stays_on_day_one(self):
        assert elapsed_days(START, START + timedelta(hours=23, minutes=59)) == 1

    def test_full_day_advances(self):
        assert elapsed_days(START, START + timedelta(days=1)) == 2

    def test_future_start_clamps_to_one(self):
        assert elapsed_days(START, START - timedelta(days=3)) == 1


class TestResolveCyclePosition:
    """Position arithmetic for cycle_days=7, weeks_count=4 unless stated."""

    def test_day_one_identity(self):
        assert resolve_cycle_position(START, 7, 4, START) == CyclePosition(1, 1)

    def test_ten_days_in_is_week_two_day_four(self):
        position = resolve_cycle_position(START, 7, 4, START + timedelta(days=10))

        assert position.week_index == 2
        assert position.day_index == 4

    def test_last_day_of_first_week(self):
        assert resolve_cycle_position(START, 7, 4, START + timedelta(days=6)) == CyclePosition(1, 7)

    def test_first_day_of_second_week(self):
        assert resolve_cycle_position(START, 7, 4, START + timedelta(days=7)) == CyclePosition(2, 1)

    def test_final_day_of_program(self):
        assert resolve_cycle_position(START, 7, 4, START + timedelta(days=27)) == CyclePosition(4, 7)

    def test_pinned_after_program_ends(self):
        for extra in (28, 29, 35, 400):
            position = resolve_cycle_position(START, 7, 4, START + timedelta(days=extra))
            assert position == CyclePosition(4, 7)

    def test_future_start_is_week_one_day_one(self):
        assert resolve_cycle_position(START, 7, 4, START - timedelta(days=5)) == CyclePosition(1, 1)

    def test_non_weekly_cycle(self):
        # 3-day cycle: day 8 is week 3 day 2
        assert resolve_cycle_position(START, 3, 5, START + timedelta(days=7)) == CyclePosition(3, 2)

    def test_single_day_single_week(self):
        for extra in (0, 1, 10):
            assert resolve_cycle_position(START, 1, 1, START + timedelta(days=extra)) == CyclePosition(1, 1)

    def test_monotonic_over_program(self):
        previous = CyclePosition(1, 1)
        for hours in range(0, 24 * 40, 5):
            current = resolve_cycle_position(START, 7, 4, START + timedelta(hours=hours))
            assert current >= previous
            previous = current

    @pytest.mark.parametrize("cycle_days,weeks_count", [(7, 4), (5, 12), (21, 1), (1, 52)])
    def test_always_in_range(self, cycle_days, weeks_count):
        for extra in range(-3, cycle_days * weeks_count + 10):
            position = resolve_cycle_position(START, cycle_days, weeks_count, START + timedelta(days=extra))
            assert 1 <= position.week_index <= weeks_count
            assert 1 <= position.day_index <= cycle_days

    def test_aware_datetimes_are_normalised(self):
        start = datetime(2026, 3, 2, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        now = datetime(2026, 3, 4, 4, 0, tzinfo=timezone.utc)

        # 2026-03-03 04:00Z to 2026-03-04 04:00Z is exactly one day
        assert resolve_cycle_position(start, 7, 4, now) == CyclePosition(1, 2)

    def test_mixed_naive_and_aware(self):
        now = datetime(2026, 3, 5, 8, 30, tzinfo=timezone.utc)
        assert resolve_cycle_position(START, 7, 4, now) == CyclePosition(1, 4)


class TestHelpers:
    def test_total_span(self):
        assert total_span_days(7, 4) == 28

    def test_to_naive_utc_keeps_naive(self):
        assert to_naive_utc(START) is START

    def test_to_naive_utc_converts(self):
        aware = datetime(2026, 3, 2, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 3, 2, 8, 0)

    def test_program_finished_boundary(self):
        assert not is_program_finished(START, 7, 4, START + timedelta(days=27, hours=23))
        assert is_program_finished(START, 7, 4, START + timedelta(days=28))
