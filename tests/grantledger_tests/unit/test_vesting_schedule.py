"""
Tests for vesting schedule validation and the schedule store.
"""

import pytest

from grantledger.core.constants import TEN_YEARS_DAYS
from grantledger.core.exceptions import InvalidScheduleError
from grantledger.core.vesting.schedule import EMPTY_SCHEDULE, ScheduleStore, VestingSchedule

LOCATION = "0x" + "44" * 20


class TestScheduleValidation:
    def test_valid_schedule(self):
        schedule = VestingSchedule.create(90, 360, 30, True)
        assert schedule.is_valid
        assert schedule.is_revocable
        assert (schedule.cliff_duration_days, schedule.total_duration_days, schedule.interval_days) == (90, 360, 30)

    def test_zero_cliff_allowed(self):
        assert VestingSchedule.create(0, 12, 3, False).is_valid

    def test_ten_year_maximum(self):
        assert VestingSchedule.create(0, TEN_YEARS_DAYS, 1, False).is_valid
        with pytest.raises(InvalidScheduleError):
            VestingSchedule.create(0, TEN_YEARS_DAYS + 1, 1, False)

    @pytest.mark.parametrize(
        "cliff,duration,interval",
        [
            (0, 0, 1),      # zero duration
            (12, 12, 1),    # cliff equals duration
            (13, 12, 1),    # cliff beyond duration
            (0, 12, 0),     # zero interval
            (0, 10, 3),     # duration not a multiple of interval
            (4, 12, 3),     # cliff not a multiple of interval
            (-1, 12, 1),    # negative cliff
        ],
    )
    def test_invalid_schedules(self, cliff, duration, interval):
        with pytest.raises(InvalidScheduleError):
            VestingSchedule.create(cliff, duration, interval, True)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidScheduleError):
            VestingSchedule.create(0, 12.0, 3, True)


class TestScheduleStore:
    def test_missing_location_returns_empty(self):
        store = ScheduleStore()
        assert store.get(LOCATION) is EMPTY_SCHEDULE
        assert not store.has_schedule(LOCATION)

    def test_set_schedule(self):
        store = ScheduleStore()
        assert store.set_schedule(LOCATION, 0, 12, 3, True) is True
        assert store.has_schedule(LOCATION.upper().replace("0X", "0x"))
        assert store.get(LOCATION).total_duration_days == 12

    def test_invalid_schedule_not_stored(self):
        store = ScheduleStore()
        with pytest.raises(InvalidScheduleError):
            store.set_schedule(LOCATION, 0, 10, 3, True)
        assert len(store) == 0

    def test_round_trip(self):
        store = ScheduleStore()
        store.set_schedule(LOCATION, 30, 90, 30, False)
        restored = ScheduleStore.from_dict(store.to_dict())
        assert restored.get(LOCATION) == store.get(LOCATION)
