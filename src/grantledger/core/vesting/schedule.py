from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..constants import TEN_YEARS_DAYS, UINT32_MAX
from ..contracts.erc20 import normalize_address
from ..exceptions import InvalidScheduleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VestingSchedule:
    """
    Cliff, duration and interval (all in days) for one vesting location.

    A schedule is immutable; "no schedule" is the default instance with
    ``is_valid`` False.
    """

    is_valid: bool = False
    is_revocable: bool = False
    cliff_duration_days: int = 0
    total_duration_days: int = 0
    interval_days: int = 0

    @classmethod
    def create(
        cls,
        cliff_duration_days: int,
        total_duration_days: int,
        interval_days: int,
        is_revocable: bool,
    ) -> "VestingSchedule":
        """Build a valid schedule or raise InvalidScheduleError."""
        for label, value in (
            ("cliff_duration_days", cliff_duration_days),
            ("total_duration_days", total_duration_days),
            ("interval_days", interval_days),
        ):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT32_MAX:
                raise InvalidScheduleError(
                    f"invalid vesting schedule: {label}={value!r}",
                    details={label: value},
                )

        details = {
            "cliff_duration_days": cliff_duration_days,
            "total_duration_days": total_duration_days,
            "interval_days": interval_days,
        }
        if not (
            0 < total_duration_days <= TEN_YEARS_DAYS
            and cliff_duration_days < total_duration_days
            and interval_days >= 1
        ):
            raise InvalidScheduleError("invalid vesting schedule", details=details)
        if total_duration_days % interval_days != 0 or cliff_duration_days % interval_days != 0:
            raise InvalidScheduleError("invalid cliff/duration for interval", details=details)

        return cls(
            is_valid=True,
            is_revocable=bool(is_revocable),
            cliff_duration_days=cliff_duration_days,
            total_duration_days=total_duration_days,
            interval_days=interval_days,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VestingSchedule":
        return cls(**data)


EMPTY_SCHEDULE = VestingSchedule()


class ScheduleStore:
    """Vesting schedules keyed by vesting location (beneficiary or shared grantor account)."""

    def __init__(self) -> None:
        self._schedules: dict[str, VestingSchedule] = {}

    def set_schedule(
        self,
        location: str,
        cliff_days: int,
        duration_days: int,
        interval_days: int,
        is_revocable: bool,
    ) -> bool:
        """
        Validate and store a schedule at ``location``.

        The store does not refuse to overwrite; callers that need write-once
        semantics check ``has_schedule`` first.
        """
        schedule = VestingSchedule.create(cliff_days, duration_days, interval_days, is_revocable)
        self.put(location, schedule)
        return True

    def put(self, location: str, schedule: VestingSchedule) -> None:
        location_norm = normalize_address(location)
        self._schedules[location_norm] = schedule
        logger.info(
            "Vesting schedule stored",
            extra={
                "event": "vesting.schedule_created",
                "location": location_norm[:10],
                "cliff": schedule.cliff_duration_days,
                "duration": schedule.total_duration_days,
                "interval": schedule.interval_days,
                "revocable": schedule.is_revocable,
            },
        )

    def has_schedule(self, location: str) -> bool:
        return self.get(location).is_valid

    def get(self, location: str) -> VestingSchedule:
        return self._schedules.get(normalize_address(location), EMPTY_SCHEDULE)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {location: schedule.to_dict() for location, schedule in self._schedules.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "ScheduleStore":
        store = cls()
        store._schedules = {
            normalize_address(location): VestingSchedule.from_dict(schedule)
            for location, schedule in data.items()
        }
        return store

    def __len__(self) -> int:
        return len(self._schedules)
