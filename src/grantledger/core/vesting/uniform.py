"""
Uniform grants: one shared schedule per grantor, used by many beneficiaries.

The owner attaches a schedule to a grantor account (once) and sets the
window of start days the grantor may use plus an expiration day. The
grantor can then hand out grants that all vest the same way.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..access import CallerCapabilities
from ..clock import LedgerClock
from ..constants import UINT32_MAX
from ..contracts.erc20 import is_zero_address, normalize_address
from ..exceptions import (
    GrantorExpiredError,
    InvalidGrantParamsError,
    InvalidRestrictionsError,
    NoScheduleError,
    ScheduleExistsError,
    ZeroAddressError,
)
from .lifecycle import GrantLifecycleManager
from .schedule import ScheduleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrantorRestrictions:
    """Start-day window ``[min_start_day, max_start_day)`` and last day (exclusive) to grant."""

    is_valid: bool = False
    min_start_day: int = 0
    max_start_day: int = 0
    expiration_day: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrantorRestrictions":
        return cls(**data)


NO_RESTRICTIONS = GrantorRestrictions()


class UniformGrantor:
    """Owner-side setup and grantor-side issuing of uniform grants."""

    def __init__(
        self,
        lifecycle: GrantLifecycleManager,
        schedules: ScheduleStore,
        clock: LedgerClock,
    ):
        self.lifecycle = lifecycle
        self.schedules = schedules
        self.clock = clock
        self._restrictions: dict[str, GrantorRestrictions] = {}

    def get_restrictions(self, grantor: str) -> GrantorRestrictions:
        return self._restrictions.get(normalize_address(grantor), NO_RESTRICTIONS)

    def set_restrictions(
        self,
        caps: CallerCapabilities,
        grantor: str,
        min_start_day: int,
        max_start_day: int,
        expiration_day: int,
    ) -> bool:
        """
        Set (or replace) a grantor's start-day window and expiration (owner only).

        Raises:
            InvalidRestrictionsError: window empty or expiration not in the future
        """
        caps.require_owner()
        grantor_norm = normalize_address(grantor)
        if is_zero_address(grantor_norm):
            raise ZeroAddressError("grantor is zero address")

        details = {
            "grantor": grantor_norm,
            "min_start_day": min_start_day,
            "max_start_day": max_start_day,
            "expiration_day": expiration_day,
        }
        for value in (min_start_day, max_start_day, expiration_day):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT32_MAX:
                raise InvalidRestrictionsError("invalid restrictions", details=details)

        today = self.clock.today()
        if not (max_start_day > min_start_day and expiration_day > today):
            details["today"] = today
            raise InvalidRestrictionsError("invalid restrictions", details=details)

        self._restrictions[grantor_norm] = GrantorRestrictions(
            is_valid=True,
            min_start_day=min_start_day,
            max_start_day=max_start_day,
            expiration_day=expiration_day,
        )
        logger.info(
            "Grantor restrictions set",
            extra={
                "event": "uniform.restrictions_set",
                "grantor": grantor_norm[:10],
                "min_start_day": min_start_day,
                "max_start_day": max_start_day,
                "expiration_day": expiration_day,
            },
        )
        return True

    def set_grantor_vesting_schedule(
        self,
        caps: CallerCapabilities,
        grantor: str,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        """Attach the shared schedule to ``grantor`` (owner only, write-once)."""
        caps.require_owner()
        grantor_norm = normalize_address(grantor)
        if is_zero_address(grantor_norm):
            raise ZeroAddressError("grantor is zero address")
        if self.schedules.has_schedule(grantor_norm):
            raise ScheduleExistsError(
                "vesting schedule already set",
                details={"vesting_location": grantor_norm},
            )
        return self.schedules.set_schedule(grantor_norm, cliff_duration, duration, interval, is_revocable)

    def grant_uniform_vesting_tokens(
        self,
        caps: CallerCapabilities,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
    ) -> bool:
        """
        Grant tokens under the caller's shared schedule.

        Raises:
            NotAuthorizedError: caller is not a uniform grantor
            NoScheduleError: no shared schedule attached to the caller
            GrantorExpiredError: restrictions missing or expired
            InvalidGrantParamsError: start day outside the allowed window
            NotRegisteredError: beneficiary never registered
        """
        caps.require_uniform_grantor()
        grantor = caps.caller

        if not self.schedules.has_schedule(grantor):
            raise NoScheduleError("no such vesting schedule", details={"vesting_location": grantor})

        restrictions = self.get_restrictions(grantor)
        today = self.clock.today()
        if not restrictions.is_valid or today >= restrictions.expiration_day:
            raise GrantorExpiredError(
                "grantor has expired",
                details={"grantor": grantor, "today": today, "expiration_day": restrictions.expiration_day},
            )
        if not (
            isinstance(start_day, int)
            and restrictions.min_start_day <= start_day < restrictions.max_start_day
        ):
            raise InvalidGrantParamsError(
                "startDay too early or too late",
                details={
                    "start_day": start_day,
                    "min_start_day": restrictions.min_start_day,
                    "max_start_day": restrictions.max_start_day,
                },
            )

        self.lifecycle.require_registered(beneficiary, grantor)
        return self.lifecycle.create_grant(
            beneficiary,
            total_amount,
            vesting_amount,
            start_day,
            vesting_location=grantor,
            grantor=grantor,
            today=today,
        )

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {grantor: r.to_dict() for grantor, r in self._restrictions.items()}

    def load_restrictions(self, data: Dict[str, Dict[str, Any]]) -> None:
        self._restrictions = {
            normalize_address(grantor): GrantorRestrictions.from_dict(r)
            for grantor, r in data.items()
        }
