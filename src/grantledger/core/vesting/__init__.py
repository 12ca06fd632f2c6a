"""
Vesting engine: schedules, grants, the calculator, the transfer guard and
the grant lifecycle (per-wallet and uniform grants).
"""

from .calculator import (
    VestingStatus,
    available_amount,
    locked_amount,
    not_vested_amount,
    vested_amount,
    vesting_status,
)
from .grant import NO_GRANT, GrantStore, TokenGrant
from .guard import TransferGuard
from .lifecycle import GrantLifecycleManager
from .schedule import EMPTY_SCHEDULE, ScheduleStore, VestingSchedule
from .uniform import NO_RESTRICTIONS, GrantorRestrictions, UniformGrantor

__all__ = [
    "EMPTY_SCHEDULE",
    "NO_GRANT",
    "NO_RESTRICTIONS",
    "GrantLifecycleManager",
    "GrantStore",
    "GrantorRestrictions",
    "ScheduleStore",
    "TokenGrant",
    "TransferGuard",
    "UniformGrantor",
    "VestingSchedule",
    "VestingStatus",
    "available_amount",
    "locked_amount",
    "not_vested_amount",
    "vested_amount",
    "vesting_status",
]
