"""
Vesting calculator.

Pure functions from (grant, schedule, day) to locked amounts. Elapsed days
are rounded down to whole intervals, then the vested fraction is computed as
``vesting_amount * effective_days // total_days``. Multiplying before
dividing keeps precision; both roundings go down, so a holder never gets
access to more than the contractually vested amount on a given day (at the
cost of at most one interval's delay).
"""

from __future__ import annotations

from typing import NamedTuple

from ..safe_math import checked_div, u32_add, u32_sub, u256_mul, u256_sub
from .grant import TokenGrant
from .schedule import VestingSchedule


class VestingStatus(NamedTuple):
    """Snapshot of one account's grant as of a given day."""

    amount_vested: int
    amount_not_vested: int
    amount_of_grant: int
    vest_start_day: int
    vest_duration: int
    cliff_duration: int
    vest_interval_days: int
    is_active: bool
    was_revoked: bool


def not_vested_amount(grant: TokenGrant, schedule: VestingSchedule, day: int) -> int:
    """Amount of ``grant`` still locked on ``day`` (a resolved day number, never the sentinel)."""
    if not grant.is_active:
        return grant.vesting_amount

    cliff_end = u32_add(grant.start_day, schedule.cliff_duration_days)
    if day < cliff_end:
        return grant.vesting_amount

    if day >= u32_add(grant.start_day, schedule.total_duration_days):
        return 0

    days_vested = u32_sub(day, grant.start_day)
    effective_days_vested = (days_vested // schedule.interval_days) * schedule.interval_days
    vested = checked_div(
        u256_mul(grant.vesting_amount, effective_days_vested),
        schedule.total_duration_days,
    )
    return u256_sub(grant.vesting_amount, vested)


def vested_amount(grant: TokenGrant, schedule: VestingSchedule, day: int) -> int:
    return grant.vesting_amount - not_vested_amount(grant, schedule, day)


def locked_amount(grant: TokenGrant, schedule: VestingSchedule, day: int) -> int:
    """Amount that blocks spending; zero when the account has no active grant."""
    if not grant.is_active:
        return 0
    return not_vested_amount(grant, schedule, day)


def available_amount(balance: int, grant: TokenGrant, schedule: VestingSchedule, day: int) -> int:
    """
    Spendable part of ``balance`` on ``day``.

    A holder that moved tokens out through a previously approved allowance
    can end up holding less than the locked amount; nothing is spendable then.
    """
    locked = locked_amount(grant, schedule, day)
    if locked >= balance:
        return 0
    return balance - locked


def vesting_status(grant: TokenGrant, schedule: VestingSchedule, day: int) -> VestingStatus:
    not_vested = not_vested_amount(grant, schedule, day)
    return VestingStatus(
        amount_vested=grant.vesting_amount - not_vested,
        amount_not_vested=not_vested,
        amount_of_grant=grant.vesting_amount,
        vest_start_day=grant.start_day,
        vest_duration=schedule.total_duration_days,
        cliff_duration=schedule.cliff_duration_days,
        vest_interval_days=schedule.interval_days,
        is_active=grant.is_active,
        was_revoked=grant.was_revoked,
    )
