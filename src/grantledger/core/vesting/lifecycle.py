"""
Grant lifecycle: creation, revocation and vesting queries.

State machine per beneficiary::

    NoGrant --create--> Active --revoke--> Revoked (terminal)

A fully vested grant stays Active; only the calculator tells it apart from
a partially vested one. Every operation validates all of its preconditions
before it moves funds or writes a record, so a raised LedgerError means
nothing happened.
"""

from __future__ import annotations

import logging
from typing import Callable, Tuple

from ..access import CallerCapabilities
from ..clock import LedgerClock
from ..constants import JAN_1_2000_DAYS, JAN_1_3000_DAYS, TODAY, UINT256_MAX
from ..contracts.erc20 import BalanceLedger, is_zero_address, normalize_address
from ..exceptions import (
    CannotRevokeVestedError,
    GrantExistsError,
    InvalidGrantParamsError,
    IrrevocableError,
    NoActiveGrantError,
    NoScheduleError,
    NotAuthorizedError,
    NotRegisteredError,
    RevokeHasNoEffectError,
    ScheduleExistsError,
    ZeroAddressError,
)
from ..safe_math import u32_add
from .calculator import VestingStatus, not_vested_amount, vesting_status
from .grant import GrantStore, TokenGrant
from .guard import TransferGuard
from .schedule import ScheduleStore, VestingSchedule

logger = logging.getLogger(__name__)


def _is_uint(value: int, bound: int) -> bool:
    return not isinstance(value, bool) and isinstance(value, int) and 0 <= value <= bound


class GrantLifecycleManager:
    """
    Creates and revokes grants on top of the schedule store, grant store and
    guarded ledger.

    Args:
        ledger: Balance ledger that holds the granted tokens
        schedules: Vesting schedule store
        grants: Grant store
        guard: Transfer guard used for the grantor's deposit
        clock: Day clock
        is_registered: Registration predicate consulted by the "safe" variants
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        schedules: ScheduleStore,
        grants: GrantStore,
        guard: TransferGuard,
        clock: LedgerClock,
        is_registered: Callable[[str], bool] | None = None,
    ):
        self.ledger = ledger
        self.schedules = schedules
        self.grants = grants
        self.guard = guard
        self.clock = clock
        self._is_registered = is_registered or (lambda account: False)

    # ==================== Creation ====================

    def create_grant(
        self,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
        vesting_location: str,
        grantor: str,
        schedule: VestingSchedule | None = None,
        today: int | None = None,
    ) -> bool:
        """
        Core grant algorithm shared by every public grant variant.

        Moves ``total_amount`` from grantor to beneficiary (through the
        transfer guard, so a grantor's own unvested tokens cannot be granted
        away) and records an Active grant locking ``vesting_amount``.

        ``schedule``, when given, is stored at ``vesting_location`` only after
        every other check and the transfer have succeeded.
        ``today`` is the day the caller already resolved for this operation;
        the clock is read when it is omitted.

        Raises:
            GrantExistsError: beneficiary already has an active grant
            InvalidGrantParamsError: amounts or start day out of range
            NoScheduleError: no valid schedule at vesting_location
            InsufficientFundsError / InsufficientVestedFundsError: grantor can't fund it
        """
        beneficiary_norm = normalize_address(beneficiary)
        location_norm = normalize_address(vesting_location)
        grantor_norm = normalize_address(grantor)
        if is_zero_address(beneficiary_norm):
            raise ZeroAddressError("beneficiary is zero address")

        if self.grants.has_active_grant(beneficiary_norm):
            raise GrantExistsError(
                "grant already exists",
                details={"beneficiary": beneficiary_norm},
            )

        details = {
            "total_amount": total_amount,
            "vesting_amount": vesting_amount,
            "start_day": start_day,
        }
        if not (
            _is_uint(total_amount, UINT256_MAX)
            and _is_uint(vesting_amount, UINT256_MAX)
            and _is_uint(start_day, JAN_1_3000_DAYS)
        ):
            raise InvalidGrantParamsError("invalid vesting params", details=details)
        if not (
            0 < vesting_amount <= total_amount
            and JAN_1_2000_DAYS <= start_day < JAN_1_3000_DAYS
        ):
            raise InvalidGrantParamsError("invalid vesting params", details=details)

        effective_schedule = schedule if schedule is not None else self.schedules.get(location_norm)
        if not effective_schedule.is_valid:
            raise NoScheduleError(
                "no such vesting schedule",
                details={"vesting_location": location_norm},
            )

        self.guard.transfer(grantor_norm, beneficiary_norm, total_amount, day=today)

        if schedule is not None:
            self.schedules.put(location_norm, schedule)
        self.grants.put(
            beneficiary_norm,
            TokenGrant(
                is_active=True,
                was_revoked=False,
                start_day=start_day,
                vesting_amount=vesting_amount,
                vesting_location=location_norm,
                grantor=grantor_norm,
            ),
        )

        logger.info(
            "Vesting tokens granted",
            extra={
                "event": "vesting.tokens_granted",
                "beneficiary": beneficiary_norm[:10],
                "grantor": grantor_norm[:10],
                "location": location_norm[:10],
                "total_amount": total_amount,
                "vesting_amount": vesting_amount,
                "start_day": start_day,
            },
        )
        return True

    def grant_vesting_tokens(
        self,
        caps: CallerCapabilities,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        """
        Grant tokens under a schedule stored at the beneficiary's own location.

        The caller must hold grantor capability and funds the grant.
        """
        caps.require_grantor()
        beneficiary_norm = normalize_address(beneficiary)

        if self.grants.has_active_grant(beneficiary_norm):
            raise GrantExistsError(
                "grant already exists",
                details={"beneficiary": beneficiary_norm},
            )
        # A stored schedule is only replaced when it came from the beneficiary's
        # own revoked per-wallet grant; anything else (a uniform grantor's
        # shared schedule in particular) is write-once.
        if self.schedules.has_schedule(beneficiary_norm):
            previous = self.grants.get(beneficiary_norm)
            owns_location = (
                previous.was_revoked
                and previous.vesting_location == beneficiary_norm
                and previous.grantor != beneficiary_norm
            )
            sharing = self.grants.referencing(beneficiary_norm)
            if not owns_location or sharing:
                raise ScheduleExistsError(
                    "vesting schedule already set",
                    details={"vesting_location": beneficiary_norm, "grants": len(sharing)},
                )

        schedule = VestingSchedule.create(cliff_duration, duration, interval, is_revocable)
        return self.create_grant(
            beneficiary_norm,
            total_amount,
            vesting_amount,
            start_day,
            vesting_location=beneficiary_norm,
            grantor=caps.caller,
            schedule=schedule,
        )

    def safe_grant_vesting_tokens(
        self,
        caps: CallerCapabilities,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        """Same as ``grant_vesting_tokens`` but only to a registered beneficiary."""
        caps.require_grantor()
        self.require_registered(beneficiary, caps.caller)
        return self.grant_vesting_tokens(
            caps,
            beneficiary,
            total_amount,
            vesting_amount,
            start_day,
            duration,
            cliff_duration,
            interval,
            is_revocable,
        )

    def require_registered(self, account: str, caller: str) -> None:
        account_norm = normalize_address(account)
        if account_norm == normalize_address(caller) or self._is_registered(account_norm):
            return
        raise NotRegisteredError("account not registered", details={"account": account_norm})

    # ==================== Revocation ====================

    def revoke_grant(self, caps: CallerCapabilities, beneficiary: str, on_day: int) -> int:
        """
        Revoke ``beneficiary``'s grant as of ``on_day`` (0 means today).

        The amount not vested on that day goes back to the grantor and the
        grant becomes permanently revoked. Allowed for the owner and for the
        grantor that funded this grant.

        Returns:
            The amount clawed back to the grantor
        """
        caps.require_grantor()
        beneficiary_norm = normalize_address(beneficiary)
        grant = self.grants.get(beneficiary_norm)
        schedule = self.schedules.get(grant.vesting_location)

        if not (caps.is_owner or caps.caller == grant.grantor):
            raise NotAuthorizedError(
                "not allowed",
                details={"caller": caps.caller, "beneficiary": beneficiary_norm},
            )
        if not grant.is_active:
            raise NoActiveGrantError("no active grant", details={"beneficiary": beneficiary_norm})
        if not schedule.is_revocable:
            raise IrrevocableError("irrevocable", details={"beneficiary": beneficiary_norm})

        today = self.clock.today()
        day = today if on_day == TODAY else on_day
        details = {"beneficiary": beneficiary_norm, "on_day": day, "today": today}
        if day > u32_add(grant.start_day, schedule.total_duration_days):
            raise RevokeHasNoEffectError("no effect", details=details)
        if day < today:
            raise CannotRevokeVestedError("cannot revoke vested holdings", details=details)

        not_vested = not_vested_amount(grant, schedule, day)
        # Unguarded move: the locked tokens are exactly what the guard protects
        self.ledger.transfer(beneficiary_norm, grant.grantor, not_vested)
        self.grants.put(beneficiary_norm, grant.revoked())

        logger.info(
            "Grant revoked",
            extra={
                "event": "vesting.grant_revoked",
                "beneficiary": beneficiary_norm[:10],
                "grantor": grant.grantor[:10],
                "on_day": day,
                "clawed_back": not_vested,
            },
        )
        return not_vested

    # ==================== Queries ====================

    def vesting_for_account_as_of(
        self,
        caps: CallerCapabilities,
        account: str,
        on_day_or_today: int = TODAY,
    ) -> VestingStatus:
        """Grant detail for ``account``; the caller must be that account or a grantor."""
        caps.require_grantor_or_self(account)
        return self._status(account, on_day_or_today)

    def vesting_as_of(self, caller: str, on_day_or_today: int = TODAY) -> VestingStatus:
        """Grant detail for the caller's own account."""
        return self._status(caller, on_day_or_today)

    def get_intrinsic_vesting_schedule(
        self,
        caps: CallerCapabilities,
        grant_holder: str,
    ) -> Tuple[int, int, int]:
        """Return ``(duration, cliff_duration, interval)`` of the holder's schedule."""
        caps.require_grantor_or_self(grant_holder)
        grant = self.grants.get(grant_holder)
        schedule = self.schedules.get(grant.vesting_location)
        return (
            schedule.total_duration_days,
            schedule.cliff_duration_days,
            schedule.interval_days,
        )

    def _status(self, account: str, on_day_or_today: int) -> VestingStatus:
        grant = self.grants.get(account)
        schedule = self.schedules.get(grant.vesting_location)
        return vesting_status(grant, schedule, self.clock.effective_day(on_day_or_today))
