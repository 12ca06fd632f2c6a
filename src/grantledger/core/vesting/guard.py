from __future__ import annotations

import logging

from ..clock import LedgerClock
from ..contracts.erc20 import BalanceLedger, normalize_address
from ..exceptions import InsufficientFundsError, InsufficientVestedFundsError
from ..safe_math import require_uint
from .calculator import available_amount, locked_amount
from .grant import GrantStore
from .schedule import ScheduleStore

logger = logging.getLogger(__name__)


class TransferGuard:
    """
    Availability check in front of the holder-initiated ledger entry points.

    ``transfer``, ``approve`` and ``burn`` refuse to touch tokens that are
    still locked by the holder's active grant as of today. ``transfer_from``
    is deliberately unguarded: the allowance it draws on was checked when the
    holder approved it.
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        schedules: ScheduleStore,
        grants: GrantStore,
        clock: LedgerClock,
    ):
        self.ledger = ledger
        self.schedules = schedules
        self.grants = grants
        self.clock = clock

    def not_vested_on(self, account: str, day: int) -> int:
        grant = self.grants.get(account)
        return locked_amount(grant, self.schedules.get(grant.vesting_location), day)

    def available_amount(self, account: str, on_day_or_today: int = 0) -> int:
        day = self.clock.effective_day(on_day_or_today)
        grant = self.grants.get(account)
        schedule = self.schedules.get(grant.vesting_location)
        return available_amount(self.ledger.balance_of(account), grant, schedule, day)

    def funds_are_available_on(self, account: str, amount: int, day: int) -> bool:
        return amount <= self.available_amount(account, day)

    def require_funds_available(self, account: str, amount: int, day: int | None = None) -> None:
        """
        Raise unless ``amount`` is spendable on ``day`` (today when omitted).

        The pause gate is checked first, then the raw balance
        (InsufficientFunds), then the vested part of it (InsufficientVestedFunds).
        """
        self.ledger.require_not_paused()
        require_uint(amount, label="amount")
        if day is None:
            day = self.clock.today()
        if self.funds_are_available_on(account, amount, day):
            return

        balance = self.ledger.balance_of(account)
        details = {
            "account": normalize_address(account),
            "amount": amount,
            "balance": balance,
            "day": day,
        }
        if balance < amount:
            raise InsufficientFundsError("insufficient funds", details=details)

        details["not_vested"] = self.not_vested_on(account, day)
        logger.debug(
            "Debit blocked by unvested grant",
            extra={"event": "guard.blocked", "account": details["account"][:10], "amount": amount},
        )
        raise InsufficientVestedFundsError("insufficient vested funds", details=details)

    # ==================== Guarded Entry Points ====================

    def transfer(self, sender: str, recipient: str, amount: int, day: int | None = None) -> bool:
        self.require_funds_available(sender, amount, day)
        return self.ledger.transfer(sender, recipient, amount)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        self.require_funds_available(owner, amount)
        return self.ledger.approve(owner, spender, amount)

    def burn(self, holder: str, amount: int) -> bool:
        self.require_funds_available(holder, amount)
        return self.ledger.burn(holder, amount)

    def transfer_from(self, spender: str, from_addr: str, to_addr: str, amount: int) -> bool:
        return self.ledger.transfer_from(spender, from_addr, to_addr, amount)
