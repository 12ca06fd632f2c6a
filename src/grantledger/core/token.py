"""
GrantToken: the token facade.

Wires the balance ledger, vesting engine, roles, registry and pause gate
into one object whose public methods take the caller's address first.
Public methods run under a re-entrant lock, so each call is observed as a
single step by other threads.

Usage:
    token = GrantToken(owner="0xowner...")
    token.register_account("0xalice...")
    token.grant_vesting_tokens("0xowner...", "0xalice...", 1001, 1000, start_day, 12, 0, 3, True)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .access import GrantorRoles, PauseGate
from .clock import LedgerClock
from .constants import TODAY
from .contracts.erc20 import BalanceLedger, TokenEvent, normalize_address
from .registry import AccountRegistry
from .safe_math import require_uint, u256_mul
from .schemas import STATE_VERSION
from .vesting.calculator import VestingStatus
from .vesting.grant import GrantStore
from .vesting.guard import TransferGuard
from .vesting.lifecycle import GrantLifecycleManager
from .vesting.schedule import ScheduleStore
from .vesting.uniform import GrantorRestrictions, UniformGrantor

logger = logging.getLogger(__name__)


def tokens_to_base_units(tokens: int, decimals: int) -> int:
    """Convert whole tokens to base units (``tokens * 10**decimals``), uint256-checked."""
    require_uint(tokens, label="tokens")
    return u256_mul(tokens, 10 ** decimals)


class GrantToken:
    """
    Vesting-aware token.

    Args:
        owner: Deployer; becomes owner, grantor and pauser and receives the supply
        name: Token name (config default)
        symbol: Token symbol (config default)
        decimals: Decimal places (config default)
        initial_supply: Genesis supply in whole tokens (config default)
        clock: Day clock; wall clock when omitted
        mint_supply: Perform the genesis mint (False when restoring state)
    """

    def __init__(
        self,
        owner: str,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        decimals: Optional[int] = None,
        initial_supply: Optional[int] = None,
        clock: Optional[LedgerClock] = None,
        mint_supply: bool = True,
    ):
        self._lock = threading.RLock()
        self.clock = clock or LedgerClock()

        owner_norm = normalize_address(owner)
        self.registry = AccountRegistry([owner_norm] if owner_norm else ())
        self.roles = GrantorRoles(owner=owner_norm)
        self.pause_gate = PauseGate(self.roles)

        self.ledger = BalanceLedger(
            name=name if name is not None else config.TOKEN_NAME,
            symbol=symbol if symbol is not None else config.TOKEN_SYMBOL,
            decimals=decimals if decimals is not None else config.DECIMALS,
            pause_gate=self.pause_gate.is_paused,
        )
        self.schedules = ScheduleStore()
        self.grants = GrantStore()
        self.guard = TransferGuard(self.ledger, self.schedules, self.grants, self.clock)
        self.lifecycle = GrantLifecycleManager(
            self.ledger,
            self.schedules,
            self.grants,
            self.guard,
            self.clock,
            is_registered=self.registry.is_registered,
        )
        self.uniform = UniformGrantor(self.lifecycle, self.schedules, self.clock)

        if mint_supply:
            supply = initial_supply if initial_supply is not None else config.INITIAL_SUPPLY
            self.ledger.mint(owner_norm, tokens_to_base_units(supply, self.ledger.decimals))
            logger.info(
                "Token deployed",
                extra={
                    "event": "token.deployed",
                    "symbol": self.ledger.symbol,
                    "owner": owner_norm[:10],
                    "supply": self.ledger.total_supply,
                },
            )

    # ==================== Metadata & Views ====================

    @property
    def name(self) -> str:
        return self.ledger.name

    @property
    def symbol(self) -> str:
        return self.ledger.symbol

    @property
    def decimals(self) -> int:
        return self.ledger.decimals

    @property
    def owner(self) -> str:
        return self.roles.owner

    @property
    def events(self) -> List[TokenEvent]:
        return self.ledger.events

    def total_supply(self) -> int:
        with self._lock:
            return self.ledger.total_supply

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self.ledger.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self.ledger.allowance(owner, spender)

    def available_amount(self, account: str, on_day_or_today: int = TODAY) -> int:
        with self._lock:
            return self.guard.available_amount(account, on_day_or_today)

    def today(self) -> int:
        with self._lock:
            return self.clock.today()

    def tokens_to_base_units(self, tokens: int) -> int:
        return tokens_to_base_units(tokens, self.ledger.decimals)

    # ==================== Token Operations ====================

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        with self._lock:
            return self.guard.transfer(caller, to, amount)

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        with self._lock:
            return self.guard.approve(caller, spender, amount)

    def transfer_from(self, caller: str, from_addr: str, to: str, amount: int) -> bool:
        with self._lock:
            return self.guard.transfer_from(caller, from_addr, to, amount)

    def burn(self, caller: str, amount: int) -> bool:
        with self._lock:
            return self.guard.burn(caller, amount)

    def safe_transfer(self, caller: str, to: str, amount: int) -> bool:
        """``transfer`` that refuses unregistered recipients."""
        with self._lock:
            self.registry.require_existing(to, caller)
            return self.guard.transfer(caller, to, amount)

    def safe_approve(self, caller: str, spender: str, amount: int) -> bool:
        with self._lock:
            self.registry.require_existing(spender, caller)
            return self.guard.approve(caller, spender, amount)

    def safe_transfer_from(self, caller: str, from_addr: str, to: str, amount: int) -> bool:
        with self._lock:
            self.registry.require_existing(to, caller)
            return self.guard.transfer_from(caller, from_addr, to, amount)

    # ==================== Registration ====================

    def register_account(self, caller: str) -> bool:
        """Register the caller's own account."""
        with self._lock:
            return self.registry.register_account(caller)

    def is_registered(self, account: str) -> bool:
        with self._lock:
            return self.registry.is_registered(account)

    # ==================== Roles & Pause ====================

    def is_grantor(self, account: str) -> bool:
        with self._lock:
            return self.roles.is_grantor(account)

    def is_uniform_grantor(self, account: str) -> bool:
        with self._lock:
            return self.roles.is_uniform_grantor(account)

    def add_grantor(self, caller: str, account: str, is_uniform_grantor: bool = False) -> bool:
        with self._lock:
            return self.roles.add_grantor(caller, account, is_uniform_grantor)

    def remove_grantor(self, caller: str, account: str) -> bool:
        with self._lock:
            return self.roles.remove_grantor(caller, account)

    def add_pauser(self, caller: str, account: str) -> bool:
        with self._lock:
            return self.roles.add_pauser(caller, account)

    def remove_pauser(self, caller: str, account: str) -> bool:
        with self._lock:
            return self.roles.remove_pauser(caller, account)

    def transfer_ownership(self, caller: str, new_owner: str) -> bool:
        with self._lock:
            return self.roles.transfer_ownership(
                caller,
                new_owner,
                is_registered=lambda account: self.registry.account_exists(account, caller),
            )

    def renounce_ownership(self, caller: str) -> bool:
        with self._lock:
            return self.roles.renounce_ownership(caller)

    def is_paused(self) -> bool:
        with self._lock:
            return self.pause_gate.is_paused()

    def pause(self, caller: str) -> bool:
        with self._lock:
            return self.pause_gate.pause(caller)

    def unpause(self, caller: str) -> bool:
        with self._lock:
            return self.pause_gate.unpause(caller)

    # ==================== Grants ====================

    def grant_vesting_tokens(
        self,
        caller: str,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        with self._lock:
            return self.lifecycle.grant_vesting_tokens(
                self.roles.capabilities_for(caller),
                beneficiary,
                total_amount,
                vesting_amount,
                start_day,
                duration,
                cliff_duration,
                interval,
                is_revocable,
            )

    def safe_grant_vesting_tokens(
        self,
        caller: str,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        with self._lock:
            return self.lifecycle.safe_grant_vesting_tokens(
                self.roles.capabilities_for(caller),
                beneficiary,
                total_amount,
                vesting_amount,
                start_day,
                duration,
                cliff_duration,
                interval,
                is_revocable,
            )

    def revoke_grant(self, caller: str, beneficiary: str, on_day: int = TODAY) -> int:
        with self._lock:
            return self.lifecycle.revoke_grant(self.roles.capabilities_for(caller), beneficiary, on_day)

    def vesting_for_account_as_of(
        self,
        caller: str,
        account: str,
        on_day_or_today: int = TODAY,
    ) -> VestingStatus:
        with self._lock:
            return self.lifecycle.vesting_for_account_as_of(
                self.roles.capabilities_for(caller), account, on_day_or_today
            )

    def vesting_as_of(self, caller: str, on_day_or_today: int = TODAY) -> VestingStatus:
        with self._lock:
            return self.lifecycle.vesting_as_of(caller, on_day_or_today)

    def get_intrinsic_vesting_schedule(self, caller: str, grant_holder: str) -> Tuple[int, int, int]:
        with self._lock:
            return self.lifecycle.get_intrinsic_vesting_schedule(
                self.roles.capabilities_for(caller), grant_holder
            )

    # ==================== Uniform Grants ====================

    def set_restrictions(
        self,
        caller: str,
        grantor: str,
        min_start_day: int,
        max_start_day: int,
        expiration_day: int,
    ) -> bool:
        with self._lock:
            return self.uniform.set_restrictions(
                self.roles.capabilities_for(caller), grantor, min_start_day, max_start_day, expiration_day
            )

    def get_restrictions(self, grantor: str) -> GrantorRestrictions:
        with self._lock:
            return self.uniform.get_restrictions(grantor)

    def set_grantor_vesting_schedule(
        self,
        caller: str,
        grantor: str,
        duration: int,
        cliff_duration: int,
        interval: int,
        is_revocable: bool,
    ) -> bool:
        with self._lock:
            return self.uniform.set_grantor_vesting_schedule(
                self.roles.capabilities_for(caller), grantor, duration, cliff_duration, interval, is_revocable
            )

    def grant_uniform_vesting_tokens(
        self,
        caller: str,
        beneficiary: str,
        total_amount: int,
        vesting_amount: int,
        start_day: int,
    ) -> bool:
        with self._lock:
            return self.uniform.grant_uniform_vesting_tokens(
                self.roles.capabilities_for(caller), beneficiary, total_amount, vesting_amount, start_day
            )

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "version": STATE_VERSION,
                "ledger": self.ledger.to_dict(),
                "schedules": self.schedules.to_dict(),
                "grants": self.grants.to_dict(),
                "restrictions": self.uniform.to_dict(),
                "roles": self.roles.to_dict(),
                "registered": self.registry.to_list(),
                "paused": self.pause_gate.is_paused(),
                "last_day": self.clock.last_day,
            }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], clock: Optional[LedgerClock] = None) -> "GrantToken":
        """Rebuild a token from ``to_dict`` output (already validated by the caller)."""
        ledger_data = data["ledger"]
        token = cls(
            owner=data["roles"]["owner"],
            name=ledger_data["name"],
            symbol=ledger_data["symbol"],
            decimals=ledger_data.get("decimals"),
            clock=clock,
            mint_supply=False,
        )
        token.clock.resume_from(data.get("last_day", 0))

        ledger = BalanceLedger.from_dict(ledger_data)
        ledger.pause_gate = token.pause_gate.is_paused
        token.ledger = ledger

        roles = GrantorRoles.from_dict(data["roles"])
        token.roles = roles
        token.pause_gate.roles = roles
        token.pause_gate.paused = bool(data.get("paused", False))

        token.registry = AccountRegistry(data.get("registered", []))
        token.schedules = ScheduleStore.from_dict(data.get("schedules", {}))
        token.grants = GrantStore.from_dict(data.get("grants", {}))

        token.guard = TransferGuard(token.ledger, token.schedules, token.grants, token.clock)
        token.lifecycle = GrantLifecycleManager(
            token.ledger,
            token.schedules,
            token.grants,
            token.guard,
            token.clock,
            is_registered=token.registry.is_registered,
        )
        token.uniform = UniformGrantor(token.lifecycle, token.schedules, token.clock)
        token.uniform.load_restrictions(data.get("restrictions", {}))
        return token
