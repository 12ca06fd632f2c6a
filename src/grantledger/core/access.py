"""
Owner / grantor role administration and the pause gate.

The vesting core never consults this module directly. It receives a
``CallerCapabilities`` value per call; ``GrantorRoles.capabilities_for``
is how the token facade produces one.

Rules:
- The deployer starts as owner, grantor and pauser
- Only the owner adds or removes grantors
- Ownership moves only to a registered account, and the grantor role
  moves with it
- Ownership can never be renounced
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Set

from .contracts.erc20 import is_zero_address, normalize_address
from .exceptions import NotAuthorizedError, NotRegisteredError, ZeroAddressError

logger = logging.getLogger(__name__)


class Role(Enum):
    """Roles an account can hold."""
    OWNER = "owner"
    GRANTOR = "grantor"
    UNIFORM_GRANTOR = "uniform_grantor"
    PAUSER = "pauser"


@dataclass(frozen=True)
class CallerCapabilities:
    """What the caller of a single operation is allowed to do."""

    caller: str
    is_owner: bool = False
    is_grantor: bool = False
    is_uniform_grantor: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "caller", normalize_address(self.caller))

    def require_owner(self) -> None:
        if not self.is_owner:
            raise NotAuthorizedError("onlyOwner", details={"caller": self.caller})

    def require_grantor(self) -> None:
        if not self.is_grantor:
            raise NotAuthorizedError("onlyGrantor", details={"caller": self.caller})

    def require_uniform_grantor(self) -> None:
        if not self.is_uniform_grantor:
            raise NotAuthorizedError("onlyUniformGrantor", details={"caller": self.caller})

    def require_grantor_or_self(self, account: str) -> None:
        if not (self.is_grantor or self.caller == normalize_address(account)):
            raise NotAuthorizedError(
                "onlyGrantorOrSelf",
                details={"caller": self.caller, "account": account},
            )


@dataclass
class GrantorRoles:
    """
    Role assignments for the token.

    Security:
    - Only the owner can grant/revoke grantor and pauser roles
    - Audit trail of role changes
    """

    owner: str = ""

    grantors: Set[str] = field(default_factory=set)
    uniform_grantors: Set[str] = field(default_factory=set)
    pausers: Set[str] = field(default_factory=set)

    # Audit log
    role_changes: list = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.owner:
            self.owner = normalize_address(self.owner)
            self.grantors.add(self.owner)
            self.pausers.add(self.owner)

    # ==================== Queries ====================

    def is_owner(self, account: str) -> bool:
        return bool(self.owner) and normalize_address(account) == self.owner

    def is_grantor(self, account: str) -> bool:
        return normalize_address(account) in self.grantors

    def is_uniform_grantor(self, account: str) -> bool:
        account_norm = normalize_address(account)
        return account_norm in self.grantors and account_norm in self.uniform_grantors

    def is_pauser(self, account: str) -> bool:
        return normalize_address(account) in self.pausers

    def capabilities_for(self, account: str) -> CallerCapabilities:
        return CallerCapabilities(
            caller=normalize_address(account),
            is_owner=self.is_owner(account),
            is_grantor=self.is_grantor(account),
            is_uniform_grantor=self.is_uniform_grantor(account),
        )

    # ==================== Administration ====================

    def add_grantor(self, caller: str, account: str, is_uniform_grantor: bool = False) -> bool:
        """
        Grant the grantor role (owner only).

        Args:
            caller: Must be the owner
            account: Account that may fund grants from now on
            is_uniform_grantor: Also allow uniform (shared schedule) grants
        """
        self._require_owner(caller)
        account_norm = self._validated(account)
        self.grantors.add(account_norm)
        if is_uniform_grantor:
            self.uniform_grantors.add(account_norm)
        else:
            self.uniform_grantors.discard(account_norm)
        self._audit("grant", Role.GRANTOR, account_norm, caller, uniform=is_uniform_grantor)
        return True

    def remove_grantor(self, caller: str, account: str) -> bool:
        self._require_owner(caller)
        account_norm = normalize_address(account)
        self.grantors.discard(account_norm)
        self.uniform_grantors.discard(account_norm)
        self._audit("revoke", Role.GRANTOR, account_norm, caller)
        return True

    def add_pauser(self, caller: str, account: str) -> bool:
        self._require_owner(caller)
        account_norm = self._validated(account)
        self.pausers.add(account_norm)
        self._audit("grant", Role.PAUSER, account_norm, caller)
        return True

    def remove_pauser(self, caller: str, account: str) -> bool:
        self._require_owner(caller)
        account_norm = normalize_address(account)
        self.pausers.discard(account_norm)
        self._audit("revoke", Role.PAUSER, account_norm, caller)
        return True

    def transfer_ownership(
        self,
        caller: str,
        new_owner: str,
        is_registered: Callable[[str], bool] | None = None,
    ) -> bool:
        """
        Hand ownership to ``new_owner``; the grantor role moves along.

        Raises:
            NotAuthorizedError: If caller is not the owner
            NotRegisteredError: If new_owner never registered
        """
        self._require_owner(caller)
        new_owner_norm = self._validated(new_owner)
        if is_registered is not None and not is_registered(new_owner_norm):
            raise NotRegisteredError(
                "account not registered",
                details={"account": new_owner_norm},
            )

        previous = self.owner
        self.grantors.discard(previous)
        self.uniform_grantors.discard(previous)
        self.owner = new_owner_norm
        self.grantors.add(new_owner_norm)
        self._audit("transfer", Role.OWNER, new_owner_norm, caller, previous_owner=previous)
        return True

    def renounce_ownership(self, caller: str) -> bool:
        """Always refused: the token must keep an owner."""
        self._require_owner(caller)
        raise NotAuthorizedError("forbidden: ownership cannot be renounced")

    # ==================== Helpers ====================

    def _require_owner(self, caller: str) -> None:
        if not self.is_owner(caller):
            raise NotAuthorizedError("onlyOwner", details={"caller": normalize_address(caller)})

    def _validated(self, account: str) -> str:
        account_norm = normalize_address(account)
        if is_zero_address(account_norm):
            raise ZeroAddressError("role holder is zero address")
        return account_norm

    def _audit(self, action: str, role: Role, account: str, admin: str, **extra: Any) -> None:
        self.role_changes.append({
            "action": action,
            "role": role.value,
            "address": account,
            "admin": normalize_address(admin),
            "timestamp": time.time(),
            **extra,
        })
        logger.info(
            "Role %s", action,
            extra={
                "event": f"roles.{role.value}_{action}",
                "role": role.value,
                "address": account[:10],
                "admin": normalize_address(admin)[:10],
            },
        )

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "grantors": sorted(self.grantors),
            "uniform_grantors": sorted(self.uniform_grantors),
            "pausers": sorted(self.pausers),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrantorRoles":
        roles = cls()
        roles.owner = normalize_address(data.get("owner", ""))
        roles.grantors = {normalize_address(a) for a in data.get("grantors", [])}
        roles.uniform_grantors = {normalize_address(a) for a in data.get("uniform_grantors", [])}
        roles.pausers = {normalize_address(a) for a in data.get("pausers", [])}
        return roles


@dataclass
class PauseGate:
    """Boolean gate the ledger's mutating operations honor."""

    roles: GrantorRoles
    paused: bool = False

    def is_paused(self) -> bool:
        return self.paused

    def pause(self, caller: str) -> bool:
        self._require_pauser(caller)
        self.paused = True
        logger.warning("Token paused", extra={"event": "pause.paused", "by": normalize_address(caller)[:10]})
        return True

    def unpause(self, caller: str) -> bool:
        self._require_pauser(caller)
        self.paused = False
        logger.info("Token unpaused", extra={"event": "pause.unpaused", "by": normalize_address(caller)[:10]})
        return True

    def _require_pauser(self, caller: str) -> None:
        if not self.roles.is_pauser(caller):
            raise NotAuthorizedError("onlyPauser", details={"caller": normalize_address(caller)})
