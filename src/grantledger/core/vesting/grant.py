from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict

from ..contracts.erc20 import normalize_address


@dataclass(frozen=True)
class TokenGrant:
    """
    One beneficiary's grant.

    ``vesting_amount`` is the locked part of the deposit; the deposit total
    lives only in the ledger. ``vesting_location`` is a lookup key into the
    schedule store, not ownership of the schedule.
    """

    is_active: bool = False
    was_revoked: bool = False
    start_day: int = 0
    vesting_amount: int = 0
    vesting_location: str = ""
    grantor: str = ""

    def revoked(self) -> "TokenGrant":
        return replace(self, is_active=False, was_revoked=True)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenGrant":
        return cls(**data)


NO_GRANT = TokenGrant()


class GrantStore:
    """Grants keyed by beneficiary. Records are replaced, never deleted."""

    def __init__(self) -> None:
        self._grants: dict[str, TokenGrant] = {}

    def get(self, beneficiary: str) -> TokenGrant:
        return self._grants.get(normalize_address(beneficiary), NO_GRANT)

    def put(self, beneficiary: str, grant: TokenGrant) -> None:
        self._grants[normalize_address(beneficiary)] = grant

    def has_active_grant(self, beneficiary: str) -> bool:
        return self.get(beneficiary).is_active

    def referencing(self, location: str) -> list[str]:
        """Beneficiaries whose active grant points at ``location``."""
        location_norm = normalize_address(location)
        return [
            beneficiary
            for beneficiary, grant in self._grants.items()
            if grant.is_active and grant.vesting_location == location_norm
        ]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {beneficiary: grant.to_dict() for beneficiary, grant in self._grants.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "GrantStore":
        store = cls()
        store._grants = {
            normalize_address(beneficiary): TokenGrant.from_dict(grant)
            for beneficiary, grant in data.items()
        }
        return store

    def __len__(self) -> int:
        return len(self._grants)
