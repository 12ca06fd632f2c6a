"""
Pydantic models of the persisted ledger state.

Loading a state file runs it through ``TokenStateModel`` so a hand-edited
or truncated file fails loudly instead of producing a ledger that violates
its own invariants.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, conint, model_validator

from .constants import TEN_YEARS_DAYS, UINT32_MAX, UINT256_MAX
from .exceptions import CorruptedStateError

STATE_VERSION = 1

Amount = conint(ge=0, le=UINT256_MAX)
DayNumber = conint(ge=0, le=UINT32_MAX)


class LedgerStateModel(BaseModel):
    name: str
    symbol: str
    decimals: conint(ge=0, le=77)
    total_supply: Amount
    minted: bool = False
    balances: dict[str, Amount] = Field(default_factory=dict)
    allowances: dict[str, dict[str, Amount]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _supply_matches_balances(self) -> "LedgerStateModel":
        if sum(self.balances.values()) != self.total_supply:
            raise ValueError("sum of balances does not equal total_supply")
        return self


class ScheduleModel(BaseModel):
    is_valid: bool
    is_revocable: bool
    cliff_duration_days: DayNumber
    total_duration_days: DayNumber
    interval_days: DayNumber

    @model_validator(mode="after")
    def _self_consistent(self) -> "ScheduleModel":
        if not self.is_valid:
            return self
        if not (
            0 < self.total_duration_days <= TEN_YEARS_DAYS
            and self.cliff_duration_days < self.total_duration_days
            and self.interval_days >= 1
            and self.total_duration_days % self.interval_days == 0
            and self.cliff_duration_days % self.interval_days == 0
        ):
            raise ValueError("stored schedule violates schedule invariants")
        return self


class GrantModel(BaseModel):
    is_active: bool
    was_revoked: bool
    start_day: DayNumber
    vesting_amount: Amount
    vesting_location: str
    grantor: str

    @model_validator(mode="after")
    def _not_active_and_revoked(self) -> "GrantModel":
        if self.is_active and self.was_revoked:
            raise ValueError("grant cannot be both active and revoked")
        return self


class RestrictionsModel(BaseModel):
    is_valid: bool
    min_start_day: DayNumber
    max_start_day: DayNumber
    expiration_day: DayNumber


class RolesModel(BaseModel):
    owner: str
    grantors: list[str] = Field(default_factory=list)
    uniform_grantors: list[str] = Field(default_factory=list)
    pausers: list[str] = Field(default_factory=list)


class TokenStateModel(BaseModel):
    version: int = STATE_VERSION
    ledger: LedgerStateModel
    schedules: dict[str, ScheduleModel] = Field(default_factory=dict)
    grants: dict[str, GrantModel] = Field(default_factory=dict)
    restrictions: dict[str, RestrictionsModel] = Field(default_factory=dict)
    roles: RolesModel
    registered: list[str] = Field(default_factory=list)
    paused: bool = False
    last_day: DayNumber = 0

    @model_validator(mode="after")
    def _grants_reference_schedules(self) -> "TokenStateModel":
        for beneficiary, grant in self.grants.items():
            if not grant.is_active:
                continue
            schedule = self.schedules.get(grant.vesting_location)
            if schedule is None or not schedule.is_valid:
                raise ValueError(
                    f"active grant of {beneficiary} references missing schedule {grant.vesting_location}"
                )
        return self


def validate_state(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a serialized state dict; raise CorruptedStateError on failure."""
    try:
        model = TokenStateModel.model_validate(data)
    except ValidationError as exc:
        raise CorruptedStateError(
            "ledger state failed validation",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
    if model.version != STATE_VERSION:
        raise CorruptedStateError(
            f"unsupported state version {model.version}",
            details={"version": model.version, "supported": STATE_VERSION},
        )
    return model.model_dump()
