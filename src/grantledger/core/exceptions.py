"""
GrantLedger exception hierarchy.

Every ledger, vesting and grant failure is raised as a typed subclass of
LedgerError so callers can tell "you're broke" apart from "you're not vested
yet" or "you may not do that". A raised LedgerError always means the
operation did not happen: no balance, allowance, schedule or grant changed.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class LedgerError(Exception):
    """Base exception for all ledger-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the caller may retry with corrected inputs
    """

    recoverable: bool = True

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if recoverable is not None:
            self.recoverable = recoverable


# ==================== Arithmetic & Addressing ====================


class ArithmeticFault(LedgerError):
    """Raised when a checked integer operation would underflow or overflow."""
    pass


class BalanceUnderflowError(ArithmeticFault):
    """Raised when a ledger debit would take a balance below zero."""
    pass


class InsufficientAllowanceError(ArithmeticFault):
    """Raised when a spender's allowance is lower than the requested amount."""
    pass


class ZeroAddressError(LedgerError):
    """Raised when the null account is used as a sender, recipient or spender."""
    pass


# ==================== Funds ====================


class FundsError(LedgerError):
    """Raised when an account cannot cover a requested debit."""
    pass


class InsufficientFundsError(FundsError):
    """Raised when the raw balance is lower than the requested amount."""
    pass


class InsufficientVestedFundsError(FundsError):
    """Raised when the balance covers the amount but part of it is not vested yet."""
    pass


# ==================== Authorization ====================


class NotAuthorizedError(LedgerError):
    """Raised when the caller lacks the capability required for an operation."""
    pass


class NotRegisteredError(NotAuthorizedError):
    """Raised when a "safe" operation targets an account that never registered."""
    pass


class ContractPausedError(LedgerError):
    """Raised when a mutating operation is attempted while the pause gate is closed."""
    pass


# ==================== Vesting Schedules ====================


class VestingError(LedgerError):
    """Base class for schedule and grant failures."""
    pass


class InvalidScheduleError(VestingError):
    """Raised when cliff/duration/interval violate the schedule invariants."""
    pass


class ScheduleExistsError(VestingError):
    """Raised when a write-once shared schedule is already set for a location."""
    pass


class NoScheduleError(VestingError):
    """Raised when a grant references a vesting location without a valid schedule."""
    pass


# ==================== Grants ====================


class InvalidGrantParamsError(VestingError):
    """Raised when grant amounts or start day are out of range."""
    pass


class GrantExistsError(VestingError):
    """Raised when the beneficiary already holds an active grant."""
    pass


class NoActiveGrantError(VestingError):
    """Raised when revoking an account that has no active grant."""
    pass


class IrrevocableError(VestingError):
    """Raised when revoking a grant whose schedule is not revocable."""
    pass


class RevokeHasNoEffectError(VestingError):
    """Raised when revoking on a day after the grant is fully vested."""
    pass


class CannotRevokeVestedError(VestingError):
    """Raised when revoking as of a day that has already passed."""
    pass


# ==================== Uniform Grantors ====================


class InvalidRestrictionsError(VestingError):
    """Raised when a grantor's start-day window or expiration is malformed."""
    pass


class GrantorExpiredError(VestingError):
    """Raised when a uniform grantor has no restrictions or they have expired."""
    pass


# ==================== Configuration & Storage ====================


class ConfigurationError(LedgerError):
    """Raised when required configuration is missing or invalid."""
    recoverable = False


class StorageError(LedgerError):
    """Raised when ledger state cannot be written or read."""
    pass


class CorruptedStateError(StorageError):
    """Raised when persisted state fails checksum or schema validation."""
    recoverable = False  # Data corruption usually requires manual intervention


# ==================== Utility Functions ====================


def get_error_context(exc: Exception) -> Dict[str, Any]:
    """Extract error context from an exception for logging.

    Args:
        exc: The exception to extract context from

    Returns:
        Dictionary containing error type, message, and any additional details
    """
    context: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, LedgerError):
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    return context
