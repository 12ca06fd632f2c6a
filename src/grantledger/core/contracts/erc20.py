"""
ERC20-style Balance Ledger.

Holds per-account balances, per-(owner, spender) allowances and the total
supply, and exposes the raw transfer/approve/transferFrom/mint/burn
primitives. The ledger knows nothing about vesting; the transfer guard in
``grantledger.core.vesting.guard`` wraps the holder-initiated entry points.

Security features:
- Checked uint256 arithmetic (no wraparound)
- Zero address checks
- Single genesis mint, no later minting
- Every operation validates fully before it writes, so a raised error
  leaves balances, allowances and supply untouched
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from ..constants import DEFAULT_DECIMALS, ZERO_ADDRESS
from ..exceptions import (
    BalanceUnderflowError,
    ContractPausedError,
    InsufficientAllowanceError,
    NotAuthorizedError,
    ZeroAddressError,
)
from ..safe_math import require_uint, u256_add, u256_sub

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Normalize an account identifier to lowercase."""
    return address.strip().lower()


def is_zero_address(address: str) -> bool:
    return not address or address == ZERO_ADDRESS


@dataclass
class TokenEvent:
    """Represents a ledger event."""

    event_type: str  # "Transfer" or "Approval"
    from_address: str
    to_address: str
    value: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class BalanceLedger:
    """
    Balance, allowance and supply bookkeeping.

    All balances and allowances are stored in-memory; ``to_dict`` /
    ``from_dict`` round-trip them through the state file.

    ``pause_gate`` is an optional predicate; while it returns True every
    mutating call fails with ContractPausedError.
    """

    # Token metadata
    name: str
    symbol: str
    decimals: int = DEFAULT_DECIMALS
    total_supply: int = 0

    # State
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[str, dict[str, int]] = field(default_factory=dict)

    # Set once the genesis mint happened
    minted: bool = False

    # Event log
    events: list[TokenEvent] = field(default_factory=list)

    pause_gate: Callable[[], bool] | None = field(default=None, repr=False, compare=False)

    # ==================== View Functions ====================

    def balance_of(self, account: str) -> int:
        """
        Get the token balance of an account.

        Args:
            account: Address to check

        Returns:
            Token balance in base units
        """
        return self.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        """
        Get the allowance granted by owner to spender.

        Args:
            owner: Token owner address
            spender: Spender address

        Returns:
            Approved amount
        """
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)
        return self.allowances.get(owner_norm, {}).get(spender_norm, 0)

    # ==================== State-Changing Functions ====================

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Move tokens from sender to recipient.

        Args:
            sender: Address sending tokens
            recipient: Address receiving tokens
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            ZeroAddressError: If either side is the null account
            BalanceUnderflowError: If sender's balance is too low
            ArithmeticFault: If the amount is outside uint256
        """
        self.require_not_paused()
        sender_norm = normalize_address(sender)
        recipient_norm = normalize_address(recipient)

        self._validate_address(sender_norm, "sender")
        self._validate_address(recipient_norm, "recipient")
        require_uint(amount, label="amount")

        self._move(sender_norm, recipient_norm, amount)

        logger.debug(
            "Ledger transfer",
            extra={
                "event": "ledger.transfer",
                "token": self.symbol,
                "from": sender_norm[:10],
                "to": recipient_norm[:10],
                "amount": amount,
            },
        )
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """
        Set spender's allowance over owner's tokens.

        Args:
            owner: Token owner
            spender: Address being approved
            amount: Amount to approve (replaces any previous allowance)

        Returns:
            True if successful
        """
        self.require_not_paused()
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)

        self._validate_address(owner_norm, "owner")
        self._validate_address(spender_norm, "spender")
        require_uint(amount, label="amount")

        self.allowances.setdefault(owner_norm, {})[spender_norm] = amount
        self._emit_approval(owner_norm, spender_norm, amount)
        return True

    def transfer_from(self, spender: str, from_addr: str, to_addr: str, amount: int) -> bool:
        """
        Transfer tokens using an allowance.

        Args:
            spender: Address executing the transfer
            from_addr: Token owner
            to_addr: Recipient
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            InsufficientAllowanceError: If the allowance is too low
            BalanceUnderflowError: If the owner's balance is too low
        """
        self.require_not_paused()
        spender_norm = normalize_address(spender)
        from_norm = normalize_address(from_addr)
        to_norm = normalize_address(to_addr)

        self._validate_address(from_norm, "sender")
        self._validate_address(to_norm, "recipient")
        require_uint(amount, label="amount")

        current_allowance = self.allowance(from_norm, spender_norm)
        if current_allowance < amount:
            raise InsufficientAllowanceError(
                f"Ledger: insufficient allowance ({current_allowance} < {amount})",
                details={"owner": from_norm, "spender": spender_norm, "allowance": current_allowance},
            )
        new_allowance = u256_sub(current_allowance, amount)

        # Balance movement validates before writing; allowance written after
        self._move(from_norm, to_norm, amount)
        self.allowances.setdefault(from_norm, {})[spender_norm] = new_allowance
        return True

    # ==================== Minting & Burning ====================

    def mint(self, to: str, amount: int) -> bool:
        """
        Genesis mint. Only the first call succeeds.

        Args:
            to: Recipient of the initial supply
            amount: Amount to mint

        Raises:
            NotAuthorizedError: If the genesis mint already happened
            ArithmeticFault: If total supply would overflow
        """
        self.require_not_paused()
        if self.minted:
            raise NotAuthorizedError("Ledger: supply was already minted at genesis")

        to_norm = normalize_address(to)
        self._validate_address(to_norm, "recipient")
        require_uint(amount, label="amount")

        new_supply = u256_add(self.total_supply, amount)
        new_balance = u256_add(self.balances.get(to_norm, 0), amount)

        self.total_supply = new_supply
        self.balances[to_norm] = new_balance
        self.minted = True

        self._emit_transfer(ZERO_ADDRESS, to_norm, amount)

        logger.info(
            "Ledger genesis mint",
            extra={
                "event": "ledger.mint",
                "token": self.symbol,
                "to": to_norm[:10],
                "amount": amount,
                "new_supply": self.total_supply,
            },
        )
        return True

    def burn(self, holder: str, amount: int) -> bool:
        """
        Destroy tokens from holder's own balance.

        Args:
            holder: Address burning tokens
            amount: Amount to burn

        Raises:
            BalanceUnderflowError: If holder's balance is too low
        """
        self.require_not_paused()
        holder_norm = normalize_address(holder)
        self._validate_address(holder_norm, "holder")
        require_uint(amount, label="amount")

        balance = self.balances.get(holder_norm, 0)
        if balance < amount:
            raise BalanceUnderflowError(
                f"Ledger: burn amount exceeds balance ({amount} > {balance})",
                details={"account": holder_norm, "balance": balance, "amount": amount},
            )
        new_balance = u256_sub(balance, amount)
        new_supply = u256_sub(self.total_supply, amount)

        self.balances[holder_norm] = new_balance
        self.total_supply = new_supply

        self._emit_transfer(holder_norm, ZERO_ADDRESS, amount)

        logger.info(
            "Ledger burn",
            extra={
                "event": "ledger.burn",
                "token": self.symbol,
                "from": holder_norm[:10],
                "amount": amount,
                "new_supply": self.total_supply,
            },
        )
        return True

    # ==================== Helpers ====================

    def _move(self, from_norm: str, to_norm: str, amount: int) -> None:
        """Debit and credit with both new balances computed before either is written."""
        from_balance = self.balances.get(from_norm, 0)
        if from_balance < amount:
            raise BalanceUnderflowError(
                f"Ledger: transfer amount exceeds balance ({amount} > {from_balance})",
                details={"account": from_norm, "balance": from_balance, "amount": amount},
            )
        new_from = u256_sub(from_balance, amount)
        to_base = new_from if to_norm == from_norm else self.balances.get(to_norm, 0)
        new_to = u256_add(to_base, amount)

        self.balances[from_norm] = new_from
        self.balances[to_norm] = new_to
        self._emit_transfer(from_norm, to_norm, amount)

    def _validate_address(self, address: str, field_name: str) -> None:
        if is_zero_address(address):
            raise ZeroAddressError(f"Ledger: {field_name} is zero address")

    def require_not_paused(self) -> None:
        if self.pause_gate is not None and self.pause_gate():
            raise ContractPausedError("Ledger: token is paused")

    def _emit_transfer(self, from_addr: str, to_addr: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type="Transfer",
                from_address=from_addr,
                to_address=to_addr,
                value=amount,
            )
        )

    def _emit_approval(self, owner: str, spender: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type="Approval",
                from_address=owner,
                to_address=spender,
                value=amount,
            )
        )

    def check_supply_invariant(self) -> bool:
        """True when the sum of all balances equals the total supply."""
        return sum(self.balances.values()) == self.total_supply

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize ledger state to dictionary."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "total_supply": self.total_supply,
            "minted": self.minted,
            "balances": {k: v for k, v in self.balances.items() if v},
            "allowances": {
                owner: {spender: v for spender, v in spenders.items() if v}
                for owner, spenders in self.allowances.items()
                if any(spenders.values())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BalanceLedger":
        """Deserialize ledger state from dictionary."""
        ledger = cls(
            name=data["name"],
            symbol=data["symbol"],
            decimals=data.get("decimals", DEFAULT_DECIMALS),
            total_supply=data.get("total_supply", 0),
            minted=data.get("minted", False),
        )
        ledger.balances = {k: int(v) for k, v in data.get("balances", {}).items()}
        ledger.allowances = {
            owner: {spender: int(v) for spender, v in spenders.items()}
            for owner, spenders in data.get("allowances", {}).items()
        }
        return ledger

