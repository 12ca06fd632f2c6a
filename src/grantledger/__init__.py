"""
GrantLedger - Vesting Token Ledger

A token ledger whose balances can be locked by day-based vesting grants.

Main Components:
- Ledger: ERC20-style balances, allowances and supply accounting
- Vesting: schedules, grants, vesting calculator and transfer guard
- Grants: per-wallet and uniform (shared schedule) grant lifecycle
- Access: owner/grantor roles, account registration and pause gate
- CLI: command line interface over a persisted ledger state file
"""

__version__ = "0.1.0"
__author__ = "GrantLedger Development Team"

__all__ = []
