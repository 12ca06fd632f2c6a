"""
GrantLedger contract primitives.

- ERC20-style balance ledger (balances, allowances, supply)
"""

from .erc20 import BalanceLedger, TokenEvent, is_zero_address, normalize_address

__all__ = ["BalanceLedger", "TokenEvent", "is_zero_address", "normalize_address"]
