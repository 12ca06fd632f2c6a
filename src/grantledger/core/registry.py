from __future__ import annotations

import logging
from typing import Iterable

from .contracts.erc20 import is_zero_address, normalize_address
from .exceptions import NotRegisteredError, ZeroAddressError

logger = logging.getLogger(__name__)


class AccountRegistry:
    """
    Self-registration of accounts.

    "Safe" operations only send tokens to accounts that registered
    themselves, which guards against typos in recipient addresses.
    """

    def __init__(self, registered: Iterable[str] = ()):
        self._registered: set[str] = {normalize_address(a) for a in registered}

    def register_account(self, account: str) -> bool:
        account_norm = normalize_address(account)
        if is_zero_address(account_norm):
            raise ZeroAddressError("cannot register the zero address")
        if account_norm not in self._registered:
            self._registered.add(account_norm)
            logger.info(
                "Account registered",
                extra={"event": "registry.account_registered", "account": account_norm[:10]},
            )
        return True

    def is_registered(self, account: str) -> bool:
        return normalize_address(account) in self._registered

    def account_exists(self, account: str, caller: str) -> bool:
        """The caller always counts as an existing account."""
        return normalize_address(account) == normalize_address(caller) or self.is_registered(account)

    def require_existing(self, account: str, caller: str) -> None:
        if not self.account_exists(account, caller):
            raise NotRegisteredError(
                "account not registered",
                details={"account": normalize_address(account)},
            )

    def to_list(self) -> list[str]:
        return sorted(self._registered)

    def __len__(self) -> int:
        return len(self._registered)
