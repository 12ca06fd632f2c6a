"""
GrantLedger Constants

Fixed numbers shared by the ledger and the vesting engine. Day numbers count
whole days since the Unix epoch (1970-01-01 UTC).

NOTE: Changing any of the day-range constants changes which grants are
accepted; existing persisted grants are not re-validated on load.
"""

from typing import Final

# =============================================================================
# TIME CONSTANTS
# =============================================================================

SECONDS_PER_DAY: Final[int] = 86400  # 60 * 60 * 24

# Jan 1, 2000 -> Jan 1, 3000 spans 365243 days (leap-aware)
THOUSAND_YEARS_DAYS: Final[int] = 365243
TEN_YEARS_DAYS: Final[int] = THOUSAND_YEARS_DAYS // 100  # 3652

JAN_1_2000_SECONDS: Final[int] = 946684800  # Saturday, 2000-01-01 00:00:00 UTC
JAN_1_2000_DAYS: Final[int] = JAN_1_2000_SECONDS // SECONDS_PER_DAY  # 10957
JAN_1_3000_DAYS: Final[int] = JAN_1_2000_DAYS + THOUSAND_YEARS_DAYS

# Passing this as a day means "today, as observed by the clock"
TODAY: Final[int] = 0

# =============================================================================
# INTEGER BOUNDS
# =============================================================================

UINT32_MAX: Final[int] = 2**32 - 1
UINT256_MAX: Final[int] = 2**256 - 1

# =============================================================================
# TOKEN DEFAULTS
# =============================================================================

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

DEFAULT_TOKEN_NAME: Final[str] = "GrantLedger Token"
DEFAULT_TOKEN_SYMBOL: Final[str] = "GLT"
DEFAULT_DECIMALS: Final[int] = 18

# Genesis supply in whole tokens, minted once to the deployer
DEFAULT_INITIAL_SUPPLY_TOKENS: Final[int] = 946_970_000
