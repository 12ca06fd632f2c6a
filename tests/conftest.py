"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

# Add src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"

sys.path.insert(0, str(src_path))

import pytest

from grantledger.core.clock import FixedClock
from grantledger.core.constants import JAN_1_2000_DAYS
from grantledger.core.token import GrantToken

OWNER = "0x" + "0a" * 20
GRANTOR = "0x" + "0b" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
CAROL = "0x" + "c0" * 20

# 2027-05-18, far enough from both ends of the valid start-day range
START_DAY = JAN_1_2000_DAYS + 10_000


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def grantor():
    return GRANTOR


@pytest.fixture
def alice():
    return ALICE


@pytest.fixture
def bob():
    return BOB


@pytest.fixture
def carol():
    return CAROL


@pytest.fixture
def start_day():
    return START_DAY


@pytest.fixture
def clock():
    """Clock pinned to START_DAY; tests move it with ``clock.advance``."""
    return FixedClock(START_DAY)


@pytest.fixture
def token(clock):
    """Token with 1,000,000 whole tokens of 18 decimals minted to OWNER."""
    return GrantToken(
        owner=OWNER,
        name="Test Grant Token",
        symbol="TGT",
        decimals=18,
        initial_supply=1_000_000,
        clock=clock,
    )


@pytest.fixture
def small_token(clock):
    """Token with 0 decimals and 10,000 units, for exact arithmetic checks."""
    return GrantToken(
        owner=OWNER,
        name="Small",
        symbol="SML",
        decimals=0,
        initial_supply=10_000,
        clock=clock,
    )
