"""
Property-based tests for vesting and ledger invariants.

- Not-vested amount is the full grant before the cliff, zero from the end
  day on, and never increases in between
- Transfers, grants and revocations conserve total supply
- Revocation moves exactly the unvested amount from beneficiary to grantor

Uses Hypothesis for property-based testing with random inputs.
"""

from hypothesis import assume, given, settings, strategies as st

from grantledger.core.clock import FixedClock
from grantledger.core.constants import JAN_1_2000_DAYS, TEN_YEARS_DAYS
from grantledger.core.exceptions import LedgerError
from grantledger.core.token import GrantToken
from grantledger.core.vesting.calculator import available_amount, not_vested_amount
from grantledger.core.vesting.grant import TokenGrant
from grantledger.core.vesting.schedule import VestingSchedule

START = JAN_1_2000_DAYS + 10_000
OWNER = "0x" + "0a" * 20
HOLDERS = ["0x" + h * 20 for h in ("a1", "b2", "c3")]


@st.composite
def schedules(draw):
    interval = draw(st.integers(min_value=1, max_value=90))
    steps = draw(st.integers(min_value=1, max_value=TEN_YEARS_DAYS // interval))
    cliff_steps = draw(st.integers(min_value=0, max_value=steps - 1))
    return VestingSchedule.create(cliff_steps * interval, steps * interval, interval, True)


def _grant(amount):
    return TokenGrant(
        is_active=True,
        start_day=START,
        vesting_amount=amount,
        vesting_location=HOLDERS[0],
        grantor=OWNER,
    )


class TestCalculatorProperties:
    @given(schedule=schedules(), amount=st.integers(min_value=1, max_value=10**30), offset=st.integers(0, 4000))
    @settings(max_examples=200)
    def test_bounds(self, schedule, amount, offset):
        day = START + offset
        not_vested = not_vested_amount(_grant(amount), schedule, day)
        assert 0 <= not_vested <= amount
        if offset < schedule.cliff_duration_days:
            assert not_vested == amount
        if offset >= schedule.total_duration_days:
            assert not_vested == 0

    @given(
        schedule=schedules(),
        amount=st.integers(min_value=1, max_value=10**30),
        first=st.integers(0, 4000),
        gap=st.integers(0, 400),
    )
    @settings(max_examples=200)
    def test_monotonic(self, schedule, amount, first, gap):
        grant = _grant(amount)
        earlier = not_vested_amount(grant, schedule, START + first)
        later = not_vested_amount(grant, schedule, START + first + gap)
        assert later <= earlier

    @given(
        schedule=schedules(),
        amount=st.integers(min_value=1, max_value=10**24),
        extra=st.integers(min_value=0, max_value=10**24),
        offset=st.integers(0, 4000),
    )
    def test_available_plus_locked_is_balance(self, schedule, amount, extra, offset):
        grant = _grant(amount)
        day = START + offset
        balance = amount + extra
        assert available_amount(balance, grant, schedule, day) + not_vested_amount(grant, schedule, day) == balance


class TestLedgerConservation:
    @given(
        moves=st.lists(
            st.tuples(
                st.sampled_from([OWNER] + HOLDERS),
                st.sampled_from([OWNER] + HOLDERS),
                st.integers(min_value=0, max_value=20_000),
                st.integers(min_value=0, max_value=20),
            ),
            max_size=30,
        )
    )
    @settings(max_examples=75, deadline=None)
    def test_supply_conserved_under_any_operation_sequence(self, moves):
        clock = FixedClock(START)
        token = GrantToken(owner=OWNER, name="P", symbol="P", decimals=0, initial_supply=100_000, clock=clock)
        token.grant_vesting_tokens(OWNER, HOLDERS[0], 20_000, 15_000, START, 12, 3, 3, True)

        for sender, recipient, amount, advance in moves:
            clock.advance(advance)
            try:
                token.transfer(sender, recipient, amount)
            except LedgerError:
                pass
            assert token.ledger.check_supply_invariant()
            assert token.total_supply() == 100_000

    @given(
        total=st.integers(min_value=1, max_value=10**24),
        vesting_share=st.integers(min_value=1, max_value=100),
        revoke_offset=st.integers(min_value=0, max_value=360),
    )
    @settings(max_examples=100, deadline=None)
    def test_revocation_conservation(self, total, vesting_share, revoke_offset):
        vesting = max(1, total * vesting_share // 100)
        assume(vesting <= total)

        clock = FixedClock(START)
        token = GrantToken(owner=OWNER, name="P", symbol="P", decimals=0, initial_supply=10**24, clock=clock)
        token.grant_vesting_tokens(OWNER, HOLDERS[1], total, vesting, START, 360, 0, 30, True)

        expected = token.vesting_for_account_as_of(OWNER, HOLDERS[1], START + revoke_offset).amount_not_vested
        owner_before = token.balance_of(OWNER)

        clawed_back = token.revoke_grant(OWNER, HOLDERS[1], START + revoke_offset)

        assert clawed_back == expected
        assert token.balance_of(HOLDERS[1]) == total - expected
        assert token.balance_of(OWNER) == owner_before + expected
        assert token.total_supply() == 10**24
