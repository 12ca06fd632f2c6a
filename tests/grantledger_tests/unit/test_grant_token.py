"""
Tests for the GrantToken facade: genesis, safe operations, ownership and
state round trips.
"""

import threading

import pytest

from grantledger.core.clock import FixedClock
from grantledger.core.constants import DEFAULT_INITIAL_SUPPLY_TOKENS
from grantledger.core.exceptions import ArithmeticFault, NotAuthorizedError, NotRegisteredError
from grantledger.core.token import GrantToken, tokens_to_base_units


class TestGenesis:
    def test_initial_supply_minted_to_owner(self, token, owner):
        assert token.total_supply() == 1_000_000 * 10**18
        assert token.balance_of(owner) == token.total_supply()
        assert token.is_registered(owner)

    def test_default_supply(self, owner, start_day):
        token = GrantToken(owner=owner, decimals=18, clock=FixedClock(start_day))
        assert token.total_supply() == DEFAULT_INITIAL_SUPPLY_TOKENS * 10**18

    def test_no_further_minting(self, token, owner):
        with pytest.raises(NotAuthorizedError):
            token.ledger.mint(owner, 1)

    def test_tokens_to_base_units(self, token):
        assert token.tokens_to_base_units(3) == 3 * 10**18
        assert tokens_to_base_units(7, 0) == 7
        with pytest.raises(ArithmeticFault):
            tokens_to_base_units(-1, 18)

    def test_today_uses_clock(self, token, clock, start_day):
        assert token.today() == start_day
        clock.advance(2)
        assert token.today() == start_day + 2


class TestSafeOperations:
    def test_safe_transfer_requires_registered_recipient(self, small_token, owner, alice):
        with pytest.raises(NotRegisteredError):
            small_token.safe_transfer(owner, alice, 5)
        small_token.register_account(alice)
        small_token.safe_transfer(owner, alice, 5)
        assert small_token.balance_of(alice) == 5

    def test_safe_transfer_to_self(self, small_token, owner):
        assert small_token.safe_transfer(owner, owner, 5)

    def test_safe_approve(self, small_token, owner, bob):
        with pytest.raises(NotRegisteredError):
            small_token.safe_approve(owner, bob, 5)
        small_token.register_account(bob)
        small_token.safe_approve(owner, bob, 5)
        assert small_token.allowance(owner, bob) == 5

    def test_safe_transfer_from(self, small_token, owner, alice, bob):
        small_token.approve(owner, alice, 10)
        with pytest.raises(NotRegisteredError):
            small_token.safe_transfer_from(alice, owner, bob, 10)
        assert small_token.allowance(owner, alice) == 10
        small_token.safe_transfer_from(alice, owner, alice, 10)
        assert small_token.balance_of(alice) == 10


class TestOwnership:
    def test_transfer_ownership_to_registered_account(self, small_token, owner, alice, start_day):
        small_token.register_account(alice)
        small_token.transfer_ownership(owner, alice)
        assert small_token.owner == alice
        assert small_token.is_grantor(alice)
        assert not small_token.is_grantor(owner)
        with pytest.raises(NotAuthorizedError):
            small_token.grant_vesting_tokens(owner, alice, 1, 1, start_day, 12, 0, 3, True)

    def test_transfer_ownership_to_unregistered_account(self, small_token, owner, alice):
        with pytest.raises(NotRegisteredError):
            small_token.transfer_ownership(owner, alice)
        assert small_token.owner == owner

    def test_renounce_forbidden(self, small_token, owner):
        with pytest.raises(NotAuthorizedError):
            small_token.renounce_ownership(owner)


class TestStateRoundTrip:
    def test_from_dict_restores_everything(self, small_token, owner, grantor, alice, bob, start_day, clock):
        small_token.add_grantor(owner, grantor, is_uniform_grantor=True)
        small_token.transfer(owner, grantor, 1000)
        small_token.set_grantor_vesting_schedule(owner, grantor, 12, 0, 3, True)
        small_token.set_restrictions(owner, grantor, start_day, start_day + 5, start_day + 20)
        small_token.register_account(alice)
        small_token.grant_uniform_vesting_tokens(grantor, alice, 100, 100, start_day)
        small_token.grant_vesting_tokens(owner, bob, 50, 40, start_day, 24, 6, 6, False)
        small_token.pause(owner)

        restored = GrantToken.from_dict(small_token.to_dict(), clock=FixedClock(start_day + 6))

        assert restored.to_dict()["ledger"] == small_token.to_dict()["ledger"]
        assert restored.is_paused()
        assert restored.is_uniform_grantor(grantor)
        assert restored.is_registered(alice)
        assert restored.get_restrictions(grantor) == small_token.get_restrictions(grantor)
        assert restored.vesting_for_account_as_of(owner, alice, 0).amount_vested == 50
        assert restored.get_intrinsic_vesting_schedule(owner, bob) == (24, 6, 6)

        restored.unpause(owner)
        with pytest.raises(NotAuthorizedError):
            restored.ledger.mint(owner, 1)

    def test_restored_clock_does_not_go_back(self, small_token, clock, start_day):
        clock.advance(10)
        small_token.today()
        restored = GrantToken.from_dict(small_token.to_dict(), clock=FixedClock(start_day))
        assert restored.today() == start_day + 10


def test_concurrent_transfers_conserve_supply(small_token, owner, alice, bob):
    small_token.transfer(owner, alice, 5000)
    small_token.transfer(owner, bob, 5000)

    def shuffle(sender, recipient):
        for _ in range(200):
            small_token.transfer(sender, recipient, 3)

    threads = [
        threading.Thread(target=shuffle, args=(alice, bob)),
        threading.Thread(target=shuffle, args=(bob, alice)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert small_token.balance_of(alice) + small_token.balance_of(bob) == 10_000
    assert small_token.ledger.check_supply_invariant()
