"""
Tests for the ERC20-style balance ledger.
"""

import pytest

from grantledger.core.constants import UINT256_MAX, ZERO_ADDRESS
from grantledger.core.contracts.erc20 import BalanceLedger, normalize_address
from grantledger.core.exceptions import (
    ArithmeticFault,
    BalanceUnderflowError,
    ContractPausedError,
    InsufficientAllowanceError,
    NotAuthorizedError,
    ZeroAddressError,
)

OWNER = "0x" + "11" * 20
ALICE = "0x" + "22" * 20
BOB = "0x" + "33" * 20


@pytest.fixture
def ledger():
    ledger = BalanceLedger(name="Ledger", symbol="LDG", decimals=0)
    ledger.mint(OWNER, 1000)
    return ledger


class TestMint:
    def test_genesis_mint_sets_supply(self, ledger):
        assert ledger.total_supply == 1000
        assert ledger.balance_of(OWNER) == 1000
        assert ledger.minted is True

    def test_second_mint_refused(self, ledger):
        with pytest.raises(NotAuthorizedError):
            ledger.mint(ALICE, 1)
        assert ledger.total_supply == 1000
        assert ledger.balance_of(ALICE) == 0

    def test_mint_to_zero_address(self):
        ledger = BalanceLedger(name="L", symbol="L")
        with pytest.raises(ZeroAddressError):
            ledger.mint(ZERO_ADDRESS, 5)
        assert ledger.minted is False

    def test_mint_overflow(self):
        ledger = BalanceLedger(name="L", symbol="L")
        with pytest.raises(ArithmeticFault):
            ledger.mint(OWNER, UINT256_MAX + 1)

    def test_mint_emits_transfer_from_null(self, ledger):
        event = ledger.events[0]
        assert event.event_type == "Transfer"
        assert event.from_address == ZERO_ADDRESS
        assert event.value == 1000


class TestTransfer:
    def test_transfer_moves_balance(self, ledger):
        assert ledger.transfer(OWNER, ALICE, 300) is True
        assert ledger.balance_of(OWNER) == 700
        assert ledger.balance_of(ALICE) == 300
        assert ledger.check_supply_invariant()

    def test_transfer_underflow_leaves_state(self, ledger):
        with pytest.raises(BalanceUnderflowError) as exc_info:
            ledger.transfer(ALICE, BOB, 1)
        assert isinstance(exc_info.value, ArithmeticFault)
        assert ledger.balance_of(ALICE) == 0
        assert ledger.balance_of(BOB) == 0

    @pytest.mark.parametrize("recipient", ["", ZERO_ADDRESS])
    def test_transfer_to_null_account(self, ledger, recipient):
        with pytest.raises(ZeroAddressError):
            ledger.transfer(OWNER, recipient, 1)
        assert ledger.balance_of(OWNER) == 1000

    def test_self_transfer_keeps_balance(self, ledger):
        ledger.transfer(OWNER, OWNER, 400)
        assert ledger.balance_of(OWNER) == 1000

    def test_negative_amount_rejected(self, ledger):
        with pytest.raises(ArithmeticFault):
            ledger.transfer(OWNER, ALICE, -1)

    def test_addresses_are_case_insensitive(self, ledger):
        mixed = "0xAbCd" + "ef" * 18
        ledger.transfer(OWNER, mixed, 10)
        assert ledger.balance_of(normalize_address(mixed)) == 10
        assert ledger.balance_of(" " + mixed.upper().replace("0X", "0x") + " ") == 10


class TestAllowances:
    def test_approve_replaces_allowance(self, ledger):
        ledger.approve(OWNER, ALICE, 100)
        ledger.approve(OWNER, ALICE, 40)
        assert ledger.allowance(OWNER, ALICE) == 40

    def test_approve_null_spender(self, ledger):
        with pytest.raises(ZeroAddressError):
            ledger.approve(OWNER, ZERO_ADDRESS, 1)

    def test_transfer_from_decrements_allowance(self, ledger):
        ledger.approve(OWNER, ALICE, 100)
        ledger.transfer_from(ALICE, OWNER, BOB, 60)
        assert ledger.allowance(OWNER, ALICE) == 40
        assert ledger.balance_of(BOB) == 60

    def test_transfer_from_insufficient_allowance(self, ledger):
        ledger.approve(OWNER, ALICE, 10)
        with pytest.raises(ArithmeticFault) as exc_info:
            ledger.transfer_from(ALICE, OWNER, BOB, 11)
        assert isinstance(exc_info.value, InsufficientAllowanceError)
        assert ledger.allowance(OWNER, ALICE) == 10
        assert ledger.balance_of(BOB) == 0

    def test_transfer_from_insufficient_balance_keeps_allowance(self, ledger):
        ledger.transfer(OWNER, ALICE, 5)
        ledger.approve(ALICE, BOB, 50)
        with pytest.raises(BalanceUnderflowError):
            ledger.transfer_from(BOB, ALICE, OWNER, 6)
        assert ledger.allowance(ALICE, BOB) == 50
        assert ledger.balance_of(ALICE) == 5

    def test_zero_transfer_from_without_allowance(self, ledger):
        assert ledger.transfer_from(ALICE, OWNER, BOB, 0) is True
        assert ledger.allowance(OWNER, ALICE) == 0


class TestBurnAndPause:
    def test_burn_reduces_supply(self, ledger):
        ledger.burn(OWNER, 100)
        assert ledger.total_supply == 900
        assert ledger.events[-1].to_address == ZERO_ADDRESS
        assert ledger.check_supply_invariant()

    def test_burn_more_than_balance(self, ledger):
        with pytest.raises(BalanceUnderflowError):
            ledger.burn(OWNER, 1001)
        assert ledger.total_supply == 1000

    def test_paused_ledger_rejects_mutations(self, ledger):
        paused = {"value": True}
        ledger.pause_gate = lambda: paused["value"]
        with pytest.raises(ContractPausedError):
            ledger.transfer(OWNER, ALICE, 1)
        with pytest.raises(ContractPausedError):
            ledger.approve(OWNER, ALICE, 1)
        with pytest.raises(ContractPausedError):
            ledger.burn(OWNER, 1)
        assert ledger.balance_of(OWNER) == 1000

        paused["value"] = False
        ledger.transfer(OWNER, ALICE, 1)
        assert ledger.balance_of(ALICE) == 1


def test_serialization_round_trip(ledger):
    ledger.transfer(OWNER, ALICE, 250)
    ledger.approve(ALICE, BOB, 30)
    restored = BalanceLedger.from_dict(ledger.to_dict())
    assert restored.balance_of(ALICE) == 250
    assert restored.allowance(ALICE, BOB) == 30
    assert restored.total_supply == 1000
    assert restored.minted is True
