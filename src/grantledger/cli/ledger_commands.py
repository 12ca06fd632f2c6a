"""
GrantLedger CLI - token commands

- init: create a state file with the genesis supply
- balance / info: read-only views
- transfer / approve / register: holder operations
"""

from __future__ import annotations

import click

from grantledger.core import config
from grantledger.core.exceptions import LedgerError
from grantledger.core.token import GrantToken

from .common import (
    _handle_cli_error,
    console,
    emit,
    load_token,
    make_clock,
    require_caller,
    save_token,
    storage_for,
)


@click.command("init")
@click.option("--name", default=None, help="Token name (GRANTLEDGER_TOKEN_NAME)")
@click.option("--symbol", default=None, help="Token symbol (GRANTLEDGER_TOKEN_SYMBOL)")
@click.option("--decimals", type=click.IntRange(0, 77), default=None, help="Decimal places")
@click.option("--supply", type=click.IntRange(min=0), default=None, help="Genesis supply in whole tokens")
@click.option("--force", is_flag=True, help="Overwrite an existing state file")
@click.pass_context
def init_ledger(ctx: click.Context, name, symbol, decimals, supply, force: bool):
    """
    Create a new ledger; the caller becomes owner and receives the supply.

    Example:
        grantledger --caller 0xOWNER init --supply 1000000
    """
    owner = require_caller(ctx)
    storage = storage_for(ctx)
    if storage.exists() and not force:
        raise click.ClickException(f"State file {storage.path} already exists (use --force)")

    try:
        token = GrantToken(
            owner=owner,
            name=name,
            symbol=symbol,
            decimals=decimals,
            initial_supply=supply,
            clock=make_clock(ctx.obj.get("day")),
        )
        checksum = save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return

    emit(
        ctx,
        {
            "name": token.name,
            "symbol": token.symbol,
            "decimals": token.decimals,
            "total_supply": token.total_supply(),
            "owner": token.owner,
            "state_path": storage.path,
            "checksum": checksum,
        },
        title="Ledger Initialized",
    )


@click.command("info")
@click.pass_context
def info(ctx: click.Context):
    """Show token metadata and ledger summary."""
    try:
        token = load_token(ctx)
        data = {
            "name": token.name,
            "symbol": token.symbol,
            "decimals": token.decimals,
            "total_supply": token.total_supply(),
            "owner": token.owner,
            "paused": token.is_paused(),
            "grantors": len(token.roles.grantors),
            "registered_accounts": len(token.registry),
            "schedules": len(token.schedules),
            "grants": len(token.grants),
            "network": config.NETWORK.value,
            "today": token.today(),
        }
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(ctx, data, title="GrantLedger")


@click.command("balance")
@click.argument("account")
@click.option("--on-day", type=click.IntRange(min=0), default=0, help="Day number for the available amount (0 = today)")
@click.pass_context
def balance(ctx: click.Context, account: str, on_day: int):
    """Show an account's balance and the part of it that is spendable."""
    try:
        token = load_token(ctx)
        data = {
            "account": account,
            "balance": token.balance_of(account),
            "available": token.available_amount(account, on_day),
            "registered": token.is_registered(account),
        }
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(ctx, data, title="Balance")


@click.command("transfer")
@click.argument("recipient")
@click.argument("amount", type=click.IntRange(min=0))
@click.option("--safe", is_flag=True, help="Refuse unregistered recipients")
@click.pass_context
def transfer(ctx: click.Context, recipient: str, amount: int, safe: bool):
    """Transfer AMOUNT base units from the caller to RECIPIENT."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        if safe:
            token.safe_transfer(caller, recipient, amount)
        else:
            token.transfer(caller, recipient, amount)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(
        ctx,
        {
            "from": caller,
            "to": recipient,
            "amount": amount,
            "sender_balance": token.balance_of(caller),
        },
        title="Transfer Complete",
    )


@click.command("approve")
@click.argument("spender")
@click.argument("amount", type=click.IntRange(min=0))
@click.option("--safe", is_flag=True, help="Refuse unregistered spenders")
@click.pass_context
def approve(ctx: click.Context, spender: str, amount: int, safe: bool):
    """Allow SPENDER to move up to AMOUNT of the caller's tokens."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        if safe:
            token.safe_approve(caller, spender, amount)
        else:
            token.approve(caller, spender, amount)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(ctx, {"owner": caller, "spender": spender, "allowance": token.allowance(caller, spender)}, title="Approval Set")


@click.command("register")
@click.pass_context
def register(ctx: click.Context):
    """Register the caller's account so it can receive "safe" transfers and grants."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        token.register_account(caller)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    if ctx.obj.get("json_output"):
        emit(ctx, {"account": caller, "registered": True}, title="Registered")
    else:
        console.print(f"[green]Registered[/] {caller}")


LEDGER_COMMANDS = [init_ledger, info, balance, transfer, approve, register]
