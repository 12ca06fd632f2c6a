"""
GrantLedger CLI - grant commands

Per-wallet grants, revocation, vesting reports and the owner-side setup of
uniform grantors.
"""

from __future__ import annotations

import click
from rich import box
from rich.table import Table

from grantledger.core.exceptions import LedgerError

from .common import _handle_cli_error, console, emit, load_token, require_caller, save_token


def _schedule_options(func):
    func = click.option("--interval", type=click.IntRange(min=1), default=1, show_default=True, help="Vesting interval in days")(func)
    func = click.option("--cliff", type=click.IntRange(min=0), default=0, show_default=True, help="Cliff in days")(func)
    func = click.option("--duration", type=click.IntRange(min=1), required=True, help="Total vesting duration in days")(func)
    func = click.option("--revocable/--irrevocable", default=True, show_default=True, help="Whether the grantor may revoke")(func)
    return func


@click.command("grant")
@click.argument("beneficiary")
@click.option("--total", type=click.IntRange(min=1), required=True, help="Tokens moved to the beneficiary (base units)")
@click.option("--vesting", type=click.IntRange(min=1), default=None, help="Locked part of the total (defaults to total)")
@click.option("--start-day", type=click.IntRange(min=0), default=None, help="Vesting start day number (defaults to today)")
@_schedule_options
@click.option("--safe", is_flag=True, help="Require a registered beneficiary")
@click.pass_context
def grant(ctx: click.Context, beneficiary, total, vesting, start_day, revocable, duration, cliff, interval, safe):
    """
    Grant vesting tokens to BENEFICIARY under its own schedule.

    Example:
        grantledger --caller 0xGRANTOR grant 0xALICE --total 1001 --vesting 1000 --duration 12 --interval 3
    """
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        start = start_day if start_day is not None else token.today()
        vesting_amount = vesting if vesting is not None else total
        operation = token.safe_grant_vesting_tokens if safe else token.grant_vesting_tokens
        operation(caller, beneficiary, total, vesting_amount, start, duration, cliff, interval, revocable)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(
        ctx,
        {
            "beneficiary": beneficiary,
            "grantor": caller,
            "total": total,
            "vesting": vesting_amount,
            "start_day": start,
            "duration": duration,
            "cliff": cliff,
            "interval": interval,
            "revocable": revocable,
        },
        title="Grant Created",
    )


@click.command("revoke")
@click.argument("beneficiary")
@click.option("--on-day", type=click.IntRange(min=0), default=0, help="Revocation day number (0 = today)")
@click.pass_context
def revoke(ctx: click.Context, beneficiary: str, on_day: int):
    """Revoke BENEFICIARY's grant; the unvested remainder returns to the grantor."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        clawed_back = token.revoke_grant(caller, beneficiary, on_day)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(
        ctx,
        {"beneficiary": beneficiary, "clawed_back": clawed_back, "beneficiary_balance": token.balance_of(beneficiary)},
        title="Grant Revoked",
        style="yellow",
    )


@click.command("vesting")
@click.argument("account", required=False)
@click.option("--on-day", type=click.IntRange(min=0), default=0, help="Day number to report on (0 = today)")
@click.pass_context
def vesting(ctx: click.Context, account, on_day: int):
    """Show the vesting status of ACCOUNT (the caller's own when omitted)."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        if account is None:
            status = token.vesting_as_of(caller, on_day)
        else:
            status = token.vesting_for_account_as_of(caller, account, on_day)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return

    data = {"account": account or caller, **status._asdict()}
    if ctx.obj.get("json_output"):
        emit(ctx, data, title="Vesting")
        return

    table = Table(title=f"Vesting for {data['account']}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in status._asdict().items():
        table.add_row(key.replace("_", " "), str(value))
    console.print(table)


@click.command("add-grantor")
@click.argument("account")
@click.option("--uniform", is_flag=True, help="Allow uniform (shared schedule) grants")
@click.pass_context
def add_grantor(ctx: click.Context, account: str, uniform: bool):
    """Give ACCOUNT the grantor role (owner only)."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        token.add_grantor(caller, account, uniform)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(ctx, {"account": account, "grantor": True, "uniform": uniform}, title="Grantor Added")


@click.command("uniform-schedule")
@click.argument("grantor")
@_schedule_options
@click.pass_context
def uniform_schedule(ctx: click.Context, grantor: str, revocable, duration, cliff, interval):
    """Attach the shared vesting schedule to GRANTOR (owner only, once)."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        token.set_grantor_vesting_schedule(caller, grantor, duration, cliff, interval, revocable)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(
        ctx,
        {"grantor": grantor, "duration": duration, "cliff": cliff, "interval": interval, "revocable": revocable},
        title="Uniform Schedule Set",
    )


@click.command("restrictions")
@click.argument("grantor")
@click.option("--min-start-day", type=click.IntRange(min=0), required=True)
@click.option("--max-start-day", type=click.IntRange(min=0), required=True)
@click.option("--expiration-day", type=click.IntRange(min=0), required=True)
@click.pass_context
def restrictions(ctx: click.Context, grantor: str, min_start_day: int, max_start_day: int, expiration_day: int):
    """Set GRANTOR's allowed start-day window and expiration (owner only)."""
    caller = require_caller(ctx)
    try:
        token = load_token(ctx)
        token.set_restrictions(caller, grantor, min_start_day, max_start_day, expiration_day)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(ctx, {"grantor": grantor, **token.get_restrictions(grantor).to_dict()}, title="Restrictions Set")


@click.command("uniform-grant")
@click.argument("beneficiary")
@click.option("--total", type=click.IntRange(min=1), required=True, help="Tokens moved to the beneficiary (base units)")
@click.option("--vesting", type=click.IntRange(min=1), default=None, help="Locked part of the total (defaults to total)")
@click.option("--start-day", type=click.IntRange(min=0), required=True, help="Vesting start day number")
@click.pass_context
def uniform_grant(ctx: click.Context, beneficiary: str, total: int, vesting, start_day: int):
    """Grant tokens to BENEFICIARY under the caller's shared schedule."""
    caller = require_caller(ctx)
    vesting_amount = vesting if vesting is not None else total
    try:
        token = load_token(ctx)
        token.grant_uniform_vesting_tokens(caller, beneficiary, total, vesting_amount, start_day)
        save_token(ctx, token)
    except LedgerError as exc:
        _handle_cli_error(exc)
        return
    emit(
        ctx,
        {"beneficiary": beneficiary, "grantor": caller, "total": total, "vesting": vesting_amount, "start_day": start_day},
        title="Uniform Grant Created",
    )


GRANT_COMMANDS = [grant, revoke, vesting, add_grantor, uniform_schedule, restrictions, uniform_grant]
