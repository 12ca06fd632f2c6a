#!/usr/bin/env python3
"""
GrantLedger CLI - command line interface over a persisted ledger state file.

Usage:
    grantledger --state ledger.json --caller 0xOWNER init
    grantledger --state ledger.json --caller 0xOWNER grant 0xALICE --total 1000 --duration 365
    grantledger --state ledger.json --json balance 0xALICE
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from grantledger.core import config
from grantledger.core.logging_config import setup_from_config

from .common import console
from .grant_commands import GRANT_COMMANDS
from .ledger_commands import LEDGER_COMMANDS

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--state",
    "state_path",
    default=lambda: config.STATE_PATH,
    envvar="GRANTLEDGER_STATE_PATH",
    type=click.Path(dir_okay=False),
    help="Ledger state file",
)
@click.option("--caller", envvar="GRANTLEDGER_CALLER", help="Address performing the operation")
@click.option(
    "--day",
    type=click.IntRange(min=1),
    default=None,
    help="Pin 'today' to this day number instead of the wall clock",
)
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON")
@click.pass_context
def cli(ctx: click.Context, state_path: str, caller: Optional[str], day: Optional[int], json_output: bool):
    """
    GrantLedger - vesting token ledger

    Holds balances, vesting grants and grantor roles in a single state file.
    Amounts are in base units; days are day numbers since 1970-01-01.
    """
    ctx.ensure_object(dict)
    ctx.obj["state_path"] = state_path
    ctx.obj["caller"] = caller
    ctx.obj["day"] = day
    ctx.obj["json_output"] = json_output


for _command in LEDGER_COMMANDS + GRANT_COMMANDS:
    cli.add_command(_command)


def main():
    """Main CLI entry point"""
    setup_from_config()
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/]")
        sys.exit(130)


if __name__ == "__main__":
    main()
