"""
Shared plumbing for the GrantLedger CLI commands: state loading/saving,
caller resolution, output and error handling.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from grantledger.core.clock import FixedClock, LedgerClock
from grantledger.core.exceptions import LedgerError, get_error_context
from grantledger.core.storage import LedgerStorage
from grantledger.core.token import GrantToken

logger = logging.getLogger(__name__)
console = Console()


def _handle_cli_error(exc: Exception, exit_code: int = 1) -> None:
    """Centralized CLI error handler for consistent messaging/exit codes."""
    logger.debug("CLI error", extra={"event": "cli.error", **get_error_context(exc)})
    console.print(f"[bold red]Error:[/] {escape(str(exc))}")
    if isinstance(exc, LedgerError) and exc.details:
        console.print(f"[dim]{escape(json.dumps(exc.details, default=str))}[/]")
    sys.exit(exit_code)


def make_clock(day: Optional[int]) -> LedgerClock:
    return FixedClock(day) if day is not None else LedgerClock()


def storage_for(ctx: click.Context) -> LedgerStorage:
    return LedgerStorage(ctx.obj["state_path"])


def load_token(ctx: click.Context) -> GrantToken:
    storage = storage_for(ctx)
    if not storage.exists():
        raise click.ClickException(
            f"No ledger state at {storage.path}; run 'grantledger init' first"
        )
    state = storage.load()
    return GrantToken.from_dict(state, clock=make_clock(ctx.obj.get("day")))


def save_token(ctx: click.Context, token: GrantToken) -> str:
    return storage_for(ctx).save(token.to_dict())


def require_caller(ctx: click.Context) -> str:
    caller = ctx.obj.get("caller")
    if not caller:
        raise click.UsageError("--caller (or GRANTLEDGER_CALLER) is required for this command")
    return caller


def emit(ctx: click.Context, data: Dict[str, Any], title: str, style: str = "green") -> None:
    """Print ``data`` as JSON or as a key/value panel."""
    if ctx.obj.get("json_output"):
        click.echo(json.dumps(data, indent=2, default=str))
        return

    table = Table(show_header=False, box=box.ROUNDED)
    for key, value in data.items():
        table.add_row(f"[bold cyan]{key.replace('_', ' ').title()}", str(value))
    console.print(Panel(table, title=f"[bold {style}]{title}", border_style=style))
