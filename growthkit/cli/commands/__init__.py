"""CLI command modules."""

from __future__ import annotations

from typing import Any, Optional

import typer
from rich.console import Console

from growthkit.auth.store import FileTokenStore

from ..constants import CLI_MAX_TOKEN_ATTEMPTS, FINGERPRINT_ENV_VAR

_console = Console()


def fingerprint_option() -> Any:
    return typer.Option(
        None,
        "--fingerprint",
        envvar=FINGERPRINT_ENV_VAR,
        help="Device fingerprint to act as.",
    )


def get_client(fingerprint: Optional[str]) -> Any:
    """Build a GrowthKitClient from the environment, persisting tokens on disk."""
    from growthkit.client import GrowthKitClient

    return GrowthKitClient(
        fingerprint=fingerprint,
        token_store=FileTokenStore(),
        max_token_attempts=CLI_MAX_TOKEN_ATTEMPTS,
    )


def exit_on_failure(result: Any) -> None:
    """Print a failed envelope and exit with status 1."""
    if result.success:
        return
    code = f" [dim]({result.error_code})[/dim]" if result.error_code else ""
    _console.print(f"[red]{result.error or 'Request failed'}[/red]{code}")
    raise typer.Exit(1)
