"""Credit commands for the GrowthKit CLI."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from . import exit_on_failure, fingerprint_option, get_client

console = Console()


def complete(
    action: str = typer.Argument("default", help="Action name from the credit policy."),
    credits_required: Optional[int] = typer.Option(None, "--credits", help="Override the action's credit cost."),
    fingerprint: Optional[str] = fingerprint_option(),
) -> None:
    """Complete an action, consuming its credits."""
    client = get_client(fingerprint)

    try:
        result = client.credits.complete_action(action, credits_required=credits_required)
        exit_on_failure(result)

        data = result.data if isinstance(result.data, dict) else {}
        console.print(f"[green]Completed '{action}'.[/green]")
        if data.get("creditsConsumed") is not None:
            console.print(f"  Credits consumed: {data['creditsConsumed']}")
        if data.get("creditsRemaining") is not None:
            console.print(f"  Credits remaining: {data['creditsRemaining']}")
    finally:
        client.close()
