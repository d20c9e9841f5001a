"""User command for the GrowthKit CLI."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from . import exit_on_failure, fingerprint_option, get_client

console = Console()

_FIELDS = (
    ("credits", "Credits"),
    ("usage", "Usage"),
    ("referralCode", "Referral code"),
    ("name", "Name"),
    ("email", "Email"),
    ("hasVerifiedEmail", "Email verified"),
)


def me(
    claim: Optional[str] = None,
    fingerprint: Optional[str] = fingerprint_option(),
) -> None:
    """Show the current user's credits and profile."""
    client = get_client(fingerprint)

    try:
        result = client.get_me(claim=claim)
        exit_on_failure(result)

        data = result.data if isinstance(result.data, dict) else {}
        table = Table(show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for key, label in _FIELDS:
            if data.get(key) is not None:
                table.add_row(label, str(data[key]))
        console.print(table)

        waitlist = data.get("waitlist")
        if isinstance(waitlist, dict) and waitlist.get("enabled"):
            console.print(f"  Waitlist: {waitlist.get('status', 'none')} (position {waitlist.get('position')})")
    finally:
        client.close()
