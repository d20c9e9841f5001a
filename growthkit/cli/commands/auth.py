"""Authentication commands for the GrowthKit CLI."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from growthkit.auth.modes import AuthMode, classify_credentials, mask_key, resolve_credentials
from growthkit.auth.store import FileTokenStore

from . import fingerprint_option, get_client

app = typer.Typer(help="Inspect credentials and access tokens")
console = Console()


@app.command()
def status() -> None:
    """Show the authentication mode the current environment selects."""
    auth = classify_credentials(resolve_credentials())

    console.print(f"Mode: [bold]{auth.mode.value}[/bold]")
    if auth.key:
        console.print(f"  Key: {mask_key(auth.key)}")
    if auth.mode is AuthMode.PROXY:
        console.print("  [dim]No key configured; requests rely on the proxy middleware.[/dim]")

    store = FileTokenStore()
    token = store.load()
    if token is not None:
        console.print(f"  Cached token expires: {token.expires_at.isoformat()}")
    elif auth.mode is AuthMode.PUBLIC_KEY:
        console.print("  [dim]No cached token.[/dim]")


@app.command()
def token(fingerprint: Optional[str] = fingerprint_option()) -> None:
    """Acquire a public-key access token and cache it."""
    client = get_client(fingerprint)

    try:
        if client.auth_mode is not AuthMode.PUBLIC_KEY:
            console.print("[red]Tokens are only used with a public key. Set GROWTHKIT_PUBLIC_KEY.[/red]")
            raise typer.Exit(1)
        if not fingerprint:
            console.print("[red]A fingerprint is required. Pass --fingerprint or set GROWTHKIT_FINGERPRINT.[/red]")
            raise typer.Exit(1)

        manager = client.token_manager
        if not manager.ensure_valid_token():
            console.print("[red]Could not obtain a token.[/red]")
            raise typer.Exit(1)

        console.print("[green]Token ready.[/green]")
        console.print(f"  Expires: {manager.token.expires_at.isoformat()}")
    finally:
        client.close()


@app.command()
def logout() -> None:
    """Remove the cached access token."""
    store = FileTokenStore()
    if store.path.exists():
        store.clear()
        console.print("[green]Cached token removed.[/green]")
    else:
        console.print("[yellow]No cached token found.[/yellow]")
