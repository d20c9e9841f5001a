"""Main entry point for the GrowthKit CLI."""

from __future__ import annotations

try:
    import typer
except ImportError:
    import sys

    print("GrowthKit CLI requires extras: pip install growthkit[cli]")
    sys.exit(1)

from .commands import auth, credits, user

app = typer.Typer(
    name="growthkit",
    help="GrowthKit CLI - Inspect credits, actions and access tokens",
    no_args_is_help=True,
)

app.add_typer(auth.app, name="auth")
app.command(name="me")(user.me)
app.command(name="complete")(credits.complete)


def _version_callback(value: bool) -> None:
    """Handle --version and exit early."""
    if value:
        from growthkit import __version__

        typer.echo(f"growthkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the CLI version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """GrowthKit CLI root callback."""
    _ = version


@app.command()
def version() -> None:
    """Show the CLI version."""
    from growthkit import __version__

    typer.echo(f"growthkit {__version__}")


if __name__ == "__main__":
    app()
