"""
serverless-compat CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from serverless_compat import __version__
from serverless_compat.cli import config, pipe

app = typer.Typer(
    name="serverless-compat",
    help="Inspect the environment prepared for the Datadog Serverless Compatibility Layer",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main() -> None:
    """
    serverless-compat - launcher core for the Datadog Serverless Compatibility Layer.

    Commands:
        serverless-compat pipe               # Print pipe variables to export
        serverless-compat pipe --format json # Same, as JSON
        serverless-compat config             # Show resolved settings
        serverless-compat pipe -e app.env    # Preview for an app settings file
    """


app.command(name="pipe")(pipe.main)
app.command(name="config")(config.show)


@app.command()
def version() -> None:
    """Show serverless-compat version and exit."""
    console.print(f"serverless-compat version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
