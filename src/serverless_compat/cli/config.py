"""
serverless-compat CLI - Config command.

Show the settings the launcher core resolved from the environment.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from serverless_compat.cli.errors import ExitCode, print_env_file_error
from serverless_compat.core.config import (
    DOGSTATSD_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ENV,
    LOG_LEVEL_ENV,
    PIPE_ADDRESS_ENV,
    TRACE_PIPE_ALIAS_ENV,
    TRACE_PIPE_ENV,
    load_app_config,
)
from serverless_compat.core.pipes import max_base_length, resolve_base_name
from serverless_compat.core.pipes.namer import generate_instance_token

console = Console()


def show(
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        "-e",
        help="App settings file (dotenv) to layer over the current environment",
    ),
) -> None:
    """
    Show resolved configuration and the pipe base name that would be used.
    """
    try:
        config = load_app_config(env_file)
    except FileNotFoundError as e:
        print_env_file_error(e)
        raise typer.Exit(ExitCode.USER_ERROR)

    table = Table(title="serverless-compat configuration", show_header=True)
    table.add_column("Variable", style="cyan")
    table.add_column("Value")

    rows = (
        (LOG_LEVEL_ENV, config.log_level),
        (TRACE_PIPE_ENV, config.trace_pipe_name),
        (DOGSTATSD_PIPE_ENV, config.dogstatsd_pipe_name),
        (PIPE_ADDRESS_ENV, config.pipe_address),
        (TRACE_PIPE_ALIAS_ENV, config.trace_pipe_alias),
        (DOGSTATSD_PIPE_ALIAS_ENV, config.dogstatsd_pipe_alias),
    )
    for name, value in rows:
        cell = Text(value) if value is not None else Text("(unset)", style="dim")
        table.add_row(name, cell)

    console.print(table)

    base_name, source = resolve_base_name(config)
    cap = max_base_length(generate_instance_token())
    console.print(f"Log threshold: [bold]{config.log_threshold}[/bold]")
    console.print(
        Text.assemble("Pipe base name: ", (base_name, "bold"), " ", (f"(from {source})", "dim"))
    )
    if len(base_name) > cap:
        console.print(
            f"[yellow]Base name is {len(base_name)} chars and will be truncated to {cap}[/yellow]"
        )
    raise typer.Exit(0)
