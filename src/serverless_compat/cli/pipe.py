"""
serverless-compat CLI - Pipe command.

Preview the named-pipe environment the launcher would hand to the
compatibility layer binary. Nothing is spawned and the calling shell's
environment is only changed if the output is evaluated.
"""

import json
import shlex
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from serverless_compat.cli.errors import (
    ExitCode,
    print_env_file_error,
    print_unknown_format_error,
)
from serverless_compat.core.config import load_app_config
from serverless_compat.core.pipes import build_channel_env
from serverless_compat.utils.log import DEBUG, ERROR, INFO, WARN

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ("shell", "powershell", "json")


class ConsoleLogger:
    """
    Logger that reports negotiation messages on stderr via rich.

    Keeps stdout free for the export lines so the output can be passed
    straight to ``eval``.
    """

    _STYLES = {DEBUG: "dim", INFO: "", WARN: "yellow", ERROR: "red"}
    _LABELS = {DEBUG: "debug", INFO: "info", WARN: "warning", ERROR: "error"}

    def __init__(self, threshold: int, output: Console | None = None) -> None:
        self.threshold = threshold
        self._console = output if output is not None else err_console

    def _print(self, severity: int, message: str) -> None:
        if self.threshold > severity:
            return
        style = self._STYLES[severity]
        label = self._LABELS[severity]
        # Messages quote operator-supplied pipe names
        text = escape(message)
        if style:
            self._console.print(f"[{style}]{label}:[/{style}] {text}", highlight=False)
        else:
            self._console.print(f"{label}: {text}", highlight=False)

    def debug(self, message: str) -> None:
        self._print(DEBUG, message)

    def info(self, message: str) -> None:
        self._print(INFO, message)

    def warn(self, message: str) -> None:
        self._print(WARN, message)

    def error(self, err: BaseException | str) -> None:
        self._print(ERROR, str(err))


def render_env(env: dict[str, str], output_format: str) -> str:
    """
    Render published variables for a shell or as JSON.

    Args:
        env: Variable name to value
        output_format: One of OUTPUT_FORMATS

    Returns:
        Text ready to print
    """
    if output_format == "json":
        return json.dumps(env, indent=2, sort_keys=True)
    if output_format == "powershell":
        lines = []
        for key in sorted(env):
            value = env[key].replace("'", "''")
            lines.append(f"$env:{key} = '{value}'")
        return "\n".join(lines)
    return "\n".join(f"export {key}={shlex.quote(env[key])}" for key in sorted(env))


def main(
    output_format: str = typer.Option(
        "shell",
        "--format",
        "-f",
        help="Output format: shell, powershell or json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug messages from the negotiation",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        "-e",
        help="App settings file (dotenv) to layer over the current environment",
    ),
) -> None:
    """
    Negotiate a unique pipe name and print the variables to export.

    Examples:
        serverless-compat pipe
        eval "$(serverless-compat pipe)"
        serverless-compat pipe --format json
        serverless-compat pipe --env-file app.env
    """
    if output_format not in OUTPUT_FORMATS:
        print_unknown_format_error(output_format, OUTPUT_FORMATS)
        raise typer.Exit(ExitCode.USER_ERROR)

    try:
        config = load_app_config(env_file)
    except FileNotFoundError as e:
        print_env_file_error(e)
        raise typer.Exit(ExitCode.USER_ERROR)

    threshold = DEBUG if verbose else config.log_threshold
    env = build_channel_env(ConsoleLogger(threshold), config=config)

    console.print(render_env(env, output_format), markup=False, highlight=False, soft_wrap=True)
