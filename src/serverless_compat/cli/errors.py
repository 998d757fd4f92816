"""
Standardized error handling and exit codes for the serverless-compat CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for serverless-compat CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Unknown output format: xml",
        ...     solution="serverless-compat pipe --format json",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}")


def print_unknown_format_error(output_format: str, choices: tuple[str, ...]) -> None:
    """Print error when an output format is not supported."""
    print_error(
        f"Unknown output format: {output_format}",
        reason=f"Supported formats: {', '.join(choices)}",
        solution=f"serverless-compat pipe --format {choices[0]}",
    )


def print_env_file_error(error: FileNotFoundError) -> None:
    """Print error when an app settings file cannot be read."""
    print_error(
        str(error),
        solution="serverless-compat pipe --env-file path/to/app.env",
    )


__all__ = [
    "ExitCode",
    "console",
    "print_env_file_error",
    "print_error",
    "print_unknown_format_error",
]
