"""Output utilities for CLI commands with clear intent.

Engines never print; everything the user sees goes through user_output so
tests can capture it with CliRunner.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Print a message meant for the user."""
    click.echo(message, nl=nl)


def error_output(message: str, recovery_hint: str | None = None) -> None:
    """Print a red `Error:` line and an optional hint."""
    user_output(click.style("Error: ", fg="red") + message)
    if recovery_hint:
        user_output(click.style("Hint: ", fg="yellow") + recovery_hint)
