from dataclasses import asdict

import click

from workweave.cli.ensure import Ensure
from workweave.cli.output import error_output, user_output
from workweave.core.config import (
    CONFIG_KEYS,
    WorkweaveConfig,
    parse_config_value,
    write_config_value,
)
from workweave.core.context import WorkweaveContext


def _format_value(config: WorkweaveConfig, key: str) -> str | None:
    value = asdict(config)[key]
    if value is None:
        return None
    return str(value)


@click.group("config")
def config_group() -> None:
    """Manage [tool.workweave] settings in pyproject.toml."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: WorkweaveContext) -> None:
    """Print a list of configuration keys and values."""
    user_output(click.style("Repository configuration:", bold=True))
    defaults = WorkweaveConfig()
    for key in CONFIG_KEYS:
        value = _format_value(ctx.config, key)
        if value is None:
            user_output(f"  {key}=(auto-detect)")
            continue
        marker = " (default)" if value == _format_value(defaults, key) else ""
        user_output(f"  {key}={value}{marker}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: WorkweaveContext, key: str) -> None:
    """Print the value of a given configuration key."""
    Ensure.invariant(key in CONFIG_KEYS, f"Invalid key: {key}")

    value = _format_value(ctx.config, key)
    if value is None:
        click.echo("not configured (will auto-detect)", err=True)
        return
    user_output(value)


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: WorkweaveContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key."""
    repo = Ensure.in_repo(ctx)
    Ensure.invariant(key in CONFIG_KEYS, f"Invalid key: {key}")

    try:
        parsed = parse_config_value(key, value)
    except ValueError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    if key == "trunk_branch":
        Ensure.invariant(
            ctx.git_ops.ref_exists(repo.root, value),
            f"Branch '{value}' does not exist in repository.\n"
            "Create the branch first before configuring it as trunk.",
        )

    write_config_value(repo.root, key, parsed)
    user_output(f"Set {key}={value}")
