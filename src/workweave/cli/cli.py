import logging
import os

import click

from workweave.cli.commands.apply import apply_cmd, unapply_cmd
from workweave.cli.commands.assign import assign_cmd
from workweave.cli.commands.config import config_group
from workweave.cli.commands.create import create_cmd
from workweave.cli.commands.list_cmd import list_cmd
from workweave.cli.commands.remove import remove_cmd
from workweave.cli.commands.status import status_cmd
from workweave.cli.commands.sync import sync_cmd
from workweave.cli.commands.unassign import unassign_cmd
from workweave.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

# Enable debug logging if WORKWEAVE_DEBUG environment variable is set
if os.getenv("WORKWEAVE_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="workweave")
@click.option("--debug", is_flag=True, help="Log every git command and engine decision.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Distribute staged work into per-branch workspaces."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s", force=True
        )

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=False)


cli.add_command(status_cmd)
cli.add_command(assign_cmd)
cli.add_command(unassign_cmd)
cli.add_command(apply_cmd)
cli.add_command(unapply_cmd)
cli.add_command(sync_cmd)
cli.add_command(create_cmd)
cli.add_command(remove_cmd)
cli.add_command(list_cmd)
cli.add_command(config_group)


def main() -> None:
    """CLI entry point used by the `ww` console script."""
    cli()
