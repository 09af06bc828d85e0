import click

from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.context import WorkweaveContext
from workweave.core.workspaces import create_workspace


@click.command("create")
@click.argument("name")
@click.pass_obj
def create_cmd(ctx: WorkweaveContext, name: str) -> None:
    """Create workspace NAME from the staging tip."""
    Ensure.in_repo(ctx)

    with Ensure.operation():
        result = create_workspace(ctx, name)

    user_output(result.summary)
