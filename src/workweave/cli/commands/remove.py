import click

from workweave.cli.core import workspace_or_pick
from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.context import WorkweaveContext
from workweave.core.workspaces import remove_workspace


@click.command("remove")
@click.argument("name", required=False)
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Remove even with unpushed commits or uncommitted changes.",
)
@click.pass_obj
def remove_cmd(ctx: WorkweaveContext, name: str | None, force: bool) -> None:
    """Remove workspace NAME. Its branch is kept."""
    Ensure.in_repo(ctx)
    target = workspace_or_pick(ctx, name, "Remove which workspace?")

    with Ensure.operation():
        result = remove_workspace(ctx, target, force=force)

    for warning in result.warnings:
        user_output(click.style("Warning: ", fg="yellow") + warning)
    user_output(result.summary)
