import click

from workweave.cli.core import workspace_or_pick
from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.apply_ops import apply, unapply
from workweave.core.context import WorkweaveContext


@click.command("apply")
@click.argument("workspace", required=False)
@click.pass_obj
def apply_cmd(ctx: WorkweaveContext, workspace: str | None) -> None:
    """Cherry-pick WORKSPACE's commits onto staging.

    Commits whose change staging already has are skipped.
    """
    Ensure.in_repo(ctx)
    name = workspace_or_pick(ctx, workspace, "Apply which workspace?")

    with Ensure.operation():
        result = apply(ctx, name)

    for sha in result.applied:
        user_output(f"  {click.style('✓', fg='green')} {sha[:8]}")
    user_output(result.summary)


@click.command("unapply")
@click.argument("workspace", required=False)
@click.pass_obj
def unapply_cmd(ctx: WorkweaveContext, workspace: str | None) -> None:
    """Revert the commits `ww apply` brought over from WORKSPACE."""
    Ensure.in_repo(ctx)
    name = workspace_or_pick(ctx, workspace, "Unapply which workspace?")

    with Ensure.operation():
        result = unapply(ctx, name)

    for sha in result.reverted:
        user_output(f"  {click.style('↺', fg='yellow')} {sha[:8]}")
    user_output(result.summary)
