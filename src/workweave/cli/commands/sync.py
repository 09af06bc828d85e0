import click

from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.context import WorkweaveContext, with_dry_run
from workweave.core.sync_ops import sync


@click.command("sync")
@click.argument("source_branch", required=False)
@click.option(
    "--dry-run",
    is_flag=True,
    # dry_run=False: Allow destructive operations by default
    default=False,
    help="Show what would be done without executing destructive operations.",
)
@click.pass_obj
def sync_cmd(ctx: WorkweaveContext, source_branch: str | None, dry_run: bool) -> None:
    """Merge SOURCE_BRANCH (default: trunk) into staging and clean up workspaces.

    Steps:
    1. Fetch the remote and fast-forward the local source branch
    2. Merge the source branch into staging
    3. Remove workspaces merged into the source branch, or rebuild them from
       staging when they still hold uncommitted edits
    4. Delete the matching remote branches
    """
    Ensure.in_repo(ctx)
    if dry_run:
        ctx = with_dry_run(ctx)

    with Ensure.operation():
        result = sync(ctx, source_branch)

    for name in result.removed:
        user_output(f"  {click.style('✓', fg='green')} Removed {name}")
    for name in result.rebuilt:
        user_output(f"  {click.style('↻', fg='cyan')} Rebuilt {name} from staging")
    for branch in result.remote_deleted:
        user_output(f"  {click.style('✓', fg='green')} Deleted remote branch {branch}")
    for warning in result.warnings:
        user_output(click.style("Warning: ", fg="yellow") + warning)
    user_output(result.summary)
