import click

from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.context import WorkweaveContext
from workweave.core.workspaces import list_workspaces


@click.command("list")
@click.pass_obj
def list_cmd(ctx: WorkweaveContext) -> None:
    """List workspaces."""
    repo = Ensure.in_repo(ctx)

    with Ensure.operation():
        workspaces = list_workspaces(ctx)

    if not workspaces:
        user_output("No workspaces")
        return

    for ws in workspaces:
        try:
            shown = ws.path.relative_to(repo.root)
        except ValueError:
            shown = ws.path
        name = click.style(ws.name, fg="cyan", bold=True)
        user_output(f"{name} [{ws.branch}] {shown}")
