import click

from workweave.cli.core import repo_relative, workspace_or_pick
from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.assignment import active_assignments, unassign
from workweave.core.context import WorkweaveContext


@click.command("unassign")
@click.argument("workspace", required=False)
@click.argument("path", required=False, type=click.Path())
@click.option("--all", "unassign_all", is_flag=True, help="Undo every active assignment.")
@click.pass_obj
def unassign_cmd(
    ctx: WorkweaveContext, workspace: str | None, path: str | None, unassign_all: bool
) -> None:
    """Take an assigned file back from WORKSPACE.

    The assignment commit is reverted, the change becomes pending on staging
    again and the workspace copy is discarded.
    """
    repo = Ensure.in_repo(ctx)
    Ensure.invariant(not (path and unassign_all), "Pass PATH or --all, not both")
    name = workspace_or_pick(ctx, workspace, "Unassign from which workspace?")

    targets: list[str | None]
    if unassign_all:
        targets = [None]
    elif path is not None:
        targets = [repo_relative(ctx, repo, path)]
    else:
        with Ensure.operation():
            assigned = sorted({a.path for a in active_assignments(ctx, repo, name)})
        if not assigned:
            user_output(f"Nothing is assigned to '{name}'")
            return
        picked = ctx.picker.pick(f"Select files to take back from {name}", assigned, multiple=True)
        if not picked:
            user_output("No files selected")
            return
        targets = list(picked)

    for target in targets:
        with Ensure.operation():
            result = unassign(ctx, name, target)
        for warning in result.warnings:
            user_output(click.style("Warning: ", fg="yellow") + warning)
        user_output(result.summary)
