import click

from workweave.cli.core import repo_relative, workspace_or_pick
from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.assignment import assign, pending_paths
from workweave.core.context import WorkweaveContext


@click.command("assign")
@click.argument("workspace", required=False)
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--all", "assign_all", is_flag=True, help="Assign every pending change.")
@click.pass_obj
def assign_cmd(
    ctx: WorkweaveContext, workspace: str | None, paths: tuple[str, ...], assign_all: bool
) -> None:
    """Commit pending changes to staging and hand them to WORKSPACE.

    Each file becomes its own staging commit and shows up uncommitted in the
    workspace, which is created on first use. PATHS may be files or
    directories; without PATHS or --all you pick files interactively.
    """
    repo = Ensure.in_repo(ctx)
    Ensure.invariant(not (paths and assign_all), "Pass PATHS or --all, not both")
    name = workspace_or_pick(ctx, workspace, "Assign to which workspace?")

    requested: list[str] | None
    if assign_all:
        requested = None
    elif paths:
        requested = [repo_relative(ctx, repo, p) for p in paths]
    else:
        with Ensure.operation():
            pending = pending_paths(ctx, repo)
        if not pending:
            user_output("No pending changes to assign")
            return
        requested = ctx.picker.pick(f"Select files for {name}", pending, multiple=True)
        if not requested:
            user_output("No files selected")
            return

    with Ensure.operation():
        result = assign(ctx, name, requested)

    if result.created:
        user_output(f"Created workspace '{name}'")
    for path in result.assigned:
        user_output(f"  {click.style('✓', fg='green')} {path}")
    for path, reason in result.failed:
        user_output(f"  {click.style('✗', fg='red')} {path}: {reason}")
    user_output(result.summary)

    if result.failed and not result.assigned:
        raise SystemExit(1)
