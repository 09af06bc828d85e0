import click

from workweave.cli.ensure import Ensure
from workweave.cli.output import user_output
from workweave.core.context import WorkweaveContext
from workweave.status.models.status_data import StagingStatus, WorkspaceStatus
from workweave.status.reconcile import collect_status


def _format_staging(staging: StagingStatus) -> list[str]:
    branch = staging.current_branch or "detached HEAD"
    header = f"Staging: {click.style(branch, fg='cyan', bold=True)}"
    if not staging.on_staging:
        header += click.style(f" (expected {staging.staging_branch})", fg="red")
    if staging.behind_integration and staging.integration_ref is not None:
        header += click.style(
            f" - {staging.behind_integration} behind {staging.integration_ref}", fg="yellow"
        )

    lines = [header]
    if staging.pending:
        lines.append(f"Pending ({len(staging.pending)}):")
        for path in staging.pending:
            code = staging.pending_codes.get(path, "")
            lines.append(f"  {code:<2} {path}")
    else:
        lines.append("No pending changes")
    return lines


def _format_workspace(ws: WorkspaceStatus) -> str:
    name = click.style(ws.name, fg="cyan", bold=True)
    if ws.missing:
        return f"  {name} {click.style('MISSING', fg='red')}"

    parts: list[str] = []
    if ws.applied:
        parts.append(click.style("applied", fg="green"))
    else:
        parts.append(
            click.style(f"not applied ({ws.not_applied} of {ws.unmerged} commits)", fg="yellow")
        )

    if ws.ahead is None:
        parts.append(click.style("not pushed", fg="bright_black"))
    elif ws.ahead or ws.behind:
        parts.append(f"ahead {ws.ahead}, behind {ws.behind}")
    else:
        parts.append("up to date")

    if ws.merged_upstream:
        parts.append(click.style("merged", fg="magenta"))

    if ws.uncommitted:
        parts.append(f"{ws.uncommitted} uncommitted")

    return f"  {name} " + " | ".join(parts)


@click.command("status")
@click.pass_obj
def status_cmd(ctx: WorkweaveContext) -> None:
    """Show pending staging changes and the state of every workspace."""
    with Ensure.operation():
        report = collect_status(ctx)

    for line in _format_staging(report.staging):
        user_output(line)

    user_output()
    if not report.workspaces:
        user_output("No workspaces")
        return

    user_output("Workspaces:")
    for ws in report.workspaces:
        user_output(_format_workspace(ws))
