"""Status reconciliation between staging and workspaces.

Whether a workspace is "applied" is inferred from history alone:

1. no commits unique to the workspace branch: applied;
2. an active staging commit attributed to the workspace by trailer and made
   after the workspace's newest unique commit: applied;
3. otherwise every unique commit must have a patch-id twin among the recent
   staging commits.

This is a best-effort approximation. Rewritten history or a patch that was
amended after being picked both defeat it.
"""

import logging
from dataclasses import dataclass

from workweave.core.context import WorkweaveContext
from workweave.core.errors import PreconditionError
from workweave.core.gitops import CommitRecord
from workweave.core.history import reverted_on_staging, staging_patch_ids
from workweave.core.repo_discovery import RepoContext
from workweave.core.trailers import APPLY_TRAILER, ASSIGN_TRAILER, is_reverted, names_workspace
from workweave.core.workspaces import Workspace, list_workspaces, require_repo
from workweave.status.models.status_data import StagingStatus, StatusReport, WorkspaceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StagingHistory:
    """Staging facts shared by every workspace's reconciliation."""

    attributed: list[CommitRecord]
    window_patch_ids: set[str]


def integration_ref(ctx: WorkweaveContext, repo: RepoContext) -> str | None:
    """`<remote>/<trunk>` when the remote copy exists, else the local trunk."""
    trunk = ctx.trunk_branch(repo)
    remote_ref = f"{ctx.config.remote}/{trunk}"
    if ctx.git_ops.ref_exists(repo.root, remote_ref):
        return remote_ref
    if ctx.git_ops.branch_exists(repo.root, trunk):
        return trunk
    return None


def _load_history(ctx: WorkweaveContext, repo: RepoContext) -> _StagingHistory:
    git_ops = ctx.git_ops
    staging = ctx.staging_branch
    reverted = reverted_on_staging(ctx, repo)

    attributed: list[CommitRecord] = []
    for trailer in (ASSIGN_TRAILER, APPLY_TRAILER):
        for record in git_ops.get_commits(repo.root, staging, grep=f"{trailer}:"):
            if not is_reverted(record.sha, reverted):
                attributed.append(record)

    return _StagingHistory(attributed=attributed, window_patch_ids=staging_patch_ids(ctx, repo))


def _collect_staging(
    ctx: WorkweaveContext, repo: RepoContext, integration: str | None
) -> StagingStatus:
    git_ops = ctx.git_ops
    worktrees_prefix = ctx.config.worktrees_dir.strip("/") + "/"
    file_status = git_ops.get_file_status(repo.root)
    pending = [p for p in file_status.all_paths if not p.startswith(worktrees_prefix)]

    behind = 0
    if integration is not None:
        behind = git_ops.count_commits(repo.root, ctx.staging_branch, integration)

    return StagingStatus(
        root=repo.root,
        current_branch=git_ops.get_current_branch(repo.root),
        staging_branch=ctx.staging_branch,
        pending=pending,
        pending_codes={p: file_status.status_code(p) for p in pending},
        integration_ref=integration,
        behind_integration=behind,
    )


def reconcile_workspace(
    ctx: WorkweaveContext,
    repo: RepoContext,
    workspace: Workspace,
    history: _StagingHistory,
    integration: str | None,
) -> WorkspaceStatus:
    """Compute one workspace's status."""
    git_ops = ctx.git_ops
    staging = ctx.staging_branch

    if not git_ops.is_dir(workspace.path):
        return WorkspaceStatus.missing_dir(workspace.name, workspace.path)

    unmerged_range = f"{staging}..{workspace.branch}"
    unmerged = git_ops.count_commits(repo.root, staging, workspace.branch)
    not_applied = 0

    if unmerged == 0:
        applied_by = "no unmerged commits"
    else:
        newest = git_ops.get_commits(repo.root, unmerged_range, limit=1)
        newest_at = newest[0].committed_at if newest else 0
        if any(
            names_workspace(record, workspace.name) and record.committed_at > newest_at
            for record in history.attributed
        ):
            applied_by = "trailer"
        else:
            workspace_ids = git_ops.get_patch_ids(repo.root, unmerged_range)
            window = history.window_patch_ids
            not_applied = sum(1 for patch_id in workspace_ids.values() if patch_id not in window)
            applied_by = "patch-id" if not_applied == 0 else ""

    logger.debug(
        "%s: unmerged=%d not_applied=%d applied_by=%r",
        workspace.name,
        unmerged,
        not_applied,
        applied_by,
    )

    ahead: int | None = None
    behind: int | None = None
    upstream = git_ops.get_upstream(workspace.path, workspace.branch)
    if upstream is not None:
        ahead, behind = git_ops.get_ahead_behind(workspace.path, workspace.branch, upstream)

    merged_upstream = integration is not None and git_ops.is_ancestor(
        repo.root, workspace.branch, integration
    )

    return WorkspaceStatus(
        name=workspace.name,
        path=workspace.path,
        branch=workspace.branch,
        missing=False,
        unmerged=unmerged,
        not_applied=not_applied,
        applied=applied_by != "",
        applied_by=applied_by,
        ahead=ahead,
        behind=behind,
        merged_upstream=merged_upstream,
        uncommitted=len(git_ops.get_file_status(workspace.path).all_paths),
    )


def collect_status(ctx: WorkweaveContext) -> StatusReport:
    """Compute staging and per-workspace status. Nothing is cached or mutated.

    Raises:
        PreconditionError: Outside a repository or when staging doesn't exist
    """
    repo = require_repo(ctx)

    if not ctx.git_ops.branch_exists(repo.root, ctx.staging_branch):
        raise PreconditionError(
            f"Staging branch '{ctx.staging_branch}' does not exist",
            recovery_hint=f"Create it with: git checkout -b {ctx.staging_branch}",
        )

    integration = integration_ref(ctx, repo)
    staging = _collect_staging(ctx, repo, integration)
    history = _load_history(ctx, repo)

    workspaces = [
        reconcile_workspace(ctx, repo, workspace, history, integration)
        for workspace in list_workspaces(ctx)
    ]
    return StatusReport(staging=staging, workspaces=workspaces)
