"""Merging the integration branch into staging and retiring merged workspaces."""

import logging
from dataclasses import dataclass, field

from workweave.core.context import WorkweaveContext
from workweave.core.errors import ConflictError, PreconditionError
from workweave.core.repo_discovery import RepoContext
from workweave.core.workspaces import (
    Workspace,
    list_workspaces,
    require_repo,
    require_staging_checked_out,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    source_branch: str
    removed: list[str] = field(default_factory=list)
    rebuilt: list[str] = field(default_factory=list)
    remote_deleted: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        text = f"Synced staging with '{self.source_branch}'"
        if self.removed:
            text += f"; removed {', '.join(self.removed)}"
        if self.rebuilt:
            text += f"; rebuilt {', '.join(self.rebuilt)}"
        return text


class _Warnings:
    """Collects best-effort failures for the result."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def add(self, message: str, error: Exception) -> None:
        logger.warning("%s: %s", message, error)
        self.messages.append(message)


def _refresh_source(
    ctx: WorkweaveContext, repo: RepoContext, source: str, warnings: _Warnings
) -> None:
    remote = ctx.config.remote
    try:
        ctx.git_ops.fetch_remote(repo.root, remote)
    except RuntimeError as e:
        warnings.add(f"Failed to fetch from '{remote}'", e)

    try:
        ctx.git_ops.fast_forward_branch(repo.root, remote, source)
    except RuntimeError as e:
        warnings.add(f"Failed to update local '{source}' from '{remote}/{source}'", e)


def _delete_remote_branch(
    ctx: WorkweaveContext, repo: RepoContext, branch: str, warnings: _Warnings
) -> bool:
    remote = ctx.config.remote
    if not ctx.git_ops.remote_branch_exists(repo.root, remote, branch):
        return False
    try:
        ctx.git_ops.delete_remote_branch(repo.root, remote, branch)
    except RuntimeError as e:
        warnings.add(f"Failed to delete remote branch '{remote}/{branch}'", e)
        return False
    return True


def _rebuild(ctx: WorkweaveContext, workspace: Workspace, warnings: _Warnings) -> bool:
    """Point a merged but dirty workspace at the new staging tip, keeping its edits."""
    try:
        ctx.git_ops.recreate_branch(workspace.path, workspace.branch, ctx.staging_branch)
    except RuntimeError as e:
        warnings.add(f"Failed to rebuild workspace '{workspace.name}'", e)
        return False
    return True


def _retire(
    ctx: WorkweaveContext, repo: RepoContext, workspace: Workspace, warnings: _Warnings
) -> bool:
    """Remove a merged, clean workspace and its local branch.

    The removal is not forced, so git refuses a tree that turned out dirty.
    """
    try:
        ctx.git_ops.remove_worktree(repo.root, workspace.path, force=False)
    except RuntimeError as e:
        warnings.add(f"Failed to remove workspace '{workspace.name}'", e)
        return False

    try:
        ctx.git_ops.delete_branch(repo.root, workspace.branch, force=True)
    except RuntimeError as e:
        warnings.add(f"Failed to delete branch '{workspace.branch}'", e)
    return True


def sync(ctx: WorkweaveContext, source_branch: str | None = None) -> SyncResult:
    """Merge the integration branch into staging, then clean up merged workspaces.

    Workspaces whose branch is reachable from the source branch are merged:
    clean ones are removed along with their branches, ones with uncommitted
    edits are rebuilt from the new staging tip and keep their remote branch.
    Every cleanup step is best-effort.

    Args:
        ctx: Application context (wrap with with_dry_run to only print)
        source_branch: Branch to merge; defaults to the trunk branch

    Raises:
        PreconditionError: Wrong branch, dirty staging tree, or unknown source
        ConflictError: The merge stopped on a conflict
    """
    repo = require_repo(ctx)
    require_staging_checked_out(ctx, repo)
    git_ops = ctx.git_ops
    source = source_branch if source_branch is not None else ctx.trunk_branch(repo)

    if not git_ops.branch_exists(repo.root, source):
        raise PreconditionError(f"Branch '{source}' does not exist")

    if git_ops.has_uncommitted_changes(repo.root):
        raise PreconditionError(
            "Staging has uncommitted changes",
            recovery_hint="Assign, commit or stash them before syncing",
        )

    warnings = _Warnings()
    has_remote = git_ops.remote_exists(repo.root, ctx.config.remote)
    if has_remote:
        _refresh_source(ctx, repo, source, warnings)

    logger.debug("Merging %s into %s", source, ctx.staging_branch)
    if not git_ops.merge_branch(repo.root, source):
        raise ConflictError(
            f"Merging '{source}' into '{ctx.staging_branch}' hit a conflict",
            operation="merge",
            recovery_hint="Resolve the conflicts and commit, or run 'git merge --abort'",
        )

    try:
        git_ops.prune_worktrees(repo.root)
    except RuntimeError as e:
        warnings.add("Failed to prune worktree metadata", e)

    removed: list[str] = []
    rebuilt: list[str] = []
    remote_deleted: list[str] = []
    for workspace in list_workspaces(ctx):
        if not git_ops.is_ancestor(repo.root, workspace.branch, source):
            continue

        dirty = git_ops.is_dir(workspace.path) and git_ops.has_uncommitted_changes(
            workspace.path
        )
        if dirty:
            if not _rebuild(ctx, workspace, warnings):
                continue
            rebuilt.append(workspace.name)
        else:
            if not _retire(ctx, repo, workspace, warnings):
                continue
            removed.append(workspace.name)
            if has_remote and _delete_remote_branch(ctx, repo, workspace.branch, warnings):
                remote_deleted.append(workspace.branch)

    return SyncResult(
        source_branch=source,
        removed=removed,
        rebuilt=rebuilt,
        remote_deleted=remote_deleted,
        warnings=warnings.messages,
    )
