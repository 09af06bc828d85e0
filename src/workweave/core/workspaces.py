"""Workspace registry: linked worktrees identified by their branch name.

Workspaces live in `<root>/<worktrees_dir>/<branch>` and are enumerated from
`git worktree list`; nothing is stored besides git's own metadata.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from workweave.core.context import WorkweaveContext
from workweave.core.errors import PreconditionError
from workweave.core.repo_discovery import NoRepoSentinel, RepoContext

logger = logging.getLogger(__name__)

_INVALID_NAME_RE = re.compile(r"(\.\.|[\s~^:?*\[\\]|@\{|//)")


@dataclass(frozen=True)
class Workspace:
    """A registered workspace."""

    name: str
    branch: str
    path: Path


@dataclass(frozen=True)
class CreateResult:
    workspace: Workspace
    attached_existing_branch: bool

    @property
    def summary(self) -> str:
        origin = "existing branch" if self.attached_existing_branch else "new branch"
        return f"Created workspace '{self.workspace.name}' at {self.workspace.path} ({origin})"


@dataclass(frozen=True)
class RemoveResult:
    name: str
    pruned_only: bool
    branch_deleted: bool
    warnings: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if self.pruned_only:
            return f"Cleaned up registration for missing workspace '{self.name}'"
        return f"Removed workspace '{self.name}'"


def require_repo(ctx: WorkweaveContext) -> RepoContext:
    """Return the discovered repository or raise PreconditionError."""
    if isinstance(ctx.repo, NoRepoSentinel):
        raise PreconditionError(ctx.repo.message)
    return ctx.repo


def require_staging_checked_out(ctx: WorkweaveContext, repo: RepoContext) -> None:
    """Refuse to operate unless the staging branch is checked out in the root."""
    staging = ctx.staging_branch
    if not ctx.git_ops.branch_exists(repo.root, staging):
        raise PreconditionError(
            f"Staging branch '{staging}' does not exist",
            recovery_hint=f"Create it with: git checkout -b {staging}",
        )

    current = ctx.git_ops.get_current_branch(repo.root)
    if current != staging:
        shown = current if current is not None else "detached HEAD"
        raise PreconditionError(
            f"Staging branch '{staging}' must be checked out in {repo.root} (found {shown})",
            recovery_hint=f"Run: git checkout {staging}",
        )


def validate_workspace_name(ctx: WorkweaveContext, repo: RepoContext, name: str) -> None:
    """Reject names git can't use as a branch and the reserved branches."""
    if (
        not name
        or name.startswith(("-", "/", "."))
        or name.endswith(("/", ".lock", "."))
        or _INVALID_NAME_RE.search(name)
    ):
        raise PreconditionError(f"'{name}' is not a valid workspace name")

    reserved = {ctx.staging_branch, ctx.trunk_branch(repo)}
    if name in reserved:
        raise PreconditionError(f"'{name}' is reserved and can't be used as a workspace")


def list_workspaces(ctx: WorkweaveContext) -> list[Workspace]:
    """Enumerate registered workspaces in git's order.

    Detached worktrees have no branch and therefore no workspace identity;
    they are skipped.
    """
    repo = require_repo(ctx)
    workspaces: list[Workspace] = []
    for info in ctx.git_ops.list_worktrees(repo.root):
        if info.is_root or info.branch is None:
            continue
        workspaces.append(Workspace(name=info.branch, branch=info.branch, path=info.path))
    return workspaces


def find_workspace(ctx: WorkweaveContext, name: str) -> Workspace | None:
    for workspace in list_workspaces(ctx):
        if workspace.name == name:
            return workspace
    return None


def get_workspace(ctx: WorkweaveContext, name: str) -> Workspace:
    """Return a registered workspace or raise PreconditionError."""
    workspace = find_workspace(ctx, name)
    if workspace is None:
        raise PreconditionError(
            f"Workspace '{name}' not found",
            recovery_hint="Run 'ww list' to see existing workspaces",
        )
    return workspace


def _add_workspace(ctx: WorkweaveContext, repo: RepoContext, name: str) -> CreateResult:
    git_ops = ctx.git_ops
    path = ctx.worktrees_root(repo) / name
    if git_ops.path_exists(path):
        raise PreconditionError(f"Directory {path} already exists")

    git_ops.add_info_exclude(repo.git_common_dir, f"/{ctx.config.worktrees_dir.strip('/')}/")

    attach = git_ops.branch_exists(repo.root, name)
    if attach:
        logger.debug("Attaching existing branch %s at %s", name, path)
        git_ops.add_worktree(repo.root, path, branch=name, ref=None, create_branch=False)
    else:
        logger.debug("Creating branch %s from %s at %s", name, ctx.staging_branch, path)
        git_ops.add_worktree(
            repo.root, path, branch=name, ref=ctx.staging_branch, create_branch=True
        )

    return CreateResult(
        workspace=Workspace(name=name, branch=name, path=path),
        attached_existing_branch=attach,
    )


def create_workspace(ctx: WorkweaveContext, name: str) -> CreateResult:
    """Create a workspace branching off the staging tip.

    An existing local branch of that name is checked out instead of created.

    Raises:
        PreconditionError: If the name is invalid, the workspace already exists
            or the staging branch is missing
    """
    repo = require_repo(ctx)
    validate_workspace_name(ctx, repo, name)

    if find_workspace(ctx, name) is not None:
        raise PreconditionError(f"Workspace '{name}' already exists")

    if not ctx.git_ops.branch_exists(repo.root, ctx.staging_branch):
        raise PreconditionError(
            f"Staging branch '{ctx.staging_branch}' does not exist",
            recovery_hint=f"Create it with: git checkout -b {ctx.staging_branch}",
        )

    return _add_workspace(ctx, repo, name)


def ensure_workspace(ctx: WorkweaveContext, name: str) -> tuple[Workspace, bool]:
    """Return a workspace, creating it first when missing.

    Returns:
        (workspace, created)
    """
    existing = find_workspace(ctx, name)
    if existing is not None:
        return existing, False

    repo = require_repo(ctx)
    validate_workspace_name(ctx, repo, name)
    return _add_workspace(ctx, repo, name).workspace, True


def remove_workspace(ctx: WorkweaveContext, name: str, *, force: bool) -> RemoveResult:
    """Remove a workspace's worktree.

    The branch is kept. When the directory is already gone, the stale
    registration is pruned and the branch deleted.

    Raises:
        PreconditionError: If the workspace is unknown, or (without `force`) has
            unpushed commits or uncommitted changes
    """
    repo = require_repo(ctx)
    workspace = get_workspace(ctx, name)
    git_ops = ctx.git_ops

    if not git_ops.is_dir(workspace.path):
        logger.warning("Workspace directory %s not found, pruning registration", workspace.path)
        git_ops.prune_worktrees(repo.root)
        branch_deleted = False
        warnings: list[str] = []
        if git_ops.branch_exists(repo.root, workspace.branch):
            try:
                git_ops.delete_branch(repo.root, workspace.branch, force=True)
                branch_deleted = True
            except RuntimeError as e:
                logger.warning("Could not delete branch %s: %s", workspace.branch, e)
                warnings.append(f"Could not delete branch '{workspace.branch}'")
        return RemoveResult(
            name=name, pruned_only=True, branch_deleted=branch_deleted, warnings=warnings
        )

    if not force:
        upstream = git_ops.get_upstream(workspace.path, workspace.branch)
        if upstream is not None:
            ahead, _ = git_ops.get_ahead_behind(workspace.path, workspace.branch, upstream)
            if ahead > 0:
                raise PreconditionError(
                    f"Branch '{workspace.branch}' has {ahead} unpushed commit(s)",
                    recovery_hint="Use --force to remove anyway",
                )

        if git_ops.has_uncommitted_changes(workspace.path):
            raise PreconditionError(
                f"Workspace '{name}' has uncommitted changes",
                recovery_hint="Use --force to remove anyway",
            )

    git_ops.remove_worktree(repo.root, workspace.path, force=force)
    return RemoveResult(name=name, pruned_only=False, branch_deleted=False)
