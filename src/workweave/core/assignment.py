"""Moving pending staging changes into workspaces and back.

assign: each path becomes one staging commit carrying an assignment trailer,
and the same change lands uncommitted in the workspace.

unassign: the assignment commit is reverted, the change reappears as pending
on staging, and the workspace copy is dropped.
"""

import logging
import shutil
from dataclasses import dataclass, field

from workweave.core.context import WorkweaveContext
from workweave.core.errors import ConflictError, PreconditionError
from workweave.core.history import reverted_on_staging
from workweave.core.repo_discovery import RepoContext
from workweave.core.trailers import (
    ASSIGN_TRAILER,
    Assignment,
    format_assignment_message,
    is_reverted,
    parse_assignment,
)
from workweave.core.workspaces import (
    Workspace,
    ensure_workspace,
    get_workspace,
    require_repo,
    require_staging_checked_out,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignResult:
    workspace: str
    created: bool
    assigned: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if not self.assigned and not self.failed:
            return "No pending changes to assign"
        text = f"Assigned {len(self.assigned)} file(s) to '{self.workspace}'"
        if self.failed:
            text += f", {len(self.failed)} failed"
        return text


@dataclass(frozen=True)
class UnassignResult:
    workspace: str
    reverted: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if not self.reverted:
            return f"No active assignments to '{self.workspace}'"
        return f"Unassigned {len(self.paths)} file(s) from '{self.workspace}'"


def pending_paths(ctx: WorkweaveContext, repo: RepoContext) -> list[str]:
    """Paths with a pending change on staging, workspace directories excluded."""
    worktrees_prefix = ctx.config.worktrees_dir.strip("/") + "/"
    status = ctx.git_ops.get_file_status(repo.root)
    return [p for p in status.all_paths if not p.startswith(worktrees_prefix)]


def expand_requested_paths(requested: list[str], pending: list[str]) -> list[str]:
    """Resolve files and directories to pending paths, keeping request order.

    Raises:
        PreconditionError: If a request matches no pending change
    """
    expanded: list[str] = []
    for raw in requested:
        request = raw.rstrip("/") or "."
        if request == ".":
            matches = list(pending)
        elif request in pending:
            matches = [request]
        else:
            matches = [p for p in pending if p.startswith(request + "/")]

        if not matches:
            raise PreconditionError(
                f"'{raw}' has no pending changes on staging",
                recovery_hint="Run 'ww status' to see pending files",
            )

        for path in matches:
            if path not in expanded:
                expanded.append(path)
    return expanded


def active_assignments(
    ctx: WorkweaveContext, repo: RepoContext, workspace: str | None = None
) -> list[Assignment]:
    """Assignments on staging that no later commit reverts, newest first."""
    records = ctx.git_ops.get_commits(repo.root, ctx.staging_branch, grep=f"{ASSIGN_TRAILER}:")
    reverted = reverted_on_staging(ctx, repo)

    active: list[Assignment] = []
    for record in records:
        assignment = parse_assignment(record)
        if assignment is None or is_reverted(assignment.sha, reverted):
            continue
        if workspace is not None and assignment.workspace != workspace:
            continue
        active.append(assignment)
    return active


def _copy_into_workspace(repo: RepoContext, workspace: Workspace, path: str) -> None:
    """Fallback when the patch doesn't apply: mirror the staging file."""
    source = repo.root / path
    target = workspace.path / path
    if source.exists() or source.is_symlink():
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target, follow_symlinks=False)
    elif target.exists() or target.is_symlink():
        target.unlink()


def _assign_one(
    ctx: WorkweaveContext, repo: RepoContext, workspace: Workspace, path: str
) -> str | None:
    """Assign one path. Returns a failure reason, or None on success."""
    git_ops = ctx.git_ops

    git_ops.stage_path(repo.root, path)
    if not git_ops.commit_path(repo.root, path, format_assignment_message(path, workspace.name)):
        return "commit failed"

    sha = git_ops.get_branch_head(repo.root, "HEAD")
    if sha is None:
        return "could not resolve the assignment commit"

    patch = git_ops.show_patch(repo.root, sha, path)
    if git_ops.apply_patch(workspace.path, patch):
        logger.debug("Applied %s to %s as a patch", path, workspace.path)
        return None

    logger.debug("Patch for %s did not apply in %s, copying instead", path, workspace.path)
    try:
        _copy_into_workspace(repo, workspace, path)
    except OSError as e:
        logger.warning("Could not copy %s into %s: %s", path, workspace.path, e)
        return f"committed as {sha[:8]} but not copied into the workspace: {e}"
    return None


def assign(ctx: WorkweaveContext, workspace: str, paths: list[str] | None) -> AssignResult:
    """Assign pending staging changes to a workspace.

    Args:
        ctx: Application context
        workspace: Workspace name; created from the staging tip when missing
        paths: Repository-relative files or directories, or None for every
            pending change

    Raises:
        PreconditionError: Before any effect, for a wrong branch, invalid name
            or a path with nothing pending
    """
    repo = require_repo(ctx)
    require_staging_checked_out(ctx, repo)

    pending = pending_paths(ctx, repo)
    if paths is None:
        to_assign = pending
    else:
        to_assign = expand_requested_paths(paths, pending)

    if not to_assign:
        return AssignResult(workspace=workspace, created=False)

    target, created = ensure_workspace(ctx, workspace)

    assigned: list[str] = []
    failed: list[tuple[str, str]] = []
    for path in to_assign:
        try:
            reason = _assign_one(ctx, repo, target, path)
        except RuntimeError as e:
            reason = str(e).splitlines()[0]
        if reason is None:
            assigned.append(path)
        else:
            logger.warning("Failed to assign %s to %s: %s", path, workspace, reason)
            failed.append((path, reason))

    return AssignResult(workspace=workspace, created=created, assigned=assigned, failed=failed)


def _discard_in_workspace(ctx: WorkweaveContext, workspace: Workspace, path: str) -> str | None:
    if not ctx.git_ops.is_dir(workspace.path):
        return f"Workspace directory {workspace.path} is missing; '{path}' not discarded"
    try:
        ctx.git_ops.discard_path(workspace.path, path)
    except (RuntimeError, OSError) as e:
        logger.warning("Could not discard %s in %s: %s", path, workspace.path, e)
        return f"Could not discard '{path}' in workspace '{workspace.name}'"
    return None


def _restore_pending(
    ctx: WorkweaveContext, repo: RepoContext, assignment: Assignment
) -> str | None:
    patch = ctx.git_ops.show_patch(repo.root, assignment.sha, assignment.path)
    if ctx.git_ops.apply_patch(repo.root, patch):
        return None
    logger.warning("Could not restore %s as a pending change", assignment.path)
    return (
        f"Could not restore '{assignment.path}' as a pending change; "
        f"recover it with: git show {assignment.sha[:8]} -- {assignment.path}"
    )


def _revert_hint(completed: int) -> str:
    text = "Resolve the conflicts, then run 'git revert --continue' (or 'git revert --abort')"
    if completed:
        text += f"; {completed} earlier revert(s) are already committed"
    return text


def unassign(ctx: WorkweaveContext, workspace: str, path: str | None) -> UnassignResult:
    """Undo assignments to a workspace.

    Args:
        ctx: Application context
        workspace: Registered workspace name
        path: Repository-relative path, or None for every active assignment

    Raises:
        PreconditionError: Wrong branch, unknown workspace, dirty staging tree,
            or no active assignment for the path
        ConflictError: A revert stopped on a conflict
    """
    repo = require_repo(ctx)
    require_staging_checked_out(ctx, repo)
    target = get_workspace(ctx, workspace)
    git_ops = ctx.git_ops

    if path is None:
        if git_ops.has_uncommitted_changes(repo.root):
            raise PreconditionError(
                "Staging has uncommitted changes",
                recovery_hint="Assign, commit or stash pending changes before unassigning all",
            )
    else:
        status = git_ops.get_file_status(repo.root)
        if status.staged:
            raise PreconditionError(
                "Staging index has staged changes",
                recovery_hint="Unstage them first with: git reset",
            )
        if path in status.all_paths:
            raise PreconditionError(f"'{path}' has pending changes on staging")

    matches = active_assignments(ctx, repo, workspace)
    if path is not None:
        matches = [a for a in matches if a.path == path][:1]
        if not matches:
            raise PreconditionError(f"'{path}' is not assigned to '{workspace}'")

    if not matches:
        return UnassignResult(workspace=workspace)

    reverted: list[str] = []
    for assignment in matches:
        logger.debug("Reverting %s (%s)", assignment.sha, assignment.path)
        if not git_ops.revert_commit(repo.root, assignment.sha):
            raise ConflictError(
                f"Reverting the assignment of '{assignment.path}' hit a conflict",
                operation="revert",
                completed=len(reverted),
                recovery_hint=_revert_hint(len(reverted)),
            )
        reverted.append(assignment.sha)

    warnings: list[str] = []
    for assignment in reversed(matches):
        warning = _restore_pending(ctx, repo, assignment)
        if warning is not None:
            warnings.append(warning)

    paths: list[str] = []
    for assignment in matches:
        if assignment.path not in paths:
            paths.append(assignment.path)

    for unassigned_path in paths:
        warning = _discard_in_workspace(ctx, target, unassigned_path)
        if warning is not None:
            warnings.append(warning)

    return UnassignResult(workspace=workspace, reverted=reverted, paths=paths, warnings=warnings)
