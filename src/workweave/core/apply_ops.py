"""Bringing workspace commits onto staging and taking them back off."""

import logging
from dataclasses import dataclass, field

from workweave.core.context import WorkweaveContext
from workweave.core.errors import ConflictError
from workweave.core.history import reverted_on_staging, staging_patch_ids
from workweave.core.trailers import (
    APPLY_TRAILER,
    append_apply_trailer,
    applied_workspace,
    is_reverted,
)
from workweave.core.workspaces import get_workspace, require_repo, require_staging_checked_out

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyResult:
    workspace: str
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if not self.applied and not self.skipped:
            return f"'{self.workspace}' has no commits missing from staging"
        text = f"Applied {len(self.applied)} commit(s) from '{self.workspace}'"
        if self.skipped:
            text += f" ({len(self.skipped)} already on staging)"
        return text


@dataclass(frozen=True)
class UnapplyResult:
    workspace: str
    reverted: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if not self.reverted:
            return f"Nothing from '{self.workspace}' is applied to staging"
        return f"Reverted {len(self.reverted)} commit(s) from '{self.workspace}'"


def apply(ctx: WorkweaveContext, workspace: str) -> ApplyResult:
    """Cherry-pick a workspace's unmerged commits onto staging, oldest first.

    Commits whose change already exists on staging (same patch id) are
    skipped. Each picked commit gets an apply trailer naming the workspace.

    Raises:
        PreconditionError: Wrong branch or unknown workspace
        ConflictError: A cherry-pick stopped on a conflict
    """
    repo = require_repo(ctx)
    require_staging_checked_out(ctx, repo)
    target = get_workspace(ctx, workspace)
    git_ops = ctx.git_ops
    staging = ctx.staging_branch

    commits = git_ops.list_commits(repo.root, staging, target.branch)
    if not commits:
        return ApplyResult(workspace=workspace)

    known = staging_patch_ids(ctx, repo)
    workspace_ids = git_ops.get_patch_ids(repo.root, f"{staging}..{target.branch}")

    applied: list[str] = []
    skipped: list[str] = []
    for sha in commits:
        patch_id = workspace_ids.get(sha)
        if patch_id is not None and patch_id in known:
            logger.debug("Skipping %s, its change is already on staging", sha)
            skipped.append(sha)
            continue

        if not git_ops.cherry_pick(repo.root, sha):
            raise ConflictError(
                f"Cherry-picking {sha[:8]} from '{workspace}' hit a conflict "
                f"after {len(applied)} commit(s)",
                operation="cherry-pick",
                completed=len(applied),
                recovery_hint=(
                    "Resolve the conflicts and run 'git cherry-pick --continue', "
                    "then run 'ww apply' again for the remaining commits"
                ),
            )

        head = git_ops.get_commits(repo.root, "HEAD", limit=1)[0]
        git_ops.amend_message(repo.root, append_apply_trailer(head.message, workspace))
        if patch_id is not None:
            known.add(patch_id)
        applied.append(sha)

    return ApplyResult(workspace=workspace, applied=applied, skipped=skipped)


def unapply(ctx: WorkweaveContext, workspace: str) -> UnapplyResult:
    """Revert every still-active apply commit of a workspace, newest first.

    Raises:
        PreconditionError: Wrong branch or unknown workspace
        ConflictError: A revert stopped on a conflict
    """
    repo = require_repo(ctx)
    require_staging_checked_out(ctx, repo)
    get_workspace(ctx, workspace)
    git_ops = ctx.git_ops
    staging = ctx.staging_branch

    records = git_ops.get_commits(repo.root, staging, grep=f"{APPLY_TRAILER}:")
    reverted_refs = reverted_on_staging(ctx, repo)
    targets = [
        r.sha
        for r in records
        if applied_workspace(r) == workspace and not is_reverted(r.sha, reverted_refs)
    ]

    reverted: list[str] = []
    for sha in targets:
        if not git_ops.revert_commit(repo.root, sha):
            raise ConflictError(
                f"Reverting {sha[:8]} hit a conflict after {len(reverted)} revert(s)",
                operation="revert",
                completed=len(reverted),
                recovery_hint="Resolve the conflicts and run 'git revert --continue'",
            )
        reverted.append(sha)

    return UnapplyResult(workspace=workspace, reverted=reverted)
