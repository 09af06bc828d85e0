"""Queries over staging history shared by the engines and status."""

from workweave.core.context import WorkweaveContext
from workweave.core.repo_discovery import RepoContext
from workweave.core.trailers import REVERT_MARKER, is_reverted, reverted_shas


def reverted_on_staging(ctx: WorkweaveContext, repo: RepoContext) -> set[str]:
    """SHAs (possibly abbreviated) that some staging commit reverts."""
    records = ctx.git_ops.get_commits(repo.root, ctx.staging_branch, grep=REVERT_MARKER)
    return reverted_shas(records)


def staging_patch_ids(ctx: WorkweaveContext, repo: RepoContext) -> set[str]:
    """Patch ids of the recent staging window, minus commits since reverted."""
    by_sha = ctx.git_ops.get_patch_ids(
        repo.root, ctx.staging_branch, limit=ctx.config.patch_window
    )
    reverted = reverted_on_staging(ctx, repo)
    return {
        patch_id for sha, patch_id in by_sha.items() if not is_reverted(sha, reverted)
    }
