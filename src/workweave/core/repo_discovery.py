"""Repository discovery functionality.

Discovers git repository information from a given path without requiring
a full WorkweaveContext (enables config loading before context creation).
"""

from dataclasses import dataclass
from pathlib import Path

from workweave.core.gitops import GitOps, RealGitOps


@dataclass(frozen=True)
class RepoContext:
    """Represents a git repo root and its shared git directory."""

    root: Path
    repo_name: str
    git_common_dir: Path


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(
    cwd: Path, git_ops: GitOps | None = None
) -> RepoContext | NoRepoSentinel:
    """Find the main repository root for `cwd`.

    Running from inside a workspace resolves to the repository that owns it,
    not the workspace itself, since the shared git directory sits in the main
    checkout.

    Args:
        cwd: Current working directory to start search from
        git_ops: Git operations interface (defaults to RealGitOps)

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    ops = git_ops if git_ops is not None else RealGitOps()

    if not ops.path_exists(cwd):
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    cur = cwd.resolve()

    git_common_dir = ops.get_git_common_dir(cur)
    if git_common_dir is not None:
        root = git_common_dir.parent.resolve()
        return RepoContext(root=root, repo_name=root.name, git_common_dir=git_common_dir)

    for parent in [cur, *cur.parents]:
        git_path = parent / ".git"
        if ops.path_exists(git_path) and ops.is_dir(git_path):
            return RepoContext(root=parent, repo_name=parent.name, git_common_dir=git_path)

    return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")
