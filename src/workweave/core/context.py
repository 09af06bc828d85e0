"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

from workweave.cli.picker import ClickPicker, Picker
from workweave.core.config import WorkweaveConfig, load_config
from workweave.core.gitops import DryRunGitOps, GitOps, RealGitOps
from workweave.core.repo_discovery import (
    NoRepoSentinel,
    RepoContext,
    discover_repo_or_sentinel,
)


@dataclass(frozen=True)
class WorkweaveContext:
    """Immutable context holding all dependencies for workweave operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git_ops: GitOps
    picker: Picker
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel
    config: WorkweaveConfig
    dry_run: bool

    @property
    def staging_branch(self) -> str:
        return self.config.staging_branch

    def worktrees_root(self, repo: RepoContext) -> Path:
        """Directory holding all workspaces of a repository."""
        return repo.root / self.config.worktrees_dir

    def trunk_branch(self, repo: RepoContext) -> str:
        """Configured integration branch, else the one detected from git."""
        if self.config.trunk_branch is not None:
            return self.config.trunk_branch
        return self.git_ops.get_trunk_branch(repo.root, self.config.remote)

    @staticmethod
    def for_test(
        git_ops: GitOps | None = None,
        picker: Picker | None = None,
        cwd: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
        config: WorkweaveConfig | None = None,
        dry_run: bool = False,
    ) -> "WorkweaveContext":
        """Create test context with optional pre-configured ops.

        Args:
            git_ops: Optional GitOps implementation. If None, creates empty FakeGitOps.
            picker: Optional Picker. If None, creates FakePicker with no answers.
            cwd: Optional current working directory. If None, uses Path("/test/default/cwd").
            repo: Optional RepoContext or NoRepoSentinel. If None, uses NoRepoSentinel().
            config: Optional WorkweaveConfig. If None, uses defaults.
            dry_run: Whether to wrap git_ops in DryRunGitOps

        Example:
            >>> git_ops = FakeGitOps(current_branches={Path("/repo"): "ww-working"})
            >>> ctx = WorkweaveContext.for_test(git_ops=git_ops, cwd=Path("/repo"))
        """
        from tests.fakes.gitops import FakeGitOps
        from tests.fakes.picker import FakePicker

        if git_ops is None:
            git_ops = FakeGitOps()

        if picker is None:
            picker = FakePicker()

        if cwd is None:
            cwd = Path("/test/default/cwd")

        if repo is None:
            repo = NoRepoSentinel()

        if config is None:
            config = WorkweaveConfig()

        if dry_run:
            git_ops = DryRunGitOps(git_ops)

        return WorkweaveContext(
            git_ops=git_ops,
            picker=picker,
            cwd=cwd,
            repo=repo,
            config=config,
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool, cwd: Path | None = None) -> WorkweaveContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap git operations so mutating commands are printed
                 instead of executed
        cwd: Directory to discover the repository from (defaults to Path.cwd())

    Returns:
        WorkweaveContext with real implementations, wrapped in dry-run
        wrappers if dry_run=True
    """
    # 1. Capture cwd (no deps)
    if cwd is None:
        cwd = Path.cwd()

    # 2. Create ops (need git_ops for repo discovery)
    git_ops: GitOps = RealGitOps()

    # 3. Discover repo
    repo = discover_repo_or_sentinel(cwd, git_ops)

    # 4. Load repo config (or defaults if no repo)
    if isinstance(repo, NoRepoSentinel):
        config = WorkweaveConfig()
    else:
        config = load_config(repo.root)

    # 5. Apply dry-run wrappers if needed
    if dry_run:
        git_ops = DryRunGitOps(git_ops)

    return WorkweaveContext(
        git_ops=git_ops,
        picker=ClickPicker(),
        cwd=cwd,
        repo=repo,
        config=config,
        dry_run=dry_run,
    )


def with_dry_run(ctx: WorkweaveContext) -> WorkweaveContext:
    """Return a copy of the context whose git operations only print."""
    if ctx.dry_run:
        return ctx
    return replace(ctx, git_ops=DryRunGitOps(ctx.git_ops), dry_run=True)
