"""Tests for context creation and repository discovery."""

from pathlib import Path

from tests.fakes.gitops import FakeGitOps
from tests.test_utils.repo_setup import git, init_staging_repo
from workweave.core.config import WorkweaveConfig
from workweave.core.context import WorkweaveContext, create_context, with_dry_run
from workweave.core.gitops import DryRunGitOps, RealGitOps
from workweave.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel


def test_create_context_outside_repository(tmp_path: Path) -> None:
    ctx = create_context(dry_run=False, cwd=tmp_path)

    assert isinstance(ctx.repo, NoRepoSentinel)
    assert ctx.config == WorkweaveConfig()
    assert isinstance(ctx.git_ops, RealGitOps)


def test_create_context_loads_repo_config(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "pyproject.toml").write_text(
        '[tool.workweave]\nstaging_branch = "stage"\n', encoding="utf-8"
    )

    ctx = create_context(dry_run=True, cwd=repo)

    assert isinstance(ctx.repo, RepoContext)
    assert ctx.repo.root == repo
    assert ctx.staging_branch == "stage"
    assert ctx.dry_run
    assert isinstance(ctx.git_ops, DryRunGitOps)


def test_discovery_from_workspace_resolves_main_repository(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    workspace = repo / ".worktrees" / "feat"
    git(repo, "worktree", "add", "-b", "feat", str(workspace))

    found = discover_repo_or_sentinel(workspace)

    assert isinstance(found, RepoContext)
    assert found.root == repo
    assert found.git_common_dir == repo / ".git"


def test_discovery_of_missing_path() -> None:
    found = discover_repo_or_sentinel(Path("/does/not/exist"), FakeGitOps())

    assert isinstance(found, NoRepoSentinel)
    assert "does not exist" in found.message


def test_trunk_branch_prefers_config() -> None:
    git_ops = FakeGitOps(trunk_branches={"origin": "master"})
    repo = RepoContext(root=Path("/repo"), repo_name="repo", git_common_dir=Path("/repo/.git"))

    detected = WorkweaveContext.for_test(git_ops=git_ops, repo=repo)
    configured = WorkweaveContext.for_test(
        git_ops=git_ops, repo=repo, config=WorkweaveConfig(trunk_branch="develop")
    )

    assert detected.trunk_branch(repo) == "master"
    assert configured.trunk_branch(repo) == "develop"
    assert configured.worktrees_root(repo) == Path("/repo/.worktrees")


def test_trunk_branch_detected_from_configured_remote() -> None:
    git_ops = FakeGitOps(trunk_branches={"origin": "master", "upstream": "develop"})
    repo = RepoContext(root=Path("/repo"), repo_name="repo", git_common_dir=Path("/repo/.git"))

    ctx = WorkweaveContext.for_test(
        git_ops=git_ops, repo=repo, config=WorkweaveConfig(remote="upstream")
    )

    assert ctx.trunk_branch(repo) == "develop"


def test_with_dry_run_wraps_once() -> None:
    ctx = WorkweaveContext.for_test()

    dry = with_dry_run(ctx)

    assert dry.dry_run
    assert isinstance(dry.git_ops, DryRunGitOps)
    assert with_dry_run(dry) is dry
    assert not ctx.dry_run
