"""Tests for the sync command."""

from click.testing import CliRunner

from tests.test_utils.repo_setup import REPO_ROOT, fake_repo_context, workspace_path
from workweave.cli.cli import cli
from workweave.core.gitops import FileStatus


def test_sync_reports_cleanup() -> None:
    git_ops, ctx = fake_repo_context(
        workspaces=["done", "busy"],
        ancestors={("done", "main"), ("busy", "main")},
        file_statuses={workspace_path("busy"): FileStatus(staged=[], modified=["x"], untracked=[])},
        remotes={"origin"},
        remote_branches={"done"},
    )

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Removed done" in result.output
    assert "Rebuilt busy from staging" in result.output
    assert "Deleted remote branch done" in result.output
    assert "Synced staging with 'main'" in result.output
    assert git_ops.merged == ["main"]


def test_sync_dry_run_only_prints() -> None:
    git_ops, ctx = fake_repo_context(workspaces=["done"], ancestors={("done", "main")})

    result = CliRunner().invoke(cli, ["sync", "--dry-run"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "[DRY RUN] Would run: git merge --no-edit main" in result.output
    assert "[DRY RUN] Would run: git branch -D done" in result.output
    assert git_ops.merged == []
    assert git_ops.deleted_branches == []


def test_sync_merge_conflict() -> None:
    _, ctx = fake_repo_context(conflicting_merges={"main"})

    result = CliRunner().invoke(cli, ["sync"], obj=ctx)

    assert result.exit_code == 1
    assert "(merge in progress)" in result.output
    assert "git merge --abort" in result.output


def test_sync_refuses_dirty_staging() -> None:
    git_ops, ctx = fake_repo_context(
        file_statuses={REPO_ROOT: FileStatus(staged=[], modified=["a.txt"], untracked=[])}
    )

    result = CliRunner().invoke(cli, ["sync", "main"], obj=ctx)

    assert result.exit_code == 1
    assert "Staging has uncommitted changes" in result.output
    assert git_ops.merged == []
