"""End-to-end workflows against real git repositories.

These tests shell out to git in a temporary directory; they exercise
RealGitOps together with the engines.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.test_utils.repo_setup import STAGING, commit_file, git, init_staging_repo
from workweave.cli.cli import cli
from workweave.core.apply_ops import apply, unapply
from workweave.core.assignment import active_assignments, assign, unassign
from workweave.core.context import WorkweaveContext, create_context
from workweave.core.errors import ConflictError
from workweave.core.repo_discovery import RepoContext
from workweave.core.sync_ops import sync
from workweave.core.workspaces import create_workspace, find_workspace
from workweave.status.reconcile import collect_status


def _context(repo: Path) -> WorkweaveContext:
    return create_context(dry_run=False, cwd=repo)


def _repo(ctx: WorkweaveContext) -> RepoContext:
    assert isinstance(ctx.repo, RepoContext)
    return ctx.repo


def _log_subjects(cwd: Path, revision: str = "HEAD") -> list[str]:
    return git(cwd, "log", "--format=%s", revision).splitlines()


def test_assign_then_unassign_round_trip(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("1\n", encoding="utf-8")
    ctx = _context(repo)

    result = assign(ctx, "W", ["a.txt"])

    workspace = repo / ".worktrees" / "W"
    assert result.created
    assert result.assigned == ["a.txt"]
    assert _log_subjects(repo)[0] == "ww: assign a.txt to W"
    assert (workspace / "a.txt").read_text(encoding="utf-8") == "1\n"
    assert git(repo, "status", "--porcelain") == ""
    assert [a.path for a in active_assignments(ctx, _repo(ctx), "W")] == ["a.txt"]

    undone = unassign(ctx, "W", "a.txt")

    assert undone.warnings == []
    assert (repo / "a.txt").read_text(encoding="utf-8") == "1\n"
    assert not (workspace / "a.txt").exists()
    assert "a.txt" in git(repo, "status", "--porcelain")
    assert active_assignments(ctx, _repo(ctx), "W") == []


def test_unassign_tracked_file_restores_modification(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "README.md").write_text("# Changed\n", encoding="utf-8")
    ctx = _context(repo)

    assign(ctx, "W", ["README.md"])
    workspace = repo / ".worktrees" / "W"
    assert (workspace / "README.md").read_text(encoding="utf-8") == "# Changed\n"

    unassign(ctx, "W", "README.md")

    assert (repo / "README.md").read_text(encoding="utf-8") == "# Changed\n"
    assert (workspace / "README.md").read_text(encoding="utf-8") == "# Test Repository\n"
    assert git(workspace, "status", "--porcelain") == ""


def test_batch_unassign(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("a\n", encoding="utf-8")
    (repo / "docs").mkdir()
    (repo / "docs" / "b.md").write_text("b\n", encoding="utf-8")
    ctx = _context(repo)

    result = assign(ctx, "W", None)
    assert sorted(result.assigned) == ["a.txt", "docs/b.md"]

    undone = unassign(ctx, "W", None)

    assert len(undone.reverted) == 2
    assert sorted(undone.paths) == ["a.txt", "docs/b.md"]
    assert (repo / "a.txt").exists()
    assert (repo / "docs" / "b.md").exists()
    workspace = repo / ".worktrees" / "W"
    assert not (workspace / "a.txt").exists()
    assert not (workspace / "docs" / "b.md").exists()


def test_apply_skips_assigned_change_and_picks_the_rest(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("1\n", encoding="utf-8")
    ctx = _context(repo)
    assign(ctx, "W", ["a.txt"])
    workspace = repo / ".worktrees" / "W"

    # Commit the assigned change as-is, then build on top of it
    commit_file(workspace, "a.txt", "1\n", "Add a")
    commit_file(workspace, "a.txt", "2\n", "Bump a")
    commit_file(workspace, "b.txt", "new\n", "Add b")

    result = apply(ctx, "W")

    assert len(result.skipped) == 1
    assert len(result.applied) == 2
    assert (repo / "a.txt").read_text(encoding="utf-8") == "2\n"
    assert (repo / "b.txt").read_text(encoding="utf-8") == "new\n"
    head_message = git(repo, "log", "-1", "--format=%B")
    assert "(cherry picked from commit" in head_message
    assert "Workweave-Apply: W" in head_message

    status = collect_status(ctx).get("W")
    assert status is not None
    assert status.applied

    again = apply(ctx, "W")
    assert again.applied == []


def test_unapply_then_reapply(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ctx = _context(repo)
    create_workspace(ctx, "W")
    workspace = repo / ".worktrees" / "W"
    commit_file(workspace, "c.txt", "c\n", "Add c")

    apply(ctx, "W")
    assert (repo / "c.txt").exists()

    undone = unapply(ctx, "W")

    assert len(undone.reverted) == 1
    assert not (repo / "c.txt").exists()
    status = collect_status(ctx).get("W")
    assert status is not None
    assert not status.applied
    assert status.not_applied == 1

    reapplied = apply(ctx, "W")

    assert len(reapplied.applied) == 1
    assert (repo / "c.txt").read_text(encoding="utf-8") == "c\n"


def test_status_reports_pending_and_workspace_state(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("1\n", encoding="utf-8")
    (repo / "b.txt").write_text("b\n", encoding="utf-8")
    ctx = _context(repo)
    assign(ctx, "W", ["a.txt"])

    report = collect_status(ctx)

    assert report.staging.on_staging
    assert report.staging.pending == ["b.txt"]
    assert report.staging.integration_ref == "main"
    w = report.get("W")
    assert w is not None
    assert w.applied_by == "no unmerged commits"
    assert w.uncommitted == 1
    assert not w.pushed

    commit_file(repo / ".worktrees" / "W", "a.txt", "2\n", "Change a")

    w = collect_status(ctx).get("W")
    assert w is not None
    assert not w.applied
    assert w.unmerged == 1


def test_sync_removes_merged_clean_workspace_and_rebuilds_dirty_one(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ctx = _context(repo)
    create_workspace(ctx, "F")
    create_workspace(ctx, "G")
    commit_file(repo / ".worktrees" / "F", "f.txt", "f\n", "Add f")
    commit_file(repo / ".worktrees" / "G", "g.txt", "g\n", "Add g")
    (repo / ".worktrees" / "G" / "wip.txt").write_text("wip\n", encoding="utf-8")

    # Land both branches on main as if their PRs merged
    git(repo, "checkout", "main")
    git(repo, "merge", "--no-edit", "F", "G")
    git(repo, "checkout", STAGING)

    result = sync(ctx)

    assert result.source_branch == "main"
    assert result.removed == ["F"]
    assert result.rebuilt == ["G"]
    assert (repo / "f.txt").exists()
    assert (repo / "g.txt").exists()
    assert not (repo / ".worktrees" / "F").exists()
    assert "F" not in git(repo, "branch", "--format=%(refname:short)").split()
    assert find_workspace(ctx, "G") is not None
    g_head = git(repo / ".worktrees" / "G", "rev-parse", "HEAD").strip()
    assert g_head == git(repo, "rev-parse", STAGING).strip()
    assert (repo / ".worktrees" / "G" / "wip.txt").exists()


def test_sync_deletes_remote_branch_only_for_removed_workspace(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    origin = tmp_path / "origin.git"
    git(tmp_path, "init", "--bare", str(origin))
    git(repo, "remote", "add", "origin", str(origin))
    ctx = _context(repo)
    create_workspace(ctx, "F")
    create_workspace(ctx, "G")
    commit_file(repo / ".worktrees" / "F", "f.txt", "f\n", "Add f")
    commit_file(repo / ".worktrees" / "G", "g.txt", "g\n", "Add g")
    (repo / ".worktrees" / "G" / "wip.txt").write_text("wip\n", encoding="utf-8")
    git(repo, "push", "origin", "F", "G")

    git(repo, "checkout", "main")
    git(repo, "merge", "--no-edit", "F", "G")
    git(repo, "push", "origin", "main")
    git(repo, "checkout", STAGING)

    result = sync(ctx)

    assert result.removed == ["F"]
    assert result.rebuilt == ["G"]
    assert result.remote_deleted == ["F"]
    remote_branches = git(origin, "branch", "--format=%(refname:short)").split()
    assert "F" not in remote_branches
    assert "G" in remote_branches
    assert (repo / ".worktrees" / "G" / "wip.txt").exists()


def test_apply_of_edit_to_assigned_new_file_stops_on_conflict(tmp_path: Path) -> None:
    # The workspace branch predates the assignment commit, so editing the
    # assigned file and committing it adds the file a second time
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("1\n", encoding="utf-8")
    ctx = _context(repo)
    assign(ctx, "W", ["a.txt"])

    w = collect_status(ctx).get("W")
    assert w is not None
    assert w.applied
    assert w.unmerged == 0

    commit_file(repo / ".worktrees" / "W", "a.txt", "2\n", "Change a")

    w = collect_status(ctx).get("W")
    assert w is not None
    assert not w.applied
    assert w.unmerged == 1

    with pytest.raises(ConflictError) as exc_info:
        apply(ctx, "W")

    assert exc_info.value.operation == "cherry-pick"
    assert exc_info.value.completed == 0
    assert exc_info.value.recovery_hint is not None
    assert "git cherry-pick --continue" in exc_info.value.recovery_hint
    assert (repo / ".git" / "CHERRY_PICK_HEAD").exists()
    assert "a.txt" in git(repo, "diff", "--name-only", "--diff-filter=U")


def test_cli_assign_and_status(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["assign", "W", "src"], obj=_context(repo))

    assert result.exit_code == 0, result.output
    assert "src/app.py" in result.output

    result = runner.invoke(cli, ["status"], obj=_context(repo))

    assert result.exit_code == 0, result.output
    assert "No pending changes" in result.output
    assert "W applied" in result.output
