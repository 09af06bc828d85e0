"""RealGitOps against a throwaway repository."""

from pathlib import Path

from tests.test_utils.repo_setup import STAGING, commit_file, git, init_staging_repo
from workweave.core.gitops import RealGitOps


def test_list_worktrees_marks_root(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ops = RealGitOps()
    ops.add_worktree(
        repo, repo / ".worktrees" / "feat", branch="feat", ref=STAGING, create_branch=True
    )

    worktrees = ops.list_worktrees(repo)

    assert [(wt.branch, wt.is_root) for wt in worktrees] == [(STAGING, True), ("feat", False)]
    assert worktrees[1].path == repo / ".worktrees" / "feat"


def test_file_status_categories(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "README.md").write_text("changed\n", encoding="utf-8")
    (repo / "dir").mkdir()
    (repo / "dir" / "new.txt").write_text("new\n", encoding="utf-8")
    (repo / "added.txt").write_text("added\n", encoding="utf-8")
    git(repo, "add", "added.txt")

    status = RealGitOps().get_file_status(repo)

    assert status.modified == ["README.md"]
    assert status.untracked == ["dir/new.txt"]
    assert status.staged == ["added.txt"]
    assert status.all_paths == ["README.md", "added.txt", "dir/new.txt"]


def test_commit_path_leaves_other_changes_pending(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "a.txt").write_text("a\n", encoding="utf-8")
    (repo / "b.txt").write_text("b\n", encoding="utf-8")
    ops = RealGitOps()

    ops.stage_path(repo, "a.txt")
    assert ops.commit_path(repo, "a.txt", "Add a")

    assert git(repo, "log", "-1", "--format=%s").strip() == "Add a"
    assert ops.get_file_status(repo).all_paths == ["b.txt"]


def test_get_commits_reads_full_messages(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    commit_file(repo, "a.txt", "a\n", "Subject\n\nBody line\n\nKey: value")

    records = RealGitOps().get_commits(repo, "HEAD", limit=1)

    assert len(records) == 1
    assert records[0].message == "Subject\n\nBody line\n\nKey: value"
    assert records[0].sha == git(repo, "rev-parse", "HEAD").strip()
    assert records[0].committed_at > 0


def test_get_commits_grep_is_literal(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    commit_file(repo, "a.txt", "a\n", "Has a.b marker")
    commit_file(repo, "b.txt", "b\n", "Has axb marker")

    records = RealGitOps().get_commits(repo, "HEAD", grep="a.b")

    assert [r.message for r in records] == ["Has a.b marker"]


def test_patch_ids_match_for_identical_changes(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    git(repo, "branch", "other")
    commit_file(repo, "a.txt", "same\n", "On staging")
    git(repo, "checkout", "other")
    commit_file(repo, "a.txt", "same\n", "On other")
    ops = RealGitOps()

    staging_ids = ops.get_patch_ids(repo, STAGING, limit=1)
    other_ids = ops.get_patch_ids(repo, "other", limit=1)

    assert len(staging_ids) == 1
    assert list(staging_ids.values()) == list(other_ids.values())
    assert list(staging_ids) != list(other_ids)


def test_list_and_count_commits(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    git(repo, "branch", "base")
    commit_file(repo, "a.txt", "a\n", "First")
    commit_file(repo, "b.txt", "b\n", "Second")
    ops = RealGitOps()

    shas = ops.list_commits(repo, "base", STAGING)

    assert len(shas) == 2
    assert shas[-1] == git(repo, "rev-parse", "HEAD").strip()
    assert ops.count_commits(repo, "base", STAGING) == 2
    assert ops.is_ancestor(repo, "base", STAGING)
    assert not ops.is_ancestor(repo, STAGING, "base")


def test_discard_path_restores_tracked_and_deletes_new(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    (repo / "README.md").write_text("changed\n", encoding="utf-8")
    (repo / "new.txt").write_text("new\n", encoding="utf-8")
    ops = RealGitOps()

    ops.discard_path(repo, "README.md")
    ops.discard_path(repo, "new.txt")

    assert (repo / "README.md").read_text(encoding="utf-8") == "# Test Repository\n"
    assert not (repo / "new.txt").exists()
    assert not ops.has_uncommitted_changes(repo)


def test_apply_patch_reports_failure(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ops = RealGitOps()

    assert not ops.apply_patch(repo, "")
    assert not ops.apply_patch(repo, "not a patch\n")


def test_add_info_exclude_is_idempotent(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ops = RealGitOps()

    ops.add_info_exclude(repo / ".git", "/.worktrees/")
    ops.add_info_exclude(repo / ".git", "/.worktrees/")

    lines = (repo / ".git" / "info" / "exclude").read_text(encoding="utf-8").splitlines()
    assert lines.count("/.worktrees/") == 1


def test_branch_queries(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    ops = RealGitOps()

    assert ops.get_current_branch(repo) == STAGING
    assert ops.branch_exists(repo, "main")
    assert not ops.branch_exists(repo, "nope")
    assert ops.get_trunk_branch(repo, "origin") == "main"
    assert ops.get_upstream(repo, STAGING) is None
    assert not ops.remote_exists(repo, "origin")


def test_trunk_branch_follows_named_remote_head(tmp_path: Path) -> None:
    repo = init_staging_repo(tmp_path)
    git(repo, "branch", "develop")
    git(repo, "remote", "add", "upstream", str(repo))
    git(repo, "fetch", "upstream")
    git(repo, "symbolic-ref", "refs/remotes/upstream/HEAD", "refs/remotes/upstream/develop")
    ops = RealGitOps()

    assert ops.get_trunk_branch(repo, "upstream") == "develop"
    assert ops.get_trunk_branch(repo, "origin") == "main"
