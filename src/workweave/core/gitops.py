"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
codebase more testable and maintainable.

Architecture:
- GitOps: Abstract base class defining the interface
- RealGitOps: Production implementation using subprocess
- DryRunGitOps: Wrapper that prints mutating commands instead of running them
"""

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from workweave.cli.output import user_output
from workweave.core.subprocess import run_subprocess_with_context


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree."""

    path: Path
    branch: str | None
    is_root: bool = False


@dataclass(frozen=True)
class FileStatus:
    """Pending changes of a working tree versus its HEAD commit."""

    staged: list[str]
    modified: list[str]
    untracked: list[str]

    @property
    def all_paths(self) -> list[str]:
        """Every pending path, deduplicated and sorted."""
        return sorted(set(self.staged) | set(self.modified) | set(self.untracked))

    def status_code(self, path: str) -> str:
        """Short status marker for display: ?? untracked, M modified, A staged."""
        if path in self.untracked:
            return "??"
        if path in self.modified:
            return "M"
        if path in self.staged:
            return "A"
        return ""


@dataclass(frozen=True)
class CommitRecord:
    """A commit with its full message and committer timestamp (epoch seconds)."""

    sha: str
    committed_at: int
    message: str


# ============================================================================
# Abstract Interface
# ============================================================================


class GitOps(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    # Worktrees and branches

    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository, root first."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None when detached."""
        ...

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory shared by all worktrees."""
        ...

    @abstractmethod
    def get_trunk_branch(self, repo_root: Path, remote: str) -> str:
        """Get the trunk branch name for the repository.

        Detects trunk by checking the HEAD reference of `remote`. Falls back to
        checking for existence of common trunk branch names if detection fails.
        """
        ...

    @abstractmethod
    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        ...

    @abstractmethod
    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        """Check whether any ref (local, remote or SHA) resolves to a commit."""
        ...

    @abstractmethod
    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        """Get the commit SHA a ref points at, or None if it doesn't resolve."""
        ...

    @abstractmethod
    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        """Add a new git worktree.

        Args:
            repo_root: Path to the git repository root
            path: Path where the worktree should be created
            branch: Branch to check out in the new worktree
            ref: Start point when creating the branch (None defaults to HEAD)
            create_branch: True to create the branch, False to check out an existing one
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree."""
        ...

    @abstractmethod
    def prune_worktrees(self, repo_root: Path) -> None:
        """Prune stale worktree metadata."""
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch (-D when force, -d otherwise)."""
        ...

    @abstractmethod
    def recreate_branch(self, worktree_path: Path, branch: str, start_point: str) -> None:
        """Point `branch` at `start_point` and check it out inside a worktree.

        Uncommitted edits in the worktree are carried over; git refuses when
        they would be overwritten.
        """
        ...

    # Working tree state

    @abstractmethod
    def get_file_status(self, cwd: Path) -> FileStatus:
        """Get staged, modified and untracked paths relative to the worktree root."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a worktree has any staged, modified or untracked files."""
        ...

    @abstractmethod
    def stage_path(self, cwd: Path, path: str) -> None:
        """Stage exactly one path, including deletions."""
        ...

    @abstractmethod
    def commit_path(self, cwd: Path, path: str, message: str) -> bool:
        """Commit only `path`, ignoring anything else in the index.

        Returns:
            True if a commit was created, False if git refused (nothing to commit,
            hook failure, ...)
        """
        ...

    @abstractmethod
    def amend_message(self, cwd: Path, message: str) -> None:
        """Replace the message of the HEAD commit without touching its tree."""
        ...

    @abstractmethod
    def discard_path(self, cwd: Path, path: str) -> None:
        """Drop uncommitted changes to `path`: restore it from HEAD or delete it."""
        ...

    # Patches and history

    @abstractmethod
    def show_patch(self, cwd: Path, sha: str, path: str | None = None) -> str:
        """Get the binary-safe patch a commit introduces, optionally for one path."""
        ...

    @abstractmethod
    def apply_patch(self, cwd: Path, patch: str) -> bool:
        """Apply a patch to the working tree only (uncommitted).

        Returns:
            True if the patch applied cleanly, False otherwise (tree untouched)
        """
        ...

    @abstractmethod
    def get_commits(
        self,
        repo_root: Path,
        revision: str,
        *,
        grep: str | None = None,
        limit: int | None = None,
    ) -> list[CommitRecord]:
        """List commits of a revision or range, newest first.

        Args:
            repo_root: Path to the git repository root
            revision: Branch, ref or `a..b` range
            grep: Fixed string the commit message must contain
            limit: Maximum number of commits to return
        """
        ...

    @abstractmethod
    def list_commits(self, repo_root: Path, base: str, head: str) -> list[str]:
        """List non-merge commits reachable from `head` but not `base`, oldest first."""
        ...

    @abstractmethod
    def count_commits(self, repo_root: Path, base: str, head: str) -> int:
        """Count commits reachable from `head` but not `base`."""
        ...

    @abstractmethod
    def get_patch_ids(
        self, repo_root: Path, revision: str, *, limit: int | None = None
    ) -> dict[str, str]:
        """Map commit SHA to its stable patch id for a revision or range.

        Merge commits carry no patch and are absent from the mapping.
        """
        ...

    @abstractmethod
    def is_ancestor(self, repo_root: Path, ancestor: str, descendant: str) -> bool:
        """Check whether `ancestor` is reachable from `descendant`."""
        ...

    @abstractmethod
    def revert_commit(self, cwd: Path, sha: str) -> bool:
        """Revert a commit with git's default message.

        Returns:
            True on success, False on conflict (revert left in progress)
        """
        ...

    @abstractmethod
    def cherry_pick(self, cwd: Path, sha: str) -> bool:
        """Cherry-pick a commit, recording its origin (-x).

        Returns:
            True on success, False on conflict (cherry-pick left in progress)
        """
        ...

    @abstractmethod
    def merge_branch(self, cwd: Path, branch: str) -> bool:
        """Merge a branch into the checked-out branch.

        Returns:
            True on success, False on conflict (merge left in progress)
        """
        ...

    # Remotes

    @abstractmethod
    def remote_exists(self, repo_root: Path, remote: str) -> bool:
        """Check whether a remote is configured."""
        ...

    @abstractmethod
    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Fetch all refs of a remote."""
        ...

    @abstractmethod
    def fast_forward_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Fast-forward a local branch that is not checked out from its remote copy."""
        ...

    @abstractmethod
    def remote_branch_exists(self, repo_root: Path, remote: str, branch: str) -> bool:
        """Ask the remote whether it has a branch of this name."""
        ...

    @abstractmethod
    def delete_remote_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Delete a branch on the remote."""
        ...

    @abstractmethod
    def get_upstream(self, cwd: Path, branch: str) -> str | None:
        """Get the upstream tracking ref of a branch (e.g. 'origin/feature')."""
        ...

    @abstractmethod
    def get_ahead_behind(self, cwd: Path, branch: str, upstream: str) -> tuple[int, int]:
        """Get number of commits ahead and behind an upstream ref.

        Returns:
            Tuple of (ahead, behind) counts
        """
        ...

    # Filesystem

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production (RealGitOps), this delegates to Path.exists(). In tests
        (FakeGitOps), this checks an in-memory set of existing paths to avoid
        filesystem I/O.
        """
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    @abstractmethod
    def add_info_exclude(self, git_common_dir: Path, pattern: str) -> None:
        """Append a pattern to `info/exclude` unless it is already listed."""
        ...


# ============================================================================
# Production Implementation
# ============================================================================


def _git_ok(cmd: list[str], cwd: Path, input_text: str | None = None) -> bool:
    result = subprocess.run(
        cmd,
        cwd=cwd,
        input=input_text,
        capture_output=True,
        text=True,
        check=False,
    )
    return result.returncode == 0


class RealGitOps(GitOps):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """List all worktrees in the repository."""
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=repo_root,
        )

        worktrees: list[WorktreeInfo] = []
        current_path: Path | None = None
        current_branch: str | None = None

        for line in result.stdout.splitlines():
            line = line.strip()
            if line.startswith("worktree "):
                current_path = Path(line.split(maxsplit=1)[1])
                current_branch = None
            elif line.startswith("branch "):
                if current_path is None:
                    continue
                branch_ref = line.split(maxsplit=1)[1]
                current_branch = branch_ref.removeprefix("refs/heads/")
            elif line == "" and current_path is not None:
                worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))
                current_path = None
                current_branch = None

        if current_path is not None:
            worktrees.append(WorktreeInfo(path=current_path, branch=current_branch))

        # git lists the main worktree first
        if worktrees:
            first = worktrees[0]
            worktrees[0] = WorktreeInfo(path=first.path, branch=first.branch, is_root=True)

        return worktrees

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory."""
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir

        return git_dir.resolve()

    def get_trunk_branch(self, repo_root: Path, remote: str) -> str:
        """Get the trunk branch name for the repository."""
        prefix = f"refs/remotes/{remote}/"
        result = subprocess.run(
            ["git", "symbolic-ref", f"{prefix}HEAD"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            ref = result.stdout.strip()
            if ref.startswith(prefix):
                return ref.removeprefix(prefix)

        for candidate in ["main", "master"]:
            if self.branch_exists(repo_root, candidate):
                return candidate

        return "main"

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        return _git_ok(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], repo_root
        )

    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        """Check whether a ref resolves to a commit."""
        return _git_ok(["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], repo_root)

    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        """Get the commit SHA at the head of a ref."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        return result.stdout.strip()

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        """Add a new git worktree."""
        if create_branch:
            base_ref = ref or "HEAD"
            cmd = ["git", "worktree", "add", "-b", branch, str(path), base_ref]
            context = f"add worktree with new branch '{branch}' at {path}"
        else:
            cmd = ["git", "worktree", "add", str(path), branch]
            context = f"add worktree for branch '{branch}' at {path}"

        run_subprocess_with_context(cmd, operation_context=context, cwd=repo_root)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree."""
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_subprocess_with_context(
            cmd,
            operation_context=f"remove worktree at {path}",
            cwd=repo_root,
        )

    def prune_worktrees(self, repo_root: Path) -> None:
        """Prune stale worktree metadata."""
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context="prune worktree metadata",
            cwd=repo_root,
        )

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch."""
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch],
            operation_context=f"delete branch '{branch}'",
            cwd=cwd,
        )

    def recreate_branch(self, worktree_path: Path, branch: str, start_point: str) -> None:
        """Reset a worktree's branch to a new start point, keeping local edits."""
        run_subprocess_with_context(
            ["git", "checkout", "-B", branch, start_point],
            operation_context=f"recreate branch '{branch}' from '{start_point}'",
            cwd=worktree_path,
        )

    def get_file_status(self, cwd: Path) -> FileStatus:
        """Get lists of staged, modified, and untracked files."""
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain=v1", "-z", "--untracked-files=all"],
            operation_context="get file status",
            cwd=cwd,
        )

        staged: list[str] = []
        modified: list[str] = []
        untracked: list[str] = []

        entries = result.stdout.split("\0")
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue
            index_status = entry[0]
            worktree_status = entry[1]
            path = entry[3:]

            if index_status == "?" and worktree_status == "?":
                untracked.append(path)
                continue

            if index_status in ("R", "C"):
                # Rename/copy records carry the source path as the next entry
                if i < len(entries) and entries[i]:
                    if index_status == "R":
                        staged.append(entries[i])
                    i += 1

            if index_status not in (" ", "?"):
                staged.append(path)
            if worktree_status not in (" ", "?"):
                modified.append(path)

        return FileStatus(staged=staged, modified=modified, untracked=untracked)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a worktree has uncommitted changes."""
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return False
        return bool(result.stdout.strip())

    def _is_tracked(self, cwd: Path, path: str) -> bool:
        """Check whether a path exists in HEAD."""
        return _git_ok(["git", "cat-file", "-e", f"HEAD:{path}"], cwd)

    def stage_path(self, cwd: Path, path: str) -> None:
        """Stage exactly one path."""
        run_subprocess_with_context(
            ["git", "add", "-A", "--", path],
            operation_context=f"stage '{path}'",
            cwd=cwd,
        )

    def commit_path(self, cwd: Path, path: str, message: str) -> bool:
        """Commit only the given path."""
        return _git_ok(["git", "commit", "--only", "-m", message, "--", path], cwd)

    def amend_message(self, cwd: Path, message: str) -> None:
        """Replace the message of HEAD."""
        run_subprocess_with_context(
            ["git", "commit", "--amend", "--only", "-m", message],
            operation_context="amend commit message",
            cwd=cwd,
        )

    def discard_path(self, cwd: Path, path: str) -> None:
        """Restore a path from HEAD, or delete it when HEAD doesn't have it."""
        if self._is_tracked(cwd, path):
            run_subprocess_with_context(
                ["git", "checkout", "HEAD", "--", path],
                operation_context=f"restore '{path}' from HEAD",
                cwd=cwd,
            )
            return

        run_subprocess_with_context(
            ["git", "rm", "--cached", "--quiet", "--ignore-unmatch", "--", path],
            operation_context=f"unstage '{path}'",
            cwd=cwd,
        )
        target = cwd / path
        if target.is_file() or target.is_symlink():
            target.unlink()

    def show_patch(self, cwd: Path, sha: str, path: str | None = None) -> str:
        """Get the patch a commit introduces."""
        cmd = ["git", "show", "--format=", "--binary", "--no-color", "--no-ext-diff", sha]
        if path is not None:
            cmd.extend(["--", path])
        result = run_subprocess_with_context(
            cmd,
            operation_context=f"extract patch from {sha[:8]}",
            cwd=cwd,
        )
        return result.stdout

    def apply_patch(self, cwd: Path, patch: str) -> bool:
        """Apply a patch to the working tree."""
        if not patch.strip():
            return False
        return _git_ok(
            ["git", "apply", "--binary", "--whitespace=nowarn", "-"],
            cwd,
            input_text=patch,
        )

    def get_commits(
        self,
        repo_root: Path,
        revision: str,
        *,
        grep: str | None = None,
        limit: int | None = None,
    ) -> list[CommitRecord]:
        """List commits with full messages, newest first."""
        cmd = ["git", "log", "--format=%H%x1f%ct%x1f%B%x1e"]
        if grep is not None:
            cmd.extend(["--fixed-strings", f"--grep={grep}"])
        if limit is not None:
            cmd.append(f"--max-count={limit}")
        cmd.extend([revision, "--"])

        result = run_subprocess_with_context(
            cmd,
            operation_context=f"read history of '{revision}'",
            cwd=repo_root,
        )

        records: list[CommitRecord] = []
        for chunk in result.stdout.split("\x1e"):
            chunk = chunk.lstrip("\n")
            if not chunk:
                continue
            parts = chunk.split("\x1f", 2)
            if len(parts) != 3:
                continue
            sha, timestamp, message = parts
            records.append(
                CommitRecord(sha=sha, committed_at=int(timestamp), message=message.strip())
            )
        return records

    def list_commits(self, repo_root: Path, base: str, head: str) -> list[str]:
        """List commits in head but not base, oldest first."""
        result = run_subprocess_with_context(
            ["git", "rev-list", "--reverse", "--no-merges", f"{base}..{head}"],
            operation_context=f"list commits in '{head}' not in '{base}'",
            cwd=repo_root,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def count_commits(self, repo_root: Path, base: str, head: str) -> int:
        """Count commits in head but not base."""
        result = run_subprocess_with_context(
            ["git", "rev-list", "--count", f"{base}..{head}"],
            operation_context=f"count commits in '{head}' not in '{base}'",
            cwd=repo_root,
        )
        return int(result.stdout.strip() or "0")

    def get_patch_ids(
        self, repo_root: Path, revision: str, *, limit: int | None = None
    ) -> dict[str, str]:
        """Compute stable patch ids by piping `git log -p` through `git patch-id`."""
        cmd = ["git", "log", "-p", "--no-color", "--no-ext-diff", "--format=medium"]
        if limit is not None:
            cmd.append(f"--max-count={limit}")
        cmd.extend([revision, "--"])

        log_result = run_subprocess_with_context(
            cmd,
            operation_context=f"read patches of '{revision}'",
            cwd=repo_root,
        )
        if not log_result.stdout.strip():
            return {}

        patch_id_result = run_subprocess_with_context(
            ["git", "patch-id", "--stable"],
            operation_context=f"compute patch ids of '{revision}'",
            cwd=repo_root,
            input_text=log_result.stdout,
        )

        patch_ids: dict[str, str] = {}
        for line in patch_id_result.stdout.splitlines():
            parts = line.split()
            if len(parts) == 2:
                patch_id, sha = parts
                patch_ids[sha] = patch_id
        return patch_ids

    def is_ancestor(self, repo_root: Path, ancestor: str, descendant: str) -> bool:
        """Check reachability with merge-base --is-ancestor."""
        return _git_ok(["git", "merge-base", "--is-ancestor", ancestor, descendant], repo_root)

    def revert_commit(self, cwd: Path, sha: str) -> bool:
        """Revert a commit."""
        return _git_ok(["git", "revert", "--no-edit", sha], cwd)

    def cherry_pick(self, cwd: Path, sha: str) -> bool:
        """Cherry-pick a commit."""
        return _git_ok(["git", "cherry-pick", "-x", sha], cwd)

    def merge_branch(self, cwd: Path, branch: str) -> bool:
        """Merge a branch."""
        return _git_ok(["git", "merge", "--no-edit", branch], cwd)

    def remote_exists(self, repo_root: Path, remote: str) -> bool:
        """Check whether a remote is configured."""
        return _git_ok(["git", "remote", "get-url", remote], repo_root)

    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Fetch a remote."""
        run_subprocess_with_context(
            ["git", "fetch", remote],
            operation_context=f"fetch '{remote}'",
            cwd=repo_root,
        )

    def fast_forward_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Fast-forward a local branch from the remote."""
        run_subprocess_with_context(
            ["git", "fetch", remote, f"{branch}:{branch}"],
            operation_context=f"update local '{branch}' from '{remote}/{branch}'",
            cwd=repo_root,
        )

    def remote_branch_exists(self, repo_root: Path, remote: str, branch: str) -> bool:
        """Check whether the remote has the branch."""
        return _git_ok(["git", "ls-remote", "--exit-code", "--heads", remote, branch], repo_root)

    def delete_remote_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Delete a remote branch."""
        run_subprocess_with_context(
            ["git", "push", remote, "--delete", branch],
            operation_context=f"delete remote branch '{remote}/{branch}'",
            cwd=repo_root,
        )

    def get_upstream(self, cwd: Path, branch: str) -> str | None:
        """Get the upstream tracking ref of a branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_ahead_behind(self, cwd: Path, branch: str, upstream: str) -> tuple[int, int]:
        """Get number of commits ahead and behind the upstream ref."""
        result = run_subprocess_with_context(
            ["git", "rev-list", "--left-right", "--count", f"{upstream}...{branch}"],
            operation_context=f"get ahead/behind counts for branch '{branch}'",
            cwd=cwd,
        )

        parts = result.stdout.strip().split()
        if len(parts) == 2:
            behind = int(parts[0])
            ahead = int(parts[1])
            return ahead, behind

        return 0, 0

    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def add_info_exclude(self, git_common_dir: Path, pattern: str) -> None:
        """Append a pattern to info/exclude."""
        exclude_path = git_common_dir / "info" / "exclude"
        existing = ""
        if exclude_path.exists():
            existing = exclude_path.read_text(encoding="utf-8")
            if pattern in existing.splitlines():
                return

        exclude_path.parent.mkdir(parents=True, exist_ok=True)
        if existing and not existing.endswith("\n"):
            existing += "\n"
        exclude_path.write_text(f"{existing}{pattern}\n", encoding="utf-8")


# ============================================================================
# Dry-Run Wrapper
# ============================================================================


class DryRunGitOps(GitOps):
    """Wrapper that prints mutating operations instead of executing them.

    Read-only operations are delegated to the wrapped implementation. Mutating
    operations print a `[DRY RUN]` line and report success.

    Usage:
        real_ops = RealGitOps()
        dry_run_ops = DryRunGitOps(real_ops)

        # Prints message instead of deleting
        dry_run_ops.remove_worktree(repo_root, path, force=False)
    """

    def __init__(self, wrapped: GitOps) -> None:
        """Create a dry-run wrapper around a GitOps implementation.

        Args:
            wrapped: The GitOps implementation to wrap (usually RealGitOps or FakeGitOps)
        """
        self._wrapped = wrapped

    # Read-only operations: delegate to wrapped implementation

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        return self._wrapped.list_worktrees(repo_root)

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._wrapped.get_current_branch(cwd)

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        return self._wrapped.get_git_common_dir(cwd)

    def get_trunk_branch(self, repo_root: Path, remote: str) -> str:
        return self._wrapped.get_trunk_branch(repo_root, remote)

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._wrapped.branch_exists(repo_root, branch)

    def ref_exists(self, repo_root: Path, ref: str) -> bool:
        return self._wrapped.ref_exists(repo_root, ref)

    def get_branch_head(self, repo_root: Path, ref: str) -> str | None:
        return self._wrapped.get_branch_head(repo_root, ref)

    def get_file_status(self, cwd: Path) -> FileStatus:
        return self._wrapped.get_file_status(cwd)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._wrapped.has_uncommitted_changes(cwd)

    def show_patch(self, cwd: Path, sha: str, path: str | None = None) -> str:
        return self._wrapped.show_patch(cwd, sha, path)

    def get_commits(
        self,
        repo_root: Path,
        revision: str,
        *,
        grep: str | None = None,
        limit: int | None = None,
    ) -> list[CommitRecord]:
        return self._wrapped.get_commits(repo_root, revision, grep=grep, limit=limit)

    def list_commits(self, repo_root: Path, base: str, head: str) -> list[str]:
        return self._wrapped.list_commits(repo_root, base, head)

    def count_commits(self, repo_root: Path, base: str, head: str) -> int:
        return self._wrapped.count_commits(repo_root, base, head)

    def get_patch_ids(
        self, repo_root: Path, revision: str, *, limit: int | None = None
    ) -> dict[str, str]:
        return self._wrapped.get_patch_ids(repo_root, revision, limit=limit)

    def is_ancestor(self, repo_root: Path, ancestor: str, descendant: str) -> bool:
        return self._wrapped.is_ancestor(repo_root, ancestor, descendant)

    def remote_exists(self, repo_root: Path, remote: str) -> bool:
        return self._wrapped.remote_exists(repo_root, remote)

    def remote_branch_exists(self, repo_root: Path, remote: str, branch: str) -> bool:
        return self._wrapped.remote_branch_exists(repo_root, remote, branch)

    def get_upstream(self, cwd: Path, branch: str) -> str | None:
        return self._wrapped.get_upstream(cwd, branch)

    def get_ahead_behind(self, cwd: Path, branch: str, upstream: str) -> tuple[int, int]:
        return self._wrapped.get_ahead_behind(cwd, branch, upstream)

    def path_exists(self, path: Path) -> bool:
        return self._wrapped.path_exists(path)

    def is_dir(self, path: Path) -> bool:
        return self._wrapped.is_dir(path)

    # Mutating operations: print instead of executing

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        """Print dry-run message instead of adding worktree."""
        if create_branch:
            base_ref = ref or "HEAD"
            user_output(f"[DRY RUN] Would run: git worktree add -b {branch} {path} {base_ref}")
        else:
            user_output(f"[DRY RUN] Would run: git worktree add {path} {branch}")

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Print dry-run message instead of removing worktree."""
        force_flag = "--force " if force else ""
        user_output(f"[DRY RUN] Would run: git worktree remove {force_flag}{path}")

    def prune_worktrees(self, repo_root: Path) -> None:
        """Print dry-run message instead of pruning worktrees."""
        user_output("[DRY RUN] Would run: git worktree prune")

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Print dry-run message instead of deleting branch."""
        flag = "-D" if force else "-d"
        user_output(f"[DRY RUN] Would run: git branch {flag} {branch}")

    def recreate_branch(self, worktree_path: Path, branch: str, start_point: str) -> None:
        """Print dry-run message instead of recreating branch."""
        user_output(f"[DRY RUN] Would run: git checkout -B {branch} {start_point}")

    def stage_path(self, cwd: Path, path: str) -> None:
        """Print dry-run message instead of staging."""
        user_output(f"[DRY RUN] Would run: git add -A -- {path}")

    def commit_path(self, cwd: Path, path: str, message: str) -> bool:
        """Print dry-run message instead of committing."""
        user_output(f"[DRY RUN] Would run: git commit --only -- {path}")
        return True

    def amend_message(self, cwd: Path, message: str) -> None:
        """Print dry-run message instead of amending."""
        user_output("[DRY RUN] Would run: git commit --amend --only")

    def discard_path(self, cwd: Path, path: str) -> None:
        """Print dry-run message instead of discarding changes."""
        user_output(f"[DRY RUN] Would discard changes to {path} in {cwd}")

    def apply_patch(self, cwd: Path, patch: str) -> bool:
        """Print dry-run message instead of applying a patch."""
        user_output(f"[DRY RUN] Would run: git apply (in {cwd})")
        return True

    def revert_commit(self, cwd: Path, sha: str) -> bool:
        """Print dry-run message instead of reverting."""
        user_output(f"[DRY RUN] Would run: git revert --no-edit {sha}")
        return True

    def cherry_pick(self, cwd: Path, sha: str) -> bool:
        """Print dry-run message instead of cherry-picking."""
        user_output(f"[DRY RUN] Would run: git cherry-pick -x {sha}")
        return True

    def merge_branch(self, cwd: Path, branch: str) -> bool:
        """Print dry-run message instead of merging."""
        user_output(f"[DRY RUN] Would run: git merge --no-edit {branch}")
        return True

    def fetch_remote(self, repo_root: Path, remote: str) -> None:
        """Print dry-run message instead of fetching."""
        user_output(f"[DRY RUN] Would run: git fetch {remote}")

    def fast_forward_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Print dry-run message instead of fast-forwarding."""
        user_output(f"[DRY RUN] Would run: git fetch {remote} {branch}:{branch}")

    def delete_remote_branch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Print dry-run message instead of deleting the remote branch."""
        user_output(f"[DRY RUN] Would run: git push {remote} --delete {branch}")

    def add_info_exclude(self, git_common_dir: Path, pattern: str) -> None:
        """Print dry-run message instead of editing info/exclude."""
        user_output(f"[DRY RUN] Would add '{pattern}' to {git_common_dir / 'info' / 'exclude'}")
