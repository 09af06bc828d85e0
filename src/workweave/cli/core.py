"""Helpers shared by CLI commands: argument resolution and interactive picks."""

import os
from pathlib import Path

from workweave.cli.ensure import Ensure
from workweave.core.context import WorkweaveContext
from workweave.core.repo_discovery import RepoContext
from workweave.core.workspaces import list_workspaces


def repo_relative(ctx: WorkweaveContext, repo: RepoContext, raw: str) -> str:
    """Turn a path typed relative to the cwd into a repository-relative path."""
    absolute = Path(os.path.normpath(ctx.cwd.resolve() / raw))
    Ensure.invariant(
        absolute.is_relative_to(repo.root),
        f"'{raw}' is outside the repository at {repo.root}",
    )
    relative = absolute.relative_to(repo.root)
    return relative.as_posix() if relative.parts else "."


def workspace_or_pick(ctx: WorkweaveContext, name: str | None, prompt: str) -> str:
    """Return `name`, or ask the user to pick an existing workspace."""
    if name is not None:
        return name

    with Ensure.operation():
        names = [ws.name for ws in list_workspaces(ctx)]
    Ensure.invariant(bool(names), "No workspaces exist yet")

    picked = ctx.picker.pick(prompt, names, multiple=False)
    Ensure.invariant(bool(picked), "No workspace selected")
    return picked[0]
