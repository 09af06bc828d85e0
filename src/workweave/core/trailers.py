"""Commit-message conventions that record workspace ownership.

History is the only database: an assignment is a staging commit whose message
carries `Workweave-Assign: <path> -> <workspace>`, an apply is a cherry-pick
whose message carries `Workweave-Apply: <workspace>`. Reverts are recognised
by the `This reverts commit <sha>.` line git writes for `revert --no-edit`.
"""

import re
from dataclasses import dataclass

from workweave.core.gitops import CommitRecord

ASSIGN_TRAILER = "Workweave-Assign"
APPLY_TRAILER = "Workweave-Apply"
ARROW = " -> "
REVERT_MARKER = "This reverts commit"

_REVERT_RE = re.compile(r"^This reverts commit ([0-9a-f]{7,64})\.?\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Assignment:
    """A parsed assignment trailer."""

    sha: str
    path: str
    workspace: str
    committed_at: int


def format_assignment_message(path: str, workspace: str) -> str:
    return f"ww: assign {path} to {workspace}\n\n{ASSIGN_TRAILER}: {path}{ARROW}{workspace}\n"


def append_apply_trailer(message: str, workspace: str) -> str:
    """Add the apply trailer to a cherry-picked commit's message.

    Messages that already end in a trailer block (such as the `(cherry picked
    from ...)` line) get the new trailer appended to that block.
    """
    body = message.rstrip("\n")
    return f"{body}\n{APPLY_TRAILER}: {workspace}\n"


def _trailer_values(message: str, key: str) -> list[str]:
    prefix = f"{key}: "
    return [
        line[len(prefix) :].strip()
        for line in message.splitlines()
        if line.startswith(prefix)
    ]


def parse_assignment(record: CommitRecord) -> Assignment | None:
    """Return the assignment a commit records, or None for any other commit.

    The workspace is everything after the last arrow, since branch names
    cannot contain spaces but paths can.
    """
    values = _trailer_values(record.message, ASSIGN_TRAILER)
    if not values:
        return None

    value = values[-1]
    if ARROW not in value:
        return None

    path, workspace = value.rsplit(ARROW, 1)
    if not path or not workspace:
        return None

    return Assignment(
        sha=record.sha,
        path=path,
        workspace=workspace,
        committed_at=record.committed_at,
    )


def applied_workspace(record: CommitRecord) -> str | None:
    """Return the workspace an apply commit came from, or None."""
    values = _trailer_values(record.message, APPLY_TRAILER)
    if not values:
        return None
    return values[-1]


def reverted_shas(records: list[CommitRecord]) -> set[str]:
    """Collect every SHA referenced by a revert message in `records`."""
    shas: set[str] = set()
    for record in records:
        shas.update(_REVERT_RE.findall(record.message))
    return shas


def is_reverted(sha: str, reverted: set[str]) -> bool:
    """Check `sha` against possibly abbreviated revert references."""
    if sha in reverted:
        return True
    return any(sha.startswith(ref) for ref in reverted if len(ref) < len(sha))


def names_workspace(record: CommitRecord, workspace: str) -> bool:
    """Check whether a commit's trailers attribute it to `workspace`."""
    assignment = parse_assignment(record)
    if assignment is not None and assignment.workspace == workspace:
        return True
    return applied_workspace(record) == workspace
