"""Data models for status information."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StagingStatus:
    """State of the repository root where staging is checked out."""

    root: Path
    current_branch: str | None
    staging_branch: str
    pending: list[str]
    pending_codes: dict[str, str]
    integration_ref: str | None
    behind_integration: int

    @property
    def on_staging(self) -> bool:
        return self.current_branch == self.staging_branch


@dataclass(frozen=True)
class WorkspaceStatus:
    """Reconciled status of one workspace.

    ahead/behind are None when the branch has no upstream (not pushed).
    """

    name: str
    path: Path
    branch: str
    missing: bool
    unmerged: int
    not_applied: int
    applied: bool
    applied_by: str
    ahead: int | None
    behind: int | None
    merged_upstream: bool
    uncommitted: int

    @property
    def pushed(self) -> bool:
        return self.ahead is not None

    @staticmethod
    def missing_dir(name: str, path: Path) -> "WorkspaceStatus":
        """Status of a registered workspace whose directory is gone."""
        return WorkspaceStatus(
            name=name,
            path=path,
            branch=name,
            missing=True,
            unmerged=0,
            not_applied=0,
            applied=False,
            applied_by="",
            ahead=None,
            behind=None,
            merged_upstream=False,
            uncommitted=0,
        )


@dataclass(frozen=True)
class StatusReport:
    """Complete status snapshot, computed fresh on every call."""

    staging: StagingStatus
    workspaces: list[WorkspaceStatus]

    def get(self, name: str) -> WorkspaceStatus | None:
        for workspace in self.workspaces:
            if workspace.name == name:
                return workspace
        return None
