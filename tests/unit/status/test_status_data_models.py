"""Unit tests for status data model helpers."""

from pathlib import Path

from workweave.status.models.status_data import StagingStatus, StatusReport, WorkspaceStatus


def test_missing_dir_factory() -> None:
    """Test WorkspaceStatus.missing_dir() factory method."""
    # Arrange
    path = Path("/repo/.worktrees/gone")

    # Act
    status = WorkspaceStatus.missing_dir("gone", path)

    # Assert
    assert status.missing is True
    assert status.branch == "gone"
    assert status.applied is False
    assert status.pushed is False


def test_report_lookup_by_name() -> None:
    staging = StagingStatus(
        root=Path("/repo"),
        current_branch="ww-working",
        staging_branch="ww-working",
        pending=[],
        pending_codes={},
        integration_ref=None,
        behind_integration=0,
    )
    gone = WorkspaceStatus.missing_dir("gone", Path("/repo/.worktrees/gone"))

    report = StatusReport(staging=staging, workspaces=[gone])

    assert report.staging.on_staging
    assert report.get("gone") is gone
    assert report.get("other") is None
