"""Tests for the commit-message conventions that record ownership."""

from workweave.core.gitops import CommitRecord
from workweave.core.trailers import (
    append_apply_trailer,
    applied_workspace,
    format_assignment_message,
    is_reverted,
    names_workspace,
    parse_assignment,
    reverted_shas,
)


def _record(message: str, sha: str = "a" * 40, committed_at: int = 100) -> CommitRecord:
    return CommitRecord(sha=sha, committed_at=committed_at, message=message)


def test_assignment_message_parses_back() -> None:
    message = format_assignment_message("src/app.py", "feature-auth")

    assignment = parse_assignment(_record(message))

    assert assignment is not None
    assert assignment.path == "src/app.py"
    assert assignment.workspace == "feature-auth"
    assert assignment.sha == "a" * 40
    assert message.splitlines()[0] == "ww: assign src/app.py to feature-auth"


def test_path_containing_arrow_splits_on_last_arrow() -> None:
    message = format_assignment_message("docs/a -> b.md", "feat")

    assignment = parse_assignment(_record(message))

    assert assignment is not None
    assert assignment.path == "docs/a -> b.md"
    assert assignment.workspace == "feat"


def test_ordinary_commit_is_not_an_assignment() -> None:
    # Free text mentioning an arrow must not be mistaken for the trailer
    record = _record("Refactor a.py -> b.py\n\nMoved code around.")

    assert parse_assignment(record) is None


def test_revert_of_assignment_is_not_an_assignment() -> None:
    record = _record(f'Revert "ww: assign a.txt to W"\n\nThis reverts commit {"b" * 40}.')

    assert parse_assignment(record) is None


def test_reverted_shas_collects_full_and_abbreviated_references() -> None:
    records = [
        _record(f'Revert "x"\n\nThis reverts commit {"c" * 40}.'),
        _record('Revert "y"\n\nThis reverts commit 1234567.'),
        _record("Unrelated commit"),
    ]

    reverted = reverted_shas(records)

    assert reverted == {"c" * 40, "1234567"}
    assert is_reverted("c" * 40, reverted)
    assert is_reverted("1234567" + "0" * 33, reverted)
    assert not is_reverted("d" * 40, reverted)


def test_apply_trailer_is_appended_to_cherry_pick_message() -> None:
    original = "Edit a.txt\n\n(cherry picked from commit " + "e" * 40 + ")\n"

    message = append_apply_trailer(original, "feat")

    assert message.endswith(f"(cherry picked from commit {'e' * 40})\nWorkweave-Apply: feat\n")
    assert applied_workspace(_record(message)) == "feat"
    assert applied_workspace(_record(original)) is None


def test_names_workspace_matches_either_trailer_exactly() -> None:
    assign = _record(format_assignment_message("a.txt", "feat"))
    applied = _record(append_apply_trailer("Edit", "feat"))

    assert names_workspace(assign, "feat")
    assert names_workspace(applied, "feat")
    assert not names_workspace(assign, "feat-2")
    assert not names_workspace(applied, "fea")
