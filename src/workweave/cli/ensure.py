"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from workweave.cli.output import error_output
from workweave.core.context import WorkweaveContext
from workweave.core.errors import ConflictError, WorkweaveError
from workweave.core.repo_discovery import NoRepoSentinel, RepoContext


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            error_output(error_message)
            raise SystemExit(1)

    @staticmethod
    def in_repo(ctx: WorkweaveContext) -> RepoContext:
        """Ensure the command runs inside a git repository."""
        if isinstance(ctx.repo, NoRepoSentinel):
            error_output(ctx.repo.message)
            raise SystemExit(1)
        return ctx.repo

    @staticmethod
    @contextmanager
    def operation() -> Iterator[None]:
        """Report failures of the wrapped engine call and exit non-zero.

        WorkweaveError carries its own hint; git failures surface as
        RuntimeError with the command and stderr.

        Raises:
            SystemExit: On any expected failure (with exit code 1)
        """
        try:
            yield
        except ConflictError as e:
            error_output(f"{e.message} ({e.operation} in progress)", e.recovery_hint)
            raise SystemExit(1) from e
        except WorkweaveError as e:
            error_output(e.message, e.recovery_hint)
            raise SystemExit(1) from e
        except RuntimeError as e:
            error_output(str(e))
            raise SystemExit(1) from e
