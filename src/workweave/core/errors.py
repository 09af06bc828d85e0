"""Failure contracts for workweave operations.

Operations return result dataclasses on success (including partial batch
success) and raise WorkweaveError subclasses on expected failures. Unexpected
git failures propagate as RuntimeError from run_subprocess_with_context.
"""


class WorkweaveError(Exception):
    """Expected failure of a workweave operation.

    Callers catch WorkweaveError and handle it per their interface; the CLI
    prints the message and hint and exits non-zero.
    """

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.recovery_hint = recovery_hint


class PreconditionError(WorkweaveError):
    """Missing workspace or file, wrong active branch, or dirty tree.

    Raised before any repository mutation, so there is never a partial effect.
    """


class ConflictError(WorkweaveError):
    """A patch, cherry-pick, revert or merge stopped on a conflict.

    The repository is left in git's interrupted state. Nothing is aborted
    automatically; the user resolves and resumes with the usual git flow.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        completed: int = 0,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message, recovery_hint=recovery_hint)
        self.operation = operation
        self.completed = completed
