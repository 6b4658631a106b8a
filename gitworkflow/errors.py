"""Errors raised by git-workflow commands.

Commands and checks raise these; only the CLI turns them into output and
exit codes.
"""
from typing import Optional, Sequence

REBASE_CONFLICT_HINTS = (
    "To resolve conflicts:",
    "  1. Fix conflicts in the files shown above",
    "  2. Stage resolved files: git add <file>",
    "  3. Continue rebase: git rebase --continue",
    "To abort: git rebase --abort",
)

UNCOMMITTED_CHANGES_HINTS = (
    "Stash: git stash",
    'Or commit: git commit -am "your message"',
)


class WorkflowError(Exception):
    """Base class for errors that stop a git-workflow command."""

    exit_code = 1

    def __init__(self, message: str, hints: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.message = message
        self.hints = tuple(hints or ())


class NotARepositoryError(WorkflowError):
    def __init__(self, path: Optional[str] = None):
        message = "Not in a Git repository"
        if path:
            message += f" ({path})"
        super().__init__(message)


class DetachedHeadError(WorkflowError):
    def __init__(self):
        super().__init__("Could not determine current branch")


class InvalidBranchNameError(WorkflowError):
    pass


class BranchExistsError(WorkflowError):
    def __init__(self, name: str):
        super().__init__(f'Branch "{name}" already exists')
        self.name = name


class UncommittedChangesError(WorkflowError):
    def __init__(self):
        super().__init__(
            "You have uncommitted changes. Commit or stash them first.",
            hints=UNCOMMITTED_CHANGES_HINTS,
        )


class RemoteBranchNotFoundError(WorkflowError):
    def __init__(self, ref: str):
        super().__init__(f"Remote branch {ref} not found")
        self.ref = ref


class GitOperationError(WorkflowError):
    """A git invocation failed for a reason other than a rebase conflict."""

    def __init__(self, message: str, status: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.status = status
        self.stderr = stderr


class RebaseConflictError(WorkflowError):
    def __init__(self, branch: str, onto: str, aborted: bool = False):
        if aborted:
            message = f"Rebase of {branch} onto {onto} hit conflicts and was aborted"
            hints = ()
        else:
            message = "Rebase encountered conflicts."
            hints = REBASE_CONFLICT_HINTS
        super().__init__(message, hints=hints)
        self.branch = branch
        self.onto = onto
        self.aborted = aborted
