"""Mutating git-workflow commands using the Command Pattern.

Each command wraps one workflow step, reports progress on a rich console,
notifies observers and can be undone:

    ```python
    from gitworkflow.commands import SyncCommand
    from gitworkflow.observers import FileLogObserver
    from gitworkflow.repository import GitRepository

    command = SyncCommand(GitRepository("."), abort_on_conflict=True)
    command.add_observer(FileLogObserver("git.log"))
    command.execute()
    ```
"""

from .base import GitCommand
from .branch import CreateBranchCommand
from .rebase import RebaseCommand, SyncCommand

__all__ = [
    "GitCommand",
    "CreateBranchCommand",
    "RebaseCommand",
    "SyncCommand",
]
