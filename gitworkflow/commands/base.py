"""Base command class for git operations.

This module provides the abstract base class for all mutating git-workflow
commands, implementing the Command Pattern with observer support.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from rich.console import Console

from ..observers import GitOperationObserver
from ..repository import GitRepository


class GitCommand(ABC):
    """Abstract base class for git commands.

    Concrete commands implement execute() and undo(). Preconditions that
    make a command impossible raise ``WorkflowError`` subclasses; execute()
    returns True once the operation went through.

    Attributes:
        repo (GitRepository): The repository to operate on
        console (Console): Rich console for output
        observers (List[GitOperationObserver]): List of observers to notify
    """

    operation = "git"

    def __init__(self, repo: GitRepository, console: Optional[Console] = None):
        """Initialize the command.

        Args:
            repo: The repository to operate on
            console: Optional Rich console for output
        """
        self.repo = repo
        self.console = console or Console()
        self.observers: List[GitOperationObserver] = []

    def add_observer(self, observer: GitOperationObserver) -> None:
        """Add an observer to be notified of command execution.

        Args:
            observer: The observer to add
        """
        self.observers.append(observer)

    def remove_observer(self, observer: GitOperationObserver) -> None:
        """Remove an observer from the notification list.

        Args:
            observer: The observer to remove
        """
        self.observers.remove(observer)

    def notify_started(self, details: str) -> None:
        for observer in self.observers:
            observer.on_operation_started(self.operation, details)

    def notify_completed(self, details: str, success: bool) -> None:
        for observer in self.observers:
            observer.on_operation_completed(self.operation, details, success)

    @abstractmethod
    def execute(self) -> bool:
        """Execute the git command.

        Returns:
            bool: True if the command was executed successfully, False otherwise
        """
        pass

    @abstractmethod
    def undo(self) -> bool:
        """Undo the git command.

        Returns:
            bool: True if the command was undone successfully, False otherwise
        """
        pass
