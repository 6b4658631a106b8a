"""Observer pattern for git operations.

Observers are how git-workflow logs: commands hold explicit observer
instances and notify them, there is no module-level logger.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @classmethod
    def parse(cls, value: Union[str, "LogLevel"]) -> "LogLevel":
        if isinstance(value, LogLevel):
            return value
        name = value.strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value}")


class GitOperationObserver(ABC):
    """Abstract base class for git operation observers."""

    @abstractmethod
    def on_operation_started(self, operation: str, details: str) -> None:
        """Called before a command touches the repository."""
        pass

    @abstractmethod
    def on_operation_completed(self, operation: str, details: str, success: bool) -> None:
        """Called when a command finishes, successfully or not."""
        pass


class ConsoleLogObserver(GitOperationObserver):
    """Observer that logs git operations to the console."""

    def __init__(self, console: Optional[Console] = None, level: LogLevel = LogLevel.INFO):
        self.console = console or Console()
        self.level = level

    def _emit(self, level: LogLevel, markup: str) -> None:
        if level >= self.level:
            self.console.print(markup)

    def on_operation_started(self, operation: str, details: str) -> None:
        self._emit(LogLevel.DEBUG, f"[dim][DEBUG] {operation}: {escape(details)}[/dim]")

    def on_operation_completed(self, operation: str, details: str, success: bool) -> None:
        if success:
            self._emit(LogLevel.INFO, f"[dim][INFO] {operation} completed: {escape(details)}[/dim]")
        else:
            self._emit(LogLevel.ERROR, f"[red][ERROR] {operation} failed: {escape(details)}[/red]")


class FileLogObserver(GitOperationObserver):
    """Observer that logs git operations to a file."""

    def __init__(self, log_file: Union[str, Path], level: LogLevel = LogLevel.DEBUG):
        self.log_file = Path(log_file)
        self.level = level
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def _log(self, level: LogLevel, message: str) -> None:
        if level < self.level:
            return
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a", encoding="utf-8") as f:
            f.write(f"{timestamp} [{level.name}] {message}\n")

    def on_operation_started(self, operation: str, details: str) -> None:
        self._log(LogLevel.DEBUG, f"Started {operation}: {details}")

    def on_operation_completed(self, operation: str, details: str, success: bool) -> None:
        if success:
            self._log(LogLevel.INFO, f"Completed {operation}: {details}")
        else:
            self._log(LogLevel.ERROR, f"Failed {operation}: {details}")
