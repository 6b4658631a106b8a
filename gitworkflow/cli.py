#!/usr/bin/env python3
from pathlib import Path
from typing import List, Optional

import click
import pyperclip
from rich.console import Console
from rich.markup import escape

from . import __version__
from .checks import branch_status, check_last_commit, check_pr_readiness, prepare_pull_request
from .commands import CreateBranchCommand, GitCommand, RebaseCommand, SyncCommand
from .config import Config, DEFAULT_CONFIG_FILENAME
from .display import (
    show_branch_status,
    show_branch_validation,
    show_commit_validation,
    show_config,
    show_last_commit,
    show_pull_request_report,
    show_template,
    show_workflow_status,
)
from .errors import GitOperationError, WorkflowError
from .models import Verdict
from .observers import ConsoleLogObserver, FileLogObserver, GitOperationObserver, LogLevel
from .repository import GitRepository, find_repository_root
from .templates import load_commit_template
from .validation import validate_branch_name, validate_commit_message

console = Console()

SCISSORS_LINE = "# ------------------------ >8 ------------------------"


class WorkflowContext:
    """Per-invocation state shared by all subcommands."""

    def __init__(self, path: Path, log_file: Optional[Path] = None, verbose: bool = False):
        self.path = path
        self.log_file = log_file
        self.verbose = verbose
        self._config: Optional[Config] = None
        self._repo: Optional[GitRepository] = None

    @property
    def root(self) -> Path:
        """Repository root, or the given path outside a repository."""
        return find_repository_root(self.path) or self.path

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = Config.load(self.root)
        return self._config

    @property
    def repo(self) -> GitRepository:
        if self._repo is None:
            self._repo = GitRepository(self.path, remote_name=self.config.remote_name)
        return self._repo

    def observers(self) -> List[GitOperationObserver]:
        observers: List[GitOperationObserver] = []
        if self.verbose:
            observers.append(ConsoleLogObserver(console, LogLevel.DEBUG))

        log_file = self.log_file or self.config.get_log_file()
        if log_file:
            if not log_file.is_absolute():
                log_file = self.root / log_file
            observers.append(FileLogObserver(log_file, LogLevel.parse(self.config.log_level)))
        return observers

    def run(self, command: GitCommand) -> bool:
        for observer in self.observers():
            command.add_observer(observer)
        return command.execute()


class WorkflowGroup(click.Group):
    """Top-level group that turns workflow errors into exit codes."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except WorkflowError as e:
            console.print(f"[red]❌ Error:[/red] {escape(e.message)}")
            for hint in e.hints:
                console.print(f"[dim]   {escape(hint)}[/dim]")
            raise click.exceptions.Exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise click.exceptions.Exit(130)


def _clean_message(text: str) -> str:
    """Drop git comment lines and anything below the scissors line."""
    lines = []
    for line in text.splitlines():
        if line.startswith(SCISSORS_LINE):
            break
        if line.startswith("#"):
            continue
        lines.append(line)
    return "\n".join(lines)


@click.group(cls=WorkflowGroup)
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log git operations (overrides config setting)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every git operation to the console")
@click.version_option(__version__, prog_name="git-workflow")
@click.pass_context
def main(ctx: click.Context, path: Path, log_file: Optional[Path], verbose: bool):
    """
    Opinionated helpers for a feature-branch Git workflow.

    Create convention-checked branches, lint commit messages against
    Conventional Commits, keep branches rebased on the integration branch
    and check whether a branch is ready for a pull request.

    Configuration can be set in .gitworkflow.toml in the repository root.
    Command line options override configuration file settings.
    """
    ctx.obj = WorkflowContext(path.absolute(), log_file=log_file, verbose=verbose)


@main.group()
def branch():
    """Create and inspect branches."""


@branch.command("create")
@click.argument("name")
@click.option("--from", "base", help="Branch to start from (defaults to the integration branch)")
@click.pass_obj
def branch_create(obj: WorkflowContext, name: str, base: Optional[str]):
    """Create NAME from an up-to-date base branch and switch to it."""
    obj.run(CreateBranchCommand(obj.repo, name, base=base or obj.config.base_branch, console=console))


@branch.command("status")
@click.pass_obj
def branch_status_command(obj: WorkflowContext):
    """Show the naming check and ahead/behind state of the current branch."""
    show_branch_status(console, branch_status(obj.repo))


@branch.command("validate")
@click.argument("name")
@click.pass_context
def branch_validate(ctx: click.Context, name: str):
    """Check NAME against the branch naming convention."""
    result = validate_branch_name(name)
    show_branch_validation(console, name, result)
    if not result.valid:
        ctx.exit(1)


@main.group()
def commit():
    """Validate commit messages."""


@commit.command("check")
@click.pass_context
def commit_check(ctx: click.Context):
    """Validate the message of the last commit."""
    try:
        check = check_last_commit(ctx.obj.repo)
    except GitOperationError as e:
        raise WorkflowError("Could not read last commit") from e
    show_last_commit(console, check)
    if not check.validation.valid:
        ctx.exit(1)


@commit.command("validate")
@click.argument("message", required=False)
@click.option(
    "-f",
    "--file",
    "message_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the message from a file, e.g. from a commit-msg hook",
)
@click.pass_context
def commit_validate(ctx: click.Context, message: Optional[str], message_file: Optional[Path]):
    """Validate MESSAGE (or the message in --file) before committing."""
    if message is None and message_file is None:
        raise click.UsageError("Provide a MESSAGE or --file")
    if message is not None and message_file is not None:
        raise click.UsageError("MESSAGE and --file are mutually exclusive")
    if message_file is not None:
        message = _clean_message(message_file.read_text(encoding="utf-8"))

    result = validate_commit_message(message)
    show_commit_validation(console, result)
    if not result.valid:
        ctx.exit(1)


@main.command()
@click.option("--base", help="Branch to rebase onto (defaults to the integration branch)")
@click.option("-i", "--interactive", is_flag=True, help="Run an interactive rebase")
@click.option(
    "--abort-on-conflict",
    is_flag=True,
    help="Abort the rebase on conflicts instead of leaving it for manual resolution",
)
@click.pass_obj
def rebase(obj: WorkflowContext, base: Optional[str], interactive: bool, abort_on_conflict: bool):
    """Rebase the current branch onto the remote base branch."""
    obj.run(
        RebaseCommand(
            obj.repo,
            base=base or obj.config.base_branch,
            interactive=interactive,
            abort_on_conflict=abort_on_conflict or obj.config.abort_on_conflict,
            console=console,
        )
    )


@main.command()
@click.option("--base", help="Branch to rebase onto (defaults to the integration branch)")
@click.option("--no-rebase", is_flag=True, help="Only pull, do not rebase onto the base branch")
@click.option(
    "--abort-on-conflict",
    is_flag=True,
    help="Abort the rebase on conflicts instead of leaving it for manual resolution",
)
@click.pass_obj
def sync(obj: WorkflowContext, base: Optional[str], no_rebase: bool, abort_on_conflict: bool):
    """Pull the current branch and rebase it onto the base branch."""
    obj.run(
        SyncCommand(
            obj.repo,
            base=base or obj.config.base_branch,
            rebase=not no_rebase,
            abort_on_conflict=abort_on_conflict or obj.config.abort_on_conflict,
            console=console,
        )
    )


@main.command()
@click.pass_obj
def status(obj: WorkflowContext):
    """Show whether the current branch is ready for a pull request."""
    show_workflow_status(console, check_pr_readiness(obj.repo), remote_name=obj.repo.remote_name)


@main.command()
@click.pass_context
def pr(ctx: click.Context):
    """Run the full pull-request checklist."""
    obj: WorkflowContext = ctx.obj
    report = prepare_pull_request(obj.repo)
    show_pull_request_report(console, report, remote_name=obj.repo.remote_name)
    if report.verdict is Verdict.NOT_READY:
        ctx.exit(1)


@main.command()
@click.option("--copy", is_flag=True, help="Copy the template to the clipboard")
@click.pass_obj
def template(obj: WorkflowContext, copy: bool):
    """Show the commit message template."""
    text, source = load_commit_template(obj.root)
    show_template(console, text, source)
    if copy:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise WorkflowError(f"Could not copy to clipboard: {e}") from e
        console.print("[green]Template copied to clipboard![/green]")


@main.group("config")
def config_group():
    """Inspect the .gitworkflow.toml configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(obj: WorkflowContext):
    """Display current configuration settings."""
    show_config(console, obj.config, obj.root)


@config_group.command("path")
@click.pass_obj
def config_path(obj: WorkflowContext):
    """Display the config file location and copy it to the clipboard."""
    config_file = obj.root / DEFAULT_CONFIG_FILENAME

    # Create default config file if it doesn't exist
    if not config_file.exists():
        Config().save(obj.root)
        console.print("[yellow]Created new config file with default values[/yellow]")

    console.print(f"[green]Config file location:[/green] {escape(str(config_file))}")
    try:
        pyperclip.copy(str(config_file))
    except pyperclip.PyperclipException:
        console.print("[yellow]Clipboard is not available, path not copied[/yellow]")
    else:
        console.print("[green]Path copied to clipboard![/green]")


if __name__ == "__main__":
    main()
