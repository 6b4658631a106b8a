"""Commands that rebase the current branch: rebase and sync."""

from typing import Optional

from rich.console import Console

from ..errors import (
    GitOperationError,
    RebaseConflictError,
    RemoteBranchNotFoundError,
    UncommittedChangesError,
    WorkflowError,
)
from ..repository import GitRepository
from ..validation import is_protected_branch
from .base import GitCommand


class _RebasingCommand(GitCommand):
    """Shared state and undo for commands that rewrite the current branch.

    Attributes:
        base (Optional[str]): Branch to rebase onto; the integration branch when None
        abort_on_conflict (bool): Abort instead of leaving a conflicted rebase behind
        original_head (Optional[str]): Commit the branch pointed at before execute()
    """

    def __init__(
        self,
        repo: GitRepository,
        base: Optional[str] = None,
        abort_on_conflict: bool = False,
        console: Optional[Console] = None,
    ):
        super().__init__(repo, console)
        self.base = base
        self.abort_on_conflict = abort_on_conflict
        self.original_head: Optional[str] = None

    def _ensure_clean(self) -> None:
        if self.repo.has_uncommitted_changes():
            raise UncommittedChangesError()

    def _resolve_conflict(self, error: RebaseConflictError) -> None:
        """Re-raise ``error``, aborting the stopped rebase first when configured to."""
        if not self.abort_on_conflict:
            raise error
        self.repo.abort_rebase()
        raise RebaseConflictError(error.branch, error.onto, aborted=True) from error

    def _rebase(self, onto: str, interactive: bool = False) -> None:
        try:
            self.repo.rebase(onto, interactive=interactive)
        except RebaseConflictError as e:
            self._resolve_conflict(e)

    def _print_force_push_advice(self, branch: str) -> None:
        self.console.print("[dim]\nIf you need to push, you may need to force push:[/dim]")
        self.console.print(
            f"[dim]  git push --force-with-lease {self.repo.remote_name} {branch}[/dim]"
        )
        self.console.print(
            "[yellow]\n⚠️  Only force push if you're the only one working on this branch![/yellow]"
        )

    def undo(self) -> bool:
        """Abort a rebase left in progress, or reset to the pre-rebase commit."""
        try:
            if self.repo.rebase_in_progress():
                self.repo.abort_rebase()
                return True
            if not self.original_head:
                self.console.print("[yellow]No rebase to undo[/yellow]")
                return False
            self.repo.reset_hard(self.original_head)
        except GitOperationError as e:
            self.console.print(f"[red]Failed to undo {self.operation}: {e.message}[/red]")
            return False

        self.original_head = None
        return True


class RebaseCommand(_RebasingCommand):
    """Command for rebasing the current branch onto the remote base branch.

    This command handles:
    1. Refusing to run with uncommitted changes
    2. Fetching the base branch and checking it exists on the remote
    3. Rebasing (optionally interactively)
    4. Supporting undo via rebase --abort or reset to the original head
    """

    operation = "rebase"

    def __init__(
        self,
        repo: GitRepository,
        base: Optional[str] = None,
        interactive: bool = False,
        abort_on_conflict: bool = False,
        console: Optional[Console] = None,
    ):
        super().__init__(repo, base, abort_on_conflict, console)
        self.interactive = interactive

    def execute(self) -> bool:
        """Rebase the current branch onto ``<remote>/<base>``.

        Raises:
            UncommittedChangesError: the working tree is dirty
            RemoteBranchNotFoundError: the base does not exist on the remote
            RebaseConflictError: the rebase stopped on conflicts
        """
        self.notify_started(self.base or "integration branch")
        try:
            self.repo.require_remote()
            branch = self.repo.current_branch()
            self._ensure_clean()

            base = self.base or self.repo.integration_branch()
            onto = self.repo.remote_ref(base)

            self.console.print(
                f"[blue]📥 Fetching latest changes from {self.repo.remote_name}...[/blue]"
            )
            try:
                self.repo.fetch(base)
            except GitOperationError:
                if not self.repo.remote_ref_exists(base):
                    raise RemoteBranchNotFoundError(onto)
                raise
            if not self.repo.remote_ref_exists(base):
                raise RemoteBranchNotFoundError(onto)

            self.original_head = self.repo.head_commit()
            self.console.print(f"[blue]🔄 Rebasing {branch} onto {onto}...[/blue]")
            self._rebase(onto, interactive=self.interactive)
        except WorkflowError as e:
            self.notify_completed(e.message, False)
            raise

        self.console.print(f"[green]✅ Successfully rebased {branch} onto {onto}[/green]")
        if not self.interactive:
            self._print_force_push_advice(branch)

        self.notify_completed(f"{branch} onto {onto}", True)
        return True


class SyncCommand(_RebasingCommand):
    """Command for bringing the current branch up to date.

    This command handles:
    1. Refusing to run with uncommitted changes
    2. Fetching and pulling (with rebase) from the tracking branch
    3. Rebasing onto the integration branch, except for protected branches
    4. Supporting undo by restoring the pre-sync commit
    """

    operation = "sync"

    def __init__(
        self,
        repo: GitRepository,
        base: Optional[str] = None,
        rebase: bool = True,
        abort_on_conflict: bool = False,
        console: Optional[Console] = None,
    ):
        super().__init__(repo, base, abort_on_conflict, console)
        self.rebase = rebase

    def execute(self) -> bool:
        """Pull the current branch and rebase it onto the base branch.

        A base that cannot be rebased onto (for example because it does not
        exist on the remote) only produces a warning.

        Raises:
            UncommittedChangesError: the working tree is dirty
            RebaseConflictError: the pull or the rebase stopped on conflicts
        """
        self.notify_started(self.base or "integration branch")
        try:
            self.repo.require_remote()
            branch = self.repo.current_branch()
            self._ensure_clean()

            self.console.print(
                f"[blue]📥 Fetching latest changes from {self.repo.remote_name}...[/blue]"
            )
            self.repo.fetch()
            base = self.base or self.repo.integration_branch(fetch=False)
            self.original_head = self.repo.head_commit()

            tracking = self.repo.tracking_branch()
            if tracking:
                self.console.print(f"[blue]🔄 Updating {branch} from {tracking}...[/blue]")
                try:
                    self.repo.pull_rebase(branch)
                except RebaseConflictError as e:
                    self._resolve_conflict(e)
            else:
                self.console.print(
                    f"[yellow]⚠️  No remote tracking branch set for {branch}[/yellow]"
                )

            rebased = False
            if self.rebase and branch != base and not is_protected_branch(branch):
                rebased = self._rebase_onto_base(branch, base)
        except WorkflowError as e:
            self.notify_completed(e.message, False)
            raise

        if rebased:
            self.console.print(f"[green]✅ Successfully synced and rebased {branch}[/green]")
            self._print_force_push_advice(branch)
        else:
            self.console.print(f"[green]✅ Successfully synced {branch}[/green]")

        self.notify_completed(f"{branch} with {base}", True)
        return True

    def _rebase_onto_base(self, branch: str, base: str) -> bool:
        onto = self.repo.remote_ref(base)
        if not self.repo.remote_ref_exists(base):
            self.console.print(
                f"[yellow]⚠️  Could not rebase onto {base} (branch may not exist)[/yellow]"
            )
            return False

        self.console.print(f"[blue]🔄 Rebasing {branch} onto {onto}...[/blue]")
        try:
            self._rebase(onto)
        except GitOperationError:
            self.console.print(
                f"[yellow]⚠️  Could not rebase onto {base} (branch may not exist)[/yellow]"
            )
            return False
        return True
