"""Command for creating a convention-checked branch."""

from typing import Optional

from rich.console import Console

from ..errors import (
    BranchExistsError,
    DetachedHeadError,
    GitOperationError,
    InvalidBranchNameError,
    WorkflowError,
)
from ..repository import GitRepository
from ..validation import validate_branch_name
from .base import GitCommand


class CreateBranchCommand(GitCommand):
    """Command for creating a new branch from an up-to-date base.

    This command handles:
    1. Validating the branch name against the naming convention
    2. Refusing names that already exist locally or on the remote
    3. Fetching and fast-forwarding the base branch
    4. Creating and switching to the new branch
    5. Supporting undo by switching back and deleting the branch

    Attributes:
        name (str): Name of the branch to create
        base (Optional[str]): Branch to start from; the integration branch when None
        previous_ref (Optional[str]): Branch or commit checked out before execute()
    """

    operation = "create_branch"

    def __init__(
        self,
        repo: GitRepository,
        name: str,
        base: Optional[str] = None,
        console: Optional[Console] = None,
    ):
        super().__init__(repo, console)
        self.name = name
        self.base = base
        self.previous_ref: Optional[str] = None
        self.created = False

    def execute(self) -> bool:
        """Create the branch and switch to it.

        Raises:
            InvalidBranchNameError: the name does not follow the convention
            BranchExistsError: a local or remote branch already has this name
            GitOperationError: fetching or branch creation failed
        """
        self.notify_started(self.name)
        try:
            validation = validate_branch_name(self.name)
            if not validation.valid:
                raise InvalidBranchNameError(validation.error)

            if self.repo.branch_exists(self.name).any:
                raise BranchExistsError(self.name)

            try:
                self.previous_ref = self.repo.current_branch()
            except DetachedHeadError:
                self.previous_ref = self.repo.head_commit()

            has_remote = self.repo.has_remote()
            if has_remote:
                self.console.print("[blue]📥 Fetching latest changes...[/blue]")
                self.repo.fetch()
            else:
                self.console.print(
                    f"[yellow]⚠️  No remote '{self.repo.remote_name}' configured, skipping fetch[/yellow]"
                )

            base = self.base or self.repo.integration_branch(fetch=False)
            self.console.print(f"[blue]📂 Switching to {base}...[/blue]")
            try:
                self.repo.checkout(base)
                if has_remote:
                    self.repo.pull(base)
            except GitOperationError:
                self.console.print(
                    f"[yellow]⚠️  Warning: Could not checkout {base}, creating from current branch[/yellow]"
                )

            self.console.print(f"[blue]🌿 Creating branch: {self.name}...[/blue]")
            self.repo.create_branch(self.name)
            self.created = True
        except WorkflowError as e:
            self.notify_completed(e.message, False)
            raise

        self.console.print(
            f"[green]✅ Successfully created and switched to branch: {self.name}[/green]"
        )
        self.console.print("[dim]\nNext steps:[/dim]")
        self.console.print("[dim]  1. Make your changes[/dim]")
        self.console.print('[dim]  2. Commit: git commit -m "feat: your message"[/dim]')
        self.console.print(
            f"[dim]  3. Push: git push -u {self.repo.remote_name} {self.name}[/dim]"
        )
        self.console.print("[dim]  4. Create a Pull Request[/dim]")

        self.notify_completed(f"{self.name} from {base}", True)
        return True

    def undo(self) -> bool:
        """Switch back to the previous branch and delete the created one."""
        if not self.created:
            self.console.print("[yellow]No branch to undo[/yellow]")
            return False

        try:
            if self.previous_ref and self.previous_ref != self.name:
                self.repo.checkout(self.previous_ref)
            self.repo.delete_branch(self.name)
        except GitOperationError as e:
            self.console.print(f"[red]Failed to undo branch creation: {e.message}[/red]")
            return False

        self.created = False
        return True
