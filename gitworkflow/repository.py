"""Thin facade over the git executable.

Every query the commands and checks need goes through ``GitRepository`` so
that git failures surface as ``WorkflowError`` subclasses instead of
``GitCommandError``.
"""
import subprocess
from pathlib import Path
from typing import FrozenSet, List, Optional, Union

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .errors import (
    DetachedHeadError,
    GitOperationError,
    NotARepositoryError,
    RebaseConflictError,
)
from .models import BranchExistence, RemoteState, TrackingStatus
from .validation import resolve_integration_branch

# Exit status git uses when a rebase stops on conflicts.
REBASE_CONFLICT_STATUS = 1


def _stderr_text(error: GitCommandError) -> str:
    text = (error.stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip().strip("'").strip()
    return text


def find_repository_root(path: Union[str, Path]) -> Optional[Path]:
    """Top of the working tree containing ``path``, or None outside a repository."""
    try:
        repo = Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return None
    if repo.bare:
        return None
    return Path(repo.working_tree_dir)


class GitRepository:
    """A git working tree plus the remote it syncs with.

    Attributes:
        repo (Repo): The underlying GitPython repository
        remote_name (str): Remote used for fetch, pull and rebase targets
        root (Path): Top of the working tree
    """

    def __init__(self, path: Union[str, Path] = ".", remote_name: str = "origin"):
        try:
            self.repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise NotARepositoryError(str(path))
        if self.repo.bare:
            raise NotARepositoryError(str(path))
        self.remote_name = remote_name
        self.root = Path(self.repo.working_tree_dir)

    def _git(self, command: str, *args: str) -> str:
        try:
            return getattr(self.repo.git, command)(*args)
        except GitCommandError as e:
            stderr = _stderr_text(e)
            message = f"git {command.replace('_', '-')} failed"
            if stderr:
                message += f": {stderr}"
            raise GitOperationError(message, status=e.status, stderr=stderr) from e

    def _try_git(self, command: str, *args: str) -> Optional[str]:
        """Run a query whose failure just means "no answer"."""
        try:
            return self._git(command, *args).strip()
        except GitOperationError:
            return None

    def remote_ref(self, branch: str) -> str:
        return f"{self.remote_name}/{branch}"

    # Branches

    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError:
            raise DetachedHeadError()

    def local_branches(self) -> List[str]:
        return [head.name for head in self.repo.heads]

    def has_remote(self) -> bool:
        return any(remote.name == self.remote_name for remote in self.repo.remotes)

    def require_remote(self) -> None:
        if not self.has_remote():
            raise GitOperationError(f"Remote '{self.remote_name}' is not configured")

    def remote_branches(self) -> FrozenSet[str]:
        """Remote branch names with the remote prefix removed."""
        if not self.has_remote():
            return frozenset()
        prefix = f"{self.remote_name}/"
        names = set()
        for line in self._git("branch", "-r").splitlines():
            entry = line.strip()
            if not entry.startswith(prefix) or " -> " in entry:
                continue
            names.add(entry[len(prefix):])
        return frozenset(names)

    def symbolic_head(self) -> Optional[str]:
        """Branch the remote's HEAD points at, if git knows it."""
        ref = self._try_git("symbolic_ref", f"refs/remotes/{self.remote_name}/HEAD")
        prefix = f"refs/remotes/{self.remote_name}/"
        if ref and ref.startswith(prefix):
            return ref[len(prefix):]
        return None

    def remote_state(self) -> RemoteState:
        return RemoteState(branches=self.remote_branches(), head=self.symbolic_head())

    def branch_exists(self, name: str) -> BranchExistence:
        return BranchExistence(
            local=name in self.local_branches(),
            remote=name in self.remote_branches(),
        )

    def _refresh_remote(self) -> None:
        if not self.has_remote():
            return
        try:
            self.fetch()
        except GitOperationError:
            # Offline: decide from the remote refs we already have.
            return

    def integration_branch(self, fetch: bool = True) -> str:
        if fetch:
            self._refresh_remote()
        return resolve_integration_branch(self.remote_state())

    # Refs and history

    def rev_parse(self, ref: str) -> Optional[str]:
        return self._try_git("rev_parse", "--verify", "--quiet", ref)

    def remote_ref_exists(self, branch: str) -> bool:
        return self.rev_parse(self.remote_ref(branch)) is not None

    def head_commit(self) -> Optional[str]:
        return self.rev_parse("HEAD")

    def tracking_branch(self) -> Optional[str]:
        return self._try_git("rev_parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")

    def count_commits(self, rev_range: str) -> int:
        return int(self._git("rev_list", "--count", rev_range).strip())

    def tracking_status(self) -> Optional[TrackingStatus]:
        tracking = self.tracking_branch()
        if tracking is None:
            return None
        return TrackingStatus(
            tracking=tracking,
            ahead=self.count_commits(f"{tracking}..HEAD"),
            behind=self.count_commits(f"HEAD..{tracking}"),
        )

    def commit_subjects(self, rev_range: str) -> List[str]:
        output = self._git("log", rev_range, "--no-merges", "--format=%s")
        return [line for line in output.splitlines() if line.strip()]

    def merge_base(self, first: str, second: str) -> str:
        return self._git("merge_base", first, second).strip()

    def last_commit_message(self) -> str:
        return self._git("log", "-1", "--pretty=%B")

    def has_uncommitted_changes(self) -> bool:
        return bool(self._git("status", "--porcelain").strip())

    # Mutations

    def fetch(self, branch: Optional[str] = None) -> None:
        args = [self.remote_name]
        if branch:
            args.append(branch)
        self._git("fetch", *args)

    def checkout(self, branch: str) -> None:
        self._git("checkout", branch)

    def pull(self, branch: str) -> None:
        self._git("pull", self.remote_name, branch)

    def pull_rebase(self, branch: str) -> None:
        try:
            self._git("pull", "--rebase", self.remote_name, branch)
        except GitOperationError:
            if self.rebase_in_progress():
                raise RebaseConflictError(branch, self.remote_ref(branch))
            raise

    def create_branch(self, name: str) -> None:
        self._git("switch", "-c", name)

    def delete_branch(self, name: str) -> None:
        self._git("branch", "-D", name)

    def rebase(self, onto: str, interactive: bool = False) -> None:
        """Rebase the current branch onto ``onto``.

        Raises:
            RebaseConflictError: git stopped with conflicts
            GitOperationError: the rebase failed for any other reason
        """
        branch = self.current_branch()
        if interactive:
            # The todo-list editor needs the real terminal.
            completed = subprocess.run(
                ["git", "rebase", "-i", onto], cwd=str(self.root), check=False
            )
            if completed.returncode == REBASE_CONFLICT_STATUS:
                raise RebaseConflictError(branch, onto)
            if completed.returncode != 0:
                raise GitOperationError(
                    f"git rebase -i failed with exit status {completed.returncode}",
                    status=completed.returncode,
                )
            return

        try:
            self._git("rebase", onto)
        except GitOperationError as e:
            if e.status == REBASE_CONFLICT_STATUS:
                raise RebaseConflictError(branch, onto) from e
            raise

    def rebase_in_progress(self) -> bool:
        git_dir = Path(self.repo.git_dir)
        return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()

    def abort_rebase(self) -> None:
        self._git("rebase", "--abort")

    def reset_hard(self, ref: str) -> None:
        self._git("reset", "--hard", ref)
