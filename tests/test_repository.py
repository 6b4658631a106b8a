"""Tests for the git facade."""
import subprocess
from pathlib import Path

import pytest
from git import Repo

from conftest import commit_file, push_branch
from gitworkflow.errors import (
    DetachedHeadError,
    GitOperationError,
    NotARepositoryError,
    RebaseConflictError,
)
from gitworkflow.repository import GitRepository, find_repository_root


def test_not_a_repository(tmp_path):
    with pytest.raises(NotARepositoryError, match="Not in a Git repository"):
        GitRepository(tmp_path)
    assert find_repository_root(tmp_path) is None


def test_repository_root_from_subdirectory(temp_git_repo):
    root = Path(temp_git_repo.working_tree_dir)
    subdir = root / "pkg" / "sub"
    subdir.mkdir(parents=True)

    assert find_repository_root(subdir).resolve() == root.resolve()
    assert GitRepository(subdir).root.resolve() == root.resolve()


def test_current_branch_and_detached_head(temp_git_repo):
    repo = GitRepository(temp_git_repo.working_tree_dir)
    assert repo.current_branch() == "main"

    temp_git_repo.git.checkout("--detach")
    with pytest.raises(DetachedHeadError, match="Could not determine current branch"):
        repo.current_branch()


def test_uncommitted_changes(temp_git_repo):
    repo = GitRepository(temp_git_repo.working_tree_dir)
    assert repo.has_uncommitted_changes() is False

    (Path(temp_git_repo.working_tree_dir) / "new.txt").write_text("untracked")
    assert repo.has_uncommitted_changes() is True


def test_no_remote(temp_git_repo):
    repo = GitRepository(temp_git_repo.working_tree_dir)
    assert repo.has_remote() is False
    assert repo.remote_branches() == frozenset()
    assert repo.integration_branch() == "main"
    with pytest.raises(GitOperationError, match="Remote 'origin' is not configured"):
        repo.require_remote()


def test_remote_state_of_clone(work_repo):
    state = work_repo.remote_state()
    assert state.branches == frozenset({"main"})
    assert state.head == "main"
    assert work_repo.integration_branch() == "main"


def test_integration_branch_switches_to_develop(remote_setup, work_repo):
    push_branch(remote_setup.seed, "develop", "develop.txt", "dev", "feat: add develop file")

    assert work_repo.integration_branch(fetch=False) == "main"
    assert work_repo.integration_branch() == "develop"


def test_branch_exists(remote_setup, work_repo):
    push_branch(remote_setup.seed, "feature/remote-only", "r.txt", "r", "feat: add remote file")
    work_repo.fetch()
    remote_setup.work.git.branch("feature/local-only")

    assert work_repo.branch_exists("main").local
    assert work_repo.branch_exists("main").remote
    existence = work_repo.branch_exists("feature/remote-only")
    assert (existence.local, existence.remote) == (False, True)
    existence = work_repo.branch_exists("feature/local-only")
    assert (existence.local, existence.remote) == (True, False)
    assert not work_repo.branch_exists("feature/missing").any


def test_tracking_status(remote_setup, work_repo):
    status = work_repo.tracking_status()
    assert status.tracking == "origin/main"
    assert status.up_to_date

    commit_file(remote_setup.work, "local.txt", "local", "feat: add local file")
    push_branch(remote_setup.seed, "main", "upstream.txt", "up", "feat: add upstream file")
    work_repo.fetch()

    status = work_repo.tracking_status()
    assert (status.ahead, status.behind) == (1, 1)


def test_tracking_status_without_upstream(temp_git_repo):
    assert GitRepository(temp_git_repo.working_tree_dir).tracking_status() is None


def test_history_queries(remote_setup, work_repo):
    work = remote_setup.work
    work.git.checkout("-b", "feature/history")
    commit_file(work, "a.txt", "a", "feat: add a")
    commit_file(work, "b.txt", "b", "fix(b): correct b\n\nLonger body.")

    assert work_repo.commit_subjects("origin/main..HEAD") == ["fix(b): correct b", "feat: add a"]
    assert work_repo.count_commits("origin/main..HEAD") == 2
    assert work_repo.last_commit_message().startswith("fix(b): correct b\n\nLonger body.")
    assert work_repo.merge_base("HEAD", "origin/main") == work_repo.rev_parse("origin/main")
    assert work_repo.rev_parse("origin/does-not-exist") is None
    assert work_repo.remote_ref_exists("main")


def test_git_failures_are_wrapped(work_repo):
    with pytest.raises(GitOperationError) as excinfo:
        work_repo.checkout("no-such-branch")
    assert excinfo.value.status not in (None, 0)
    assert "git checkout failed" in excinfo.value.message


def test_rebase_conflict_is_detected(remote_setup, work_repo):
    work = remote_setup.work
    work.git.checkout("-b", "feature/conflict")
    commit_file(work, "README.md", "feature version\n", "docs: update readme on feature")
    push_branch(remote_setup.seed, "main", "README.md", "upstream version\n", "docs: update readme upstream")
    work_repo.fetch()

    with pytest.raises(RebaseConflictError) as excinfo:
        work_repo.rebase("origin/main")
    assert excinfo.value.onto == "origin/main"
    assert excinfo.value.hints
    assert work_repo.rebase_in_progress()

    work_repo.abort_rebase()
    assert not work_repo.rebase_in_progress()
    assert work_repo.current_branch() == "feature/conflict"


def test_interactive_rebase_exit_codes(work_repo, monkeypatch):
    calls = []

    def fake_run(args, cwd, check):
        calls.append(args)
        return subprocess.CompletedProcess(args, fake_run.returncode)

    monkeypatch.setattr("gitworkflow.repository.subprocess.run", fake_run)

    fake_run.returncode = 0
    work_repo.rebase("origin/main", interactive=True)
    assert calls[-1] == ["git", "rebase", "-i", "origin/main"]

    fake_run.returncode = 1
    with pytest.raises(RebaseConflictError):
        work_repo.rebase("origin/main", interactive=True)

    fake_run.returncode = 128
    with pytest.raises(GitOperationError) as excinfo:
        work_repo.rebase("origin/main", interactive=True)
    assert excinfo.value.status == 128


def test_bare_repository_is_rejected(remote_setup):
    with pytest.raises(NotARepositoryError):
        GitRepository(remote_setup.origin)
