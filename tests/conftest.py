from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from git import Repo
from rich.console import Console

from gitworkflow.repository import GitRepository


def configure_identity(repo: Repo) -> None:
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")
        writer.set_value("pull", "rebase", "false")


def commit_file(repo: Repo, name: str, content: str, message: str):
    """Write, stage and commit a single file."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


def push_branch(seed: Repo, branch: str, name: str, content: str, message: str) -> None:
    """Commit on ``branch`` in the seed clone and publish it to origin."""
    if branch in [head.name for head in seed.heads]:
        seed.git.checkout(branch)
    else:
        seed.git.checkout("-b", branch)
    commit_file(seed, name, content, message)
    seed.git.push("origin", branch)


@pytest.fixture
def temp_git_repo(tmp_path):
    """A repository with one commit and no remote."""
    repo = Repo.init(tmp_path / "local")
    configure_identity(repo)
    commit_file(repo, "test.txt", "Initial content", "chore: initial commit")
    repo.git.branch("-M", "main")
    return repo


@pytest.fixture
def remote_setup(tmp_path):
    """A bare origin on ``main``, a seed clone to publish upstream changes and a working clone."""
    origin_path = tmp_path / "origin.git"
    Repo.init(origin_path, bare=True)

    seed = Repo.init(tmp_path / "seed")
    configure_identity(seed)
    commit_file(seed, "README.md", "# demo\n", "chore: initial commit")
    seed.git.branch("-M", "main")
    seed.create_remote("origin", str(origin_path))
    seed.git.push("origin", "main")
    Repo(origin_path).git.symbolic_ref("HEAD", "refs/heads/main")

    work = Repo.clone_from(str(origin_path), str(tmp_path / "work"))
    configure_identity(work)
    return SimpleNamespace(origin=origin_path, seed=seed, work=work)


@pytest.fixture
def work_repo(remote_setup):
    return GitRepository(remote_setup.work.working_tree_dir)


@pytest.fixture
def mock_console():
    """Mock console for testing."""
    console = Mock(spec=Console)
    console.print = Mock()
    return console


def printed(console: Mock) -> str:
    """Everything a mock console was asked to print, one call per line."""
    return "\n".join(str(call.args[0]) for call in console.print.call_args_list if call.args)
