"""Tests for CLI functionality."""
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import commit_file, push_branch
from gitworkflow import __version__
from gitworkflow.cli import _clean_message, main
from gitworkflow.config import Config, DEFAULT_CONFIG_FILENAME
from gitworkflow.templates import DEFAULT_COMMIT_TEMPLATE


@pytest.fixture
def cli_runner():
    """Fixture for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def work_dir(remote_setup):
    return remote_setup.work.working_tree_dir


def test_version(cli_runner):
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_commit_validate_valid_message(cli_runner):
    result = cli_runner.invoke(main, ["commit", "validate", "feat(auth): add login"])
    assert result.exit_code == 0
    assert "Commit message is valid" in result.output


def test_commit_validate_invalid_message(cli_runner):
    result = cli_runner.invoke(main, ["commit", "validate", "bad format"])
    assert result.exit_code == 1
    assert "Commit message validation failed" in result.output
    assert "Conventional Commits" in result.output


def test_commit_validate_shows_warnings(cli_runner):
    result = cli_runner.invoke(main, ["commit", "validate", "feat: added login"])
    assert result.exit_code == 0
    assert "Warnings" in result.output


def test_commit_validate_from_hook_file(cli_runner, tmp_path):
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text(
        "feat(parser): add tokenizer\n"
        "# Please enter the commit message for your changes.\n"
        "# ------------------------ >8 ------------------------\n"
        "diff --git a/x b/x\n"
    )
    result = cli_runner.invoke(main, ["commit", "validate", "--file", str(message_file)])
    assert result.exit_code == 0
    assert "Commit message is valid" in result.output


def test_commit_validate_needs_a_message(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["commit", "validate"])
    assert result.exit_code == 2

    message_file = tmp_path / "msg"
    message_file.write_text("feat: add x")
    result = cli_runner.invoke(main, ["commit", "validate", "feat: add x", "-f", str(message_file)])
    assert result.exit_code == 2


def test_clean_message():
    text = "fix: correct thing\n\n# comment\nbody line\n# ------------------------ >8 ------------------------\n# diff"
    assert _clean_message(text) == "fix: correct thing\n\nbody line"


def test_branch_validate(cli_runner):
    result = cli_runner.invoke(main, ["branch", "validate", "feature/add-logging"])
    assert result.exit_code == 0
    assert "follows the branch naming convention" in result.output

    result = cli_runner.invoke(main, ["branch", "validate", "Feature/AddLogging"])
    assert result.exit_code == 1
    assert "does not follow convention" in result.output


def test_outside_repository(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "status"])
    assert result.exit_code == 1
    assert "Not in a Git repository" in result.output


def test_branch_create_logs_to_file(cli_runner, work_dir):
    result = cli_runner.invoke(
        main, ["-p", work_dir, "-l", "ops.log", "branch", "create", "feature/cli-branch"]
    )
    assert result.exit_code == 0
    assert "Successfully created and switched to branch" in result.output

    log = (Path(work_dir) / "ops.log").read_text()
    assert "Completed create_branch: feature/cli-branch from main" in log
    # The default INFO threshold drops start events
    assert "Started" not in log


def test_branch_create_invalid_name(cli_runner, work_dir):
    result = cli_runner.invoke(main, ["-p", work_dir, "branch", "create", "my_branch"])
    assert result.exit_code == 1
    assert "does not follow convention" in result.output


def test_verbose_logs_to_console(cli_runner, work_dir):
    result = cli_runner.invoke(main, ["-p", work_dir, "-v", "branch", "create", "bugfix/verbose"])
    assert result.exit_code == 0
    assert "create_branch: bugfix/verbose" in result.output
    assert "create_branch completed" in result.output


def test_always_log_writes_into_log_directory(cli_runner, work_dir):
    Config(always_log=True, log_level="DEBUG").save(Path(work_dir))

    result = cli_runner.invoke(main, ["-p", work_dir, "branch", "create", "feature/logged"])
    assert result.exit_code == 0

    logs = list((Path(work_dir) / ".gitworkflow").glob("gwf_log-*.log"))
    assert len(logs) == 1
    content = logs[0].read_text()
    assert "Started create_branch: feature/logged" in content
    assert "Completed create_branch" in content


def test_branch_status(cli_runner, work_dir):
    result = cli_runner.invoke(main, ["-p", work_dir, "branch", "status"])
    assert result.exit_code == 0
    assert "Branch name follows convention" in result.output
    assert "Branch is up to date" in result.output


def test_commit_check(cli_runner, remote_setup, work_dir):
    result = cli_runner.invoke(main, ["-p", work_dir, "commit", "check"])
    assert result.exit_code == 0
    assert "chore: initial commit" in result.output

    commit_file(remote_setup.work, "x.txt", "x", "WIP")
    result = cli_runner.invoke(main, ["-p", work_dir, "commit", "check"])
    assert result.exit_code == 1


def test_status(cli_runner, work_dir):
    result = cli_runner.invoke(main, ["-p", work_dir, "status"])
    assert result.exit_code == 0
    assert "Git Workflow Status" in result.output
    assert "Current branch: main" in result.output


def test_pr_ready_and_not_ready(cli_runner, remote_setup, work_dir):
    work = remote_setup.work
    work.git.checkout("-b", "feature/pr")
    commit_file(work, "pr.txt", "pr", "feat: add pr file")
    work.git.push("-u", "origin", "feature/pr")

    result = cli_runner.invoke(main, ["-p", work_dir, "pr"])
    assert result.exit_code == 0
    assert "Preparing Pull Request Checklist" in result.output
    assert "Branch is ready for Pull Request!" in result.output

    (Path(work_dir) / "pr.txt").write_text("dirty")
    result = cli_runner.invoke(main, ["-p", work_dir, "pr"])
    assert result.exit_code == 1
    assert "NOT ready" in result.output


def test_rebase_refuses_dirty_tree(cli_runner, work_dir):
    (Path(work_dir) / "README.md").write_text("edited")
    result = cli_runner.invoke(main, ["-p", work_dir, "rebase"])
    assert result.exit_code == 1
    assert "uncommitted changes" in result.output
    assert "git stash" in result.output


def test_sync_conflict_prints_hints(cli_runner, remote_setup, work_dir):
    work = remote_setup.work
    work.git.checkout("-b", "feature/conflict")
    commit_file(work, "README.md", "feature version\n", "docs: update readme on feature")
    push_branch(remote_setup.seed, "main", "README.md", "upstream version\n", "docs: update readme upstream")

    result = cli_runner.invoke(main, ["-p", work_dir, "sync"])
    assert result.exit_code == 1
    assert "Rebase encountered conflicts" in result.output
    assert "git rebase --continue" in result.output


def test_sync_abort_on_conflict(cli_runner, remote_setup, work_dir):
    work = remote_setup.work
    work.git.checkout("-b", "feature/conflict")
    commit_file(work, "README.md", "feature version\n", "docs: update readme on feature")
    push_branch(remote_setup.seed, "main", "README.md", "upstream version\n", "docs: update readme upstream")

    result = cli_runner.invoke(main, ["-p", work_dir, "sync", "--abort-on-conflict"])
    assert result.exit_code == 1
    assert "aborted" in result.output
    assert not (Path(work.git_dir) / "rebase-merge").exists()


def test_template(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "template"])
    assert result.exit_code == 0
    assert "Commit Message Template" in result.output
    assert "feat(auth): add user login functionality" in result.output


def test_template_copy(cli_runner, tmp_path):
    with patch("pyperclip.copy") as mock_copy:
        result = cli_runner.invoke(main, ["-p", str(tmp_path), "template", "--copy"])
    assert result.exit_code == 0
    mock_copy.assert_called_once_with(DEFAULT_COMMIT_TEMPLATE)
    assert "Template copied to clipboard!" in result.output


def test_config_path_creates_config(cli_runner, temp_git_repo):
    root = Path(temp_git_repo.working_tree_dir)
    config_path = root / DEFAULT_CONFIG_FILENAME
    assert not config_path.exists()

    with patch("pyperclip.copy") as mock_copy:
        result = cli_runner.invoke(main, ["-p", str(root), "config", "path"])

    assert result.exit_code == 0
    assert config_path.exists()
    assert "Created new config file with default values" in result.output
    assert "Path copied to clipboard!" in result.output
    mock_copy.assert_called_once_with(str(config_path))
    assert Config.load(root).remote_name == "origin"


def test_config_list(cli_runner, temp_git_repo):
    root = Path(temp_git_repo.working_tree_dir)
    (root / DEFAULT_CONFIG_FILENAME).write_text('remote_name = "upstream"\n')

    result = cli_runner.invoke(main, ["-p", str(root), "config", "list"])
    assert result.exit_code == 0
    assert "Current Configuration Settings" in result.output
    assert "upstream" in result.output
