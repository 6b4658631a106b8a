"""Tests for the commit message template."""
from gitworkflow.models import CommitType
from gitworkflow.templates import DEFAULT_COMMIT_TEMPLATE, TEMPLATE_FILENAME, load_commit_template


def test_default_template_lists_every_type():
    for commit_type in CommitType:
        assert f"#   {commit_type.value}:" in DEFAULT_COMMIT_TEMPLATE


def test_default_template_is_all_comments():
    lines = [line for line in DEFAULT_COMMIT_TEMPLATE.splitlines() if line]
    assert all(line.startswith("#") for line in lines)


def test_builtin_template_without_repository():
    assert load_commit_template() == (DEFAULT_COMMIT_TEMPLATE, None)


def test_builtin_template_when_file_missing(tmp_path):
    assert load_commit_template(tmp_path) == (DEFAULT_COMMIT_TEMPLATE, None)


def test_repository_template_wins(tmp_path):
    path = tmp_path / TEMPLATE_FILENAME
    path.write_text("# team template\n")
    assert load_commit_template(tmp_path) == ("# team template\n", path)
