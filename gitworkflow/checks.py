"""Read-only checks: branch status, last commit and pull-request readiness."""
from typing import List

from .errors import GitOperationError, WorkflowError
from .models import (
    BranchStatus,
    LastCommitCheck,
    PullRequestReport,
    WorkflowStatus,
)
from .repository import GitRepository
from .validation import (
    is_protected_branch,
    parse_header,
    validate_branch_name,
    validate_commit_message,
)


def branch_status(repo: GitRepository) -> BranchStatus:
    """Naming convention and ahead/behind counts for the current branch."""
    branch = repo.current_branch()
    return BranchStatus(
        branch=branch,
        naming=validate_branch_name(branch),
        tracking=repo.tracking_status(),
    )


def check_last_commit(repo: GitRepository) -> LastCommitCheck:
    message = repo.last_commit_message()
    return LastCommitCheck(message=message, validation=validate_commit_message(message))


def _check_remote_state(repo: GitRepository, branch: str, warnings: List[str], info: List[str]) -> None:
    tracking = repo.tracking_branch()
    if tracking is None:
        warnings.append(
            f"No remote tracking branch. Use: git push -u {repo.remote_name} <branch>"
        )
        return

    try:
        repo.fetch(branch)
    except GitOperationError:
        warnings.append(f"Could not fetch {branch}; comparing with the last known remote state")

    if repo.head_commit() != repo.rev_parse(tracking):
        info.append("Branch differs from remote. Make sure to push your changes.")


def _check_commits_ahead(repo: GitRepository, base: str, warnings: List[str], info: List[str]) -> None:
    base_ref = repo.remote_ref(base)
    if not repo.remote_ref_exists(base):
        warnings.append("Could not determine commits ahead of base branch")
        return

    subjects = repo.commit_subjects(f"{base_ref}..HEAD")
    if not subjects:
        warnings.append(f"No commits ahead of {base}. Make sure you have commits to merge.")
    else:
        info.append(f"{len(subjects)} commit(s) ahead of {base}")
        if any(parse_header(subject) is None for subject in subjects):
            warnings.append(
                "Some commits may not follow Conventional Commits format. "
                "Consider: git-workflow commit check"
            )

    if repo.merge_base("HEAD", base_ref) != repo.rev_parse(base_ref):
        warnings.append(f"Branch is behind {base}. Consider rebasing: git rebase {base_ref}")


def check_pr_readiness(repo: GitRepository) -> WorkflowStatus:
    """Collect blocking issues, warnings and informational notes for a PR.

    Issues make the branch not ready; warnings never do. Git failures while
    checking are reported as an issue rather than raised.
    """
    issues: List[str] = []
    warnings: List[str] = []
    info: List[str] = []

    try:
        branch = repo.current_branch()
        info.append(f"Current branch: {branch}")

        if is_protected_branch(branch):
            warnings.append(f"You're on {branch}. Consider creating a feature branch first.")

        if repo.has_uncommitted_changes():
            issues.append("You have uncommitted changes. Commit or stash them before creating a PR.")

        if repo.has_remote():
            _check_remote_state(repo, branch, warnings, info)
            _check_commits_ahead(repo, repo.integration_branch(), warnings, info)
        else:
            warnings.append(f"No remote '{repo.remote_name}' configured")
    except WorkflowError as e:
        issues.append(f"Error checking status: {e.message}")

    return WorkflowStatus(
        ready_for_pr=not issues,
        issues=tuple(issues),
        warnings=tuple(warnings),
        info=tuple(info),
    )


def prepare_pull_request(repo: GitRepository) -> PullRequestReport:
    """Run every check a branch should pass before opening a pull request."""
    status = branch_status(repo)

    try:
        last_commit = check_last_commit(repo)
    except GitOperationError:
        last_commit = None

    return PullRequestReport(
        branch=status.branch,
        branch_status=status,
        last_commit=last_commit,
        readiness=check_pr_readiness(repo),
    )
