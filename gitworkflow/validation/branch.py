"""Branch naming convention and integration-branch policy."""
import re

from ..models import BranchValidationResult, RemoteState

BRANCH_PATTERNS = [
    re.compile(r"feature/[a-z0-9-]+"),
    re.compile(r"bugfix/[a-z0-9-]+"),
    re.compile(r"hotfix/[a-z0-9-]+"),
    re.compile(r"release/[a-z0-9-]+"),
    re.compile(r"main"),
    re.compile(r"develop"),
]

PROTECTED_BRANCHES = ("main", "master", "develop")
DEFAULT_BRANCH_CANDIDATES = ("main", "master", "develop")
INTEGRATION_BRANCH = "develop"
FALLBACK_BRANCH = "main"


def validate_branch_name(name: str) -> BranchValidationResult:
    """Check ``name`` against the supported ``<kind>/<slug>`` formats."""
    if any(pattern.fullmatch(name) for pattern in BRANCH_PATTERNS):
        return BranchValidationResult(valid=True)
    return BranchValidationResult(
        valid=False,
        error=(
            f'Branch name "{name}" does not follow convention.\n'
            "Valid formats: feature/name, bugfix/name, hotfix/name, release/name"
        ),
    )


def is_protected_branch(name: str) -> bool:
    return name in PROTECTED_BRANCHES


def detect_default_branch(state: RemoteState) -> str:
    """Pick the remote's default branch.

    The symbolic HEAD wins; otherwise the first of main, master, develop that
    exists on the remote; otherwise ``main``.
    """
    if state.head:
        return state.head
    for candidate in DEFAULT_BRANCH_CANDIDATES:
        if candidate in state.branches:
            return candidate
    return FALLBACK_BRANCH


def resolve_integration_branch(state: RemoteState) -> str:
    """Branch that feature work is rebased onto: develop when present."""
    if INTEGRATION_BRANCH in state.branches:
        return INTEGRATION_BRANCH
    return detect_default_branch(state)
