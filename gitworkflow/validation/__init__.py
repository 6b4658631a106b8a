"""Pure validation rules for commit messages and branch names."""

from .branch import (
    detect_default_branch,
    is_protected_branch,
    resolve_integration_branch,
    validate_branch_name,
)
from .commit import CommitHeader, parse_header, validate_commit_message

__all__ = [
    "CommitHeader",
    "detect_default_branch",
    "is_protected_branch",
    "parse_header",
    "resolve_integration_branch",
    "validate_branch_name",
    "validate_commit_message",
]
