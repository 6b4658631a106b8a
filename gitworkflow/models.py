"""Shared models for git-workflow."""
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CommitType(str, Enum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"
    PERF = "perf"
    CI = "ci"
    BUILD = "build"
    REVERT = "revert"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CommitValidationResult(_Frozen):
    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


class BranchValidationResult(_Frozen):
    valid: bool
    error: Optional[str] = None


class RemoteState(_Frozen):
    """What the remote looks like, as reported by git.

    ``branches`` holds names without the remote prefix (``develop``, not
    ``origin/develop``); ``head`` is the target of the remote's symbolic HEAD.
    """

    branches: FrozenSet[str] = frozenset()
    head: Optional[str] = None


class BranchExistence(_Frozen):
    local: bool
    remote: bool

    @property
    def any(self) -> bool:
        return self.local or self.remote


class TrackingStatus(_Frozen):
    tracking: str
    ahead: int
    behind: int

    @property
    def up_to_date(self) -> bool:
        return self.ahead == 0 and self.behind == 0


class BranchStatus(_Frozen):
    branch: str
    naming: BranchValidationResult
    tracking: Optional[TrackingStatus] = None


class WorkflowStatus(_Frozen):
    ready_for_pr: bool
    issues: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    info: Tuple[str, ...] = ()


class LastCommitCheck(_Frozen):
    message: str
    validation: CommitValidationResult


class Verdict(str, Enum):
    NOT_READY = "not_ready"
    READY_WITH_WARNINGS = "ready_with_warnings"
    READY = "ready"


class PullRequestReport(_Frozen):
    branch: str
    branch_status: BranchStatus
    last_commit: Optional[LastCommitCheck] = Field(
        default=None, description="None when the last commit could not be read"
    )
    readiness: WorkflowStatus

    @property
    def has_errors(self) -> bool:
        if self.last_commit is None or not self.last_commit.validation.valid:
            return True
        return bool(self.readiness.issues)

    @property
    def has_warnings(self) -> bool:
        return bool(self.readiness.warnings)

    @property
    def verdict(self) -> Verdict:
        if self.has_errors:
            return Verdict.NOT_READY
        if self.has_warnings:
            return Verdict.READY_WITH_WARNINGS
        return Verdict.READY
