"""Conventional Commits validation using Chain of Responsibility pattern.

Each handler records errors and warnings on a shared ``ValidationContext``.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..models import CommitType, CommitValidationResult

HEADER_PATTERN = re.compile(r"(\w+)(\([^)]+\))?(!)?:\s+(.+)", re.ASCII)
IMPERATIVE_PATTERN = re.compile(
    r"(add|update|fix|remove|create|delete|implement|refactor|improve|change)\b",
    re.IGNORECASE,
)
VALID_TYPES = [t.value for t in CommitType]

MAX_HEADER_LENGTH = 72
MAX_SUBJECT_LENGTH = 50
MAX_BODY_LENGTH = 1000


@dataclass(frozen=True)
class CommitHeader:
    type: str
    scope: Optional[str]
    breaking: bool
    subject: str


def parse_header(header: str) -> Optional[CommitHeader]:
    """Split a ``type(scope)!: subject`` header, or return None if it does not match."""
    match = HEADER_PATTERN.fullmatch(header)
    if not match:
        return None
    commit_type, scope, breaking, subject = match.groups()
    return CommitHeader(
        type=commit_type,
        scope=scope[1:-1] if scope else None,
        breaking=bool(breaking),
        subject=subject,
    )


@dataclass
class ValidationContext:
    message: str
    header: str = ""
    body: str = ""
    parsed: Optional[CommitHeader] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_result(self) -> CommitValidationResult:
        return CommitValidationResult(
            valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
        )


class ValidationHandler(ABC):
    """Abstract base class for validation handlers."""

    def __init__(self, next_handler: Optional["ValidationHandler"] = None):
        self.next_handler = next_handler

    def handle(self, context: ValidationContext) -> ValidationContext:
        """Run this handler and hand the context on unless it asked to stop."""
        if self.validate(context) and self.next_handler:
            return self.next_handler.handle(context)
        return context

    @abstractmethod
    def validate(self, context: ValidationContext) -> bool:
        """Record findings on the context; return False to stop the chain."""


class EmptyMessageHandler(ValidationHandler):
    """Rejects empty messages and splits the rest into header and body."""

    def validate(self, context: ValidationContext) -> bool:
        message = context.message.strip() if context.message else ""
        if not message:
            context.errors.append("Commit message cannot be empty")
            return False
        lines = message.split("\n")
        context.header = lines[0]
        context.body = "\n".join(lines[1:])
        return True


class HeaderLengthHandler(ValidationHandler):
    # The threshold is 72 but the advertised guideline is 50.
    def validate(self, context: ValidationContext) -> bool:
        if len(context.header) > MAX_HEADER_LENGTH:
            context.warnings.append(
                f"Header should be 50 characters or less (currently {len(context.header)})"
            )
        return True


class ConventionalFormatHandler(ValidationHandler):
    def validate(self, context: ValidationContext) -> bool:
        context.parsed = parse_header(context.header)
        if context.parsed is None:
            context.errors.append(
                "Commit message does not follow Conventional Commits format.\n"
                "Expected: <type>(<scope>): <subject>\n"
                "Example: feat(auth): add login functionality"
            )
        return True


class HeaderPartHandler(ValidationHandler):
    """Base for handlers that only apply to a well-formed header."""

    def validate(self, context: ValidationContext) -> bool:
        if context.parsed is not None:
            self.check(context.parsed, context)
        return True

    @abstractmethod
    def check(self, header: CommitHeader, context: ValidationContext) -> None:
        pass


class CommitTypeHandler(HeaderPartHandler):
    def check(self, header: CommitHeader, context: ValidationContext) -> None:
        if header.type not in VALID_TYPES:
            context.warnings.append(
                f'Type "{header.type}" is not a standard conventional commit type.\n'
                f"Common types: {', '.join(VALID_TYPES)}"
            )


class SubjectHandler(HeaderPartHandler):
    def check(self, header: CommitHeader, context: ValidationContext) -> None:
        if not header.subject:
            context.errors.append("Subject cannot be empty")
        elif len(header.subject) > MAX_SUBJECT_LENGTH:
            context.warnings.append("Subject should be concise (50 characters or less)")


class ImperativeMoodHandler(HeaderPartHandler):
    """Heuristic only: the subject should open with a known imperative verb."""

    def check(self, header: CommitHeader, context: ValidationContext) -> None:
        if not IMPERATIVE_PATTERN.match(header.subject):
            context.warnings.append(
                'Subject should use imperative mood (e.g., "add" not "added")'
            )


class BodyLengthHandler(ValidationHandler):
    def validate(self, context: ValidationContext) -> bool:
        if len(context.body) > MAX_BODY_LENGTH:
            context.warnings.append("Body should be concise (1000 characters or less)")
        return True


def create_validation_chain() -> ValidationHandler:
    """Create the default validation chain."""
    body_length = BodyLengthHandler()
    imperative = ImperativeMoodHandler(body_length)
    subject = SubjectHandler(imperative)
    commit_type = CommitTypeHandler(subject)
    conventional = ConventionalFormatHandler(commit_type)
    header_length = HeaderLengthHandler(conventional)
    return EmptyMessageHandler(header_length)


_DEFAULT_CHAIN = create_validation_chain()


def validate_commit_message(message: str) -> CommitValidationResult:
    """Validate a commit message against the Conventional Commits format.

    Errors make the message invalid; warnings are advisory only. Never raises.
    """
    return _DEFAULT_CHAIN.handle(ValidationContext(message=message)).to_result()
