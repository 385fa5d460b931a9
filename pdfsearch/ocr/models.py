from dataclasses import dataclass, field
from enum import StrEnum


class JobStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FragmentKind(StrEnum):
    PAGE = "page"
    LINE = "line"
    WORD = "word"
    OTHER = "other"


@dataclass(frozen=True)
class TextFragment:
    """One unit of recognized output from the OCR engine."""

    kind: FragmentKind
    text: str = ""


@dataclass(frozen=True)
class ResultPage:
    """A page of fragments fetched with a continuation token."""

    fragments: list[TextFragment] = field(default_factory=list)
    next_token: str | None = None


@dataclass(frozen=True)
class PollResult:
    """Job status plus the first page of fragments for this status check."""

    status: JobStatus
    fragments: list[TextFragment] = field(default_factory=list)
    next_token: str | None = None
