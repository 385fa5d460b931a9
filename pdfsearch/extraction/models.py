from collections.abc import Iterator
from dataclasses import dataclass, field

from pdfsearch.ocr.models import FragmentKind, TextFragment


@dataclass(frozen=True)
class BackoffPolicy:
    """Deterministic capped exponential backoff between status polls."""

    base_seconds: float = 2.0
    factor: float = 1.5
    cap_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.base_seconds <= 0:
            raise ValueError("base_seconds must be positive")
        if self.factor < 1:
            raise ValueError("factor must be at least 1")
        if self.cap_seconds < self.base_seconds:
            raise ValueError("cap_seconds must not be smaller than base_seconds")

    def intervals(self) -> Iterator[float]:
        """Yield wait intervals forever: base, base*factor, ... capped at cap."""
        interval = self.base_seconds
        while True:
            yield interval
            interval = min(interval * self.factor, self.cap_seconds)


@dataclass
class ExtractionJob:
    """In-flight state of one orchestration. Discarded after the outcome."""

    handle: str
    job_id: str
    started_at: float
    fragments: list[TextFragment] = field(default_factory=list)
    interval: float = 0.0
    next_token: str | None = None
    polls: int = 0
    pages: int = 0

    def elapsed(self, now: float) -> float:
        return now - self.started_at

    def accept(self, fragments: list[TextFragment], next_token: str | None) -> None:
        self.fragments.extend(fragments)
        self.next_token = next_token
        self.pages += 1


@dataclass(frozen=True)
class ExtractedText:
    """Final text of a succeeded job."""

    job_id: str
    text: str
    line_count: int


def assemble_text(fragments: list[TextFragment]) -> tuple[str, int]:
    """Join LINE fragments in arrival order with newlines.

    Returns the text and the number of lines it contains.
    """
    lines = [fragment.text for fragment in fragments if fragment.kind == FragmentKind.LINE]
    return "\n".join(lines), len(lines)
