import re
from collections.abc import Iterable

from pdfsearch.database.models import DocumentRecord
from pdfsearch.search.models import SearchResult

DEFAULT_CONTEXT_CHARS = 50


def build_match_preview(text: str, query: str, context_chars: int = DEFAULT_CONTEXT_CHARS) -> str:
    """Return the text around the first case-insensitive occurrence of query.

    The window spans up to context_chars before the match and up to
    context_chars after its end, clamped to the text. Empty when the query
    does not occur verbatim, which happens for full-text hits on stemmed or
    split tokens.
    """
    if not query:
        return ""
    match = re.search(re.escape(query), text, re.IGNORECASE)
    if match is None:
        return ""
    start = max(0, match.start() - context_chars)
    end = min(len(text), match.start() + len(query) + context_chars)
    return text[start:end]


def rank_results(
    records: Iterable[DocumentRecord],
    query: str,
    context_chars: int = DEFAULT_CONTEXT_CHARS,
) -> list[SearchResult]:
    """Build previews and order results.

    Results whose preview contains the query come first; each group is
    ordered by upload time, newest first. No further tiebreakers.
    """
    results = [
        SearchResult(
            id=record.id,
            filename=record.filename,
            uploaded_at=record.uploaded_at,
            match_preview=build_match_preview(record.extracted_text, query, context_chars),
            extracted_text=record.extracted_text,
        )
        for record in records
    ]
    lowered = query.lower()
    # Two stable passes: secondary key first, then the primary key.
    results.sort(key=lambda result: result.uploaded_at, reverse=True)
    results.sort(key=lambda result: lowered not in result.match_preview.lower())
    return results
