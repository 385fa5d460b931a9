import io

import pdfplumber

from pdfsearch.pdf.exceptions import PdfReadError


class PdfPlumberReader:
    """Reads page counts and text lines from PDF bytes using pdfplumber."""

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfReadError(f"pdfplumber could not open document: {exc}") from exc

    def extract_lines(self, pdf_bytes: bytes) -> list[list[str]]:
        """Return the non-blank text lines of each page, in page order."""
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfReadError(f"pdfplumber extraction failed: {exc}") from exc
        return [
            [line.strip() for line in text.splitlines() if line.strip()]
            for text in pages
        ]
