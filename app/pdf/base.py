import re
from abc import ABC, abstractmethod
from collections.abc import Generator
from pathlib import Path

from app.pdf.exceptions import PdfExtractionError

_SPACE_RUNS = re.compile(r"[ \t\u00a0]+")
_BLANK_LINES = re.compile(r"\n\s*\n+")


class BasePdfExtractor(ABC):
    """Contract for PDF text extraction adapters.

    Adapters only yield raw page text; joining, whitespace cleanup, the
    character budget and error wrapping live here.
    """

    ENGINE = ""

    def __init__(self, max_chars: int | None = None) -> None:
        self._max_chars = max_chars if max_chars and max_chars > 0 else None

    @abstractmethod
    def _iter_pages(self, source: bytes | Path) -> Generator[str, None, None]:
        """Yield the text of each page, in order, from raw bytes or a file."""

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF.
        """
        return self._collect(pdf_bytes)

    def extract_file(self, path: Path) -> str:
        """Extract plain text from a PDF stored on disk."""
        if not path.is_file():
            raise PdfExtractionError(f"Cannot read {path.name}: file does not exist")
        return self._collect(path)

    def _collect(self, source: bytes | Path) -> str:
        pages: list[str] = []
        size = 0
        page_texts = self._iter_pages(source)
        try:
            for text in page_texts:
                text = _normalize(text)
                if not text:
                    continue
                pages.append(text)
                size += len(text)
                if self._max_chars is not None and size >= self._max_chars:
                    break
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"{self.ENGINE} extraction failed: {exc}") from exc
        finally:
            # Releases the open document when the budget cuts iteration short.
            page_texts.close()
        return "\n".join(pages).strip()


def _normalize(text: str) -> str:
    text = _SPACE_RUNS.sub(" ", text)
    return _BLANK_LINES.sub("\n\n", text).strip()
