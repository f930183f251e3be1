import io
from collections.abc import Generator
from pathlib import Path

import pdfplumber

from app.pdf.base import BasePdfExtractor


class PdfPlumberAdapter(BasePdfExtractor):
    ENGINE = "pdfplumber"

    def _iter_pages(self, source: bytes | Path) -> Generator[str, None, None]:
        stream = io.BytesIO(source) if isinstance(source, bytes) else source
        with pdfplumber.open(stream) as pdf:
            for page in pdf.pages:
                yield page.extract_text() or ""
