import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _render_pdf(*pages: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """A single-page PDF with a short decision text."""
    return _render_pdf("Acordao 1234/2024 - Plenario - sobrepreco em licitacao")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """A two-page PDF with known text on each page."""
    return _render_pdf("Page one content", "Page two content")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with no text content (blank page)."""
    return _render_pdf("")
