import io
from collections.abc import Callable

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def pdf_factory() -> Callable[[str], bytes]:
    """Render a one-page PDF holding the given line of text."""

    def render(text: str) -> bytes:
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=letter)
        c.drawString(72, 720, text)
        c.save()
        return buf.getvalue()

    return render
