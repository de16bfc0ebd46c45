import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _render_pdf(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 14
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render_pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _render_pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _render_pdf([[]])


@pytest.fixture()
def cv_pdf_bytes() -> bytes:
    """Generate a multi-page CV whose first line is the candidate's name."""
    experience = [
        f"2015-2024  Senior Engineer, Example Corp - delivered project {n}"
        for n in range(40)
    ]
    return _render_pdf(
        [
            ["Jordan Lee", "jordan.lee@example.com", "Experience", *experience],
            ["Education", "BSc Computer Science", *experience],
            ["Skills", "Python, PostgreSQL, distributed systems", *experience],
        ]
    )


@pytest.fixture()
def corrupt_pdf_bytes(cv_pdf_bytes: bytes) -> bytes:
    """A payload with a PDF header but an unparseable body."""
    return b"%PDF-1.4\n" + bytes(reversed(cv_pdf_bytes[9:]))
