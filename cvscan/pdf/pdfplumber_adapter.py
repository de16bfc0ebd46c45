import io

import pdfplumber

from cvscan.pdf.base import BasePdfExtractor, has_pdf_header
from cvscan.pdf.exceptions import ExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> str:
        if not has_pdf_header(pdf_bytes):
            raise ExtractionError("pdfplumber extraction failed: missing PDF header")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return self.join_pages(pages)
