import pymupdf

from cvscan.pdf.base import BasePdfExtractor
from cvscan.pdf.exceptions import ExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise ExtractionError("pymupdf extraction failed: document is encrypted")
                pages = [page.get_text() for page in doc]
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc
        return self.join_pages(pages)
