from abc import ABC, abstractmethod
from collections.abc import Iterable

PDF_MAGIC = b"%PDF-"
PDF_HEADER_WINDOW = 1024


def has_pdf_header(pdf_bytes: bytes) -> bool:
    """True when the header starts within the first ``PDF_HEADER_WINDOW`` bytes."""
    return PDF_MAGIC in pdf_bytes[:PDF_HEADER_WINDOW]


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Extracted text, pages separated by newlines. May be empty for
            image-only documents.

        Raises:
            ExtractionError: if the bytes are not a readable PDF.
        """

    @staticmethod
    def join_pages(pages: Iterable[str]) -> str:
        """Join page texts with newlines, normalizing line endings."""
        text = "\n".join(pages).replace("\r\n", "\n").replace("\r", "\n")
        return text.strip()
