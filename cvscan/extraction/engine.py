from collections.abc import Callable
from dataclasses import dataclass

from cvscan.extraction.heuristics import build_query, derive_subject_name
from cvscan.logging.logger import Log
from cvscan.pdf.base import BasePdfExtractor
from cvscan.pdf.exceptions import ExtractionError

NameDeriver = Callable[[str], str | None]
QueryBuilder = Callable[[str, str | None], str]


@dataclass(frozen=True)
class QueryStrategy:
    """Pair of pure functions deriving a subject name and a search query."""

    name_deriver: NameDeriver = derive_subject_name
    query_builder: QueryBuilder = build_query


@dataclass(frozen=True)
class ExtractedDocument:
    text: str
    subject_name: str | None
    search_query: str


class TextExtractionEngine:
    """Turns document bytes into text, a subject name and a search query."""

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        strategy: QueryStrategy | None = None,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._strategy = strategy if strategy is not None else QueryStrategy()

    def extract_text(self, data: bytes) -> str:
        """Raises ExtractionError when the document is unreadable or has no text."""
        text = self._pdf_extractor.extract(data)
        if not text.strip():
            raise ExtractionError("Document contains no extractable text")
        return text

    def derive_subject_name(self, text: str) -> str | None:
        return self._strategy.name_deriver(text)

    def build_query(self, text: str, name: str | None) -> str:
        return self._strategy.query_builder(text, name)

    def process(self, data: bytes) -> ExtractedDocument:
        text = self.extract_text(data)
        name = self.derive_subject_name(text)
        query = self.build_query(text, name)
        Log.info("Extracted document text", chars=len(text), subject_name=name)
        return ExtractedDocument(text=text, subject_name=name, search_query=query)
