"""Example enrichment client.

Returns a fixed response without network calls. Useful for local development
and tests, and as a template for new provider clients: implement
BaseEnrichmentClient and register the provider in EnrichmentClientFactory.
"""

from typing import ClassVar

from cvscan.enrichment.base import BaseEnrichmentClient
from cvscan.enrichment.models import EnrichmentResult
from cvscan.enrichment.validator import validate_and_build


class ExampleEnrichmentClient(BaseEnrichmentClient):
    """Offline client answering every query with the same two hits."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "answer": "Example summary generated without contacting a search provider.",
        "results": [
            {
                "title": "Example profile",
                "url": "https://example.com/profile",
                "content": "Example professional profile.",
                "score": 0.9,
            },
            {
                "title": "Example publication",
                "url": "https://example.com/publication",
                "content": "Example publication listing.",
                "score": 0.5,
            },
        ],
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE
        self.queries: list[str] = []

    def search(self, query: str) -> EnrichmentResult:
        self.queries.append(query)
        return validate_and_build(self._response)
