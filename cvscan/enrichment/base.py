from abc import ABC, abstractmethod

from cvscan.enrichment.models import EnrichmentResult


class BaseEnrichmentClient(ABC):
    """Contract for web search providers used to enrich a scan."""

    @abstractmethod
    def search(self, query: str) -> EnrichmentResult:
        """Run one search for ``query``.

        Raises:
            EnrichmentError: on missing configuration, provider or transport failure.
        """

    def close(self) -> None:
        """Release any resources held by the client."""
