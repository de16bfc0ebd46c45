from cvscan.config.settings import Settings
from cvscan.enrichment.base import BaseEnrichmentClient
from cvscan.enrichment.example_client import ExampleEnrichmentClient
from cvscan.enrichment.tavily_client import TavilyClient


class EnrichmentClientFactory:
    """Creates the configured enrichment client."""

    PROVIDERS = ("example", "tavily")

    @classmethod
    def create(cls, settings: Settings) -> BaseEnrichmentClient:
        """Create an enrichment client from application settings.

        A missing Tavily key is not rejected here; the first search raises
        EnrichmentConfigError so the failure is recorded on the scan.
        """
        provider = settings.enrichment_provider.strip().lower()
        if provider == "example":
            return ExampleEnrichmentClient()
        if provider == "tavily":
            return TavilyClient(
                api_key=settings.tavily_api_key,
                timeout_seconds=settings.tavily_timeout_seconds,
                api_url=settings.tavily_api_url,
                search_depth=settings.tavily_search_depth,
                max_results=settings.tavily_max_results,
                topic=settings.tavily_topic,
            )
        raise ValueError(
            f"Unknown enrichment provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
