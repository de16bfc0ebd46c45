from cvscan.enrichment.base import BaseEnrichmentClient
from cvscan.enrichment.factory import EnrichmentClientFactory
from cvscan.enrichment.models import EnrichmentItem, EnrichmentResult
from cvscan.enrichment.tavily_client import TavilyClient

__all__ = [
    "BaseEnrichmentClient",
    "EnrichmentClientFactory",
    "EnrichmentItem",
    "EnrichmentResult",
    "TavilyClient",
]
