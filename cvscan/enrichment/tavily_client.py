import json

import httpx

from cvscan.enrichment.base import BaseEnrichmentClient
from cvscan.enrichment.exceptions import (
    EnrichmentConfigError,
    EnrichmentNetworkError,
    EnrichmentResponseError,
)
from cvscan.enrichment.models import EnrichmentResult
from cvscan.enrichment.validator import validate_and_build
from cvscan.logging.logger import Log

TAVILY_API_URL = "https://api.tavily.com/search"


class TavilyClient(BaseEnrichmentClient):
    """Web search via the Tavily ``/search`` endpoint.

    One POST per query; no retry and no caching.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        api_url: str = TAVILY_API_URL,
        search_depth: str = "advanced",
        max_results: int = 8,
        topic: str = "general",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout_seconds
        self._search_depth = search_depth
        self._max_results = max_results
        self._topic = topic
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()

    def build_payload(self, query: str) -> dict[str, object]:
        return {
            "query": query,
            "search_depth": self._search_depth,
            "max_results": self._max_results,
            "include_answer": True,
            "topic": self._topic,
        }

    def search(self, query: str) -> EnrichmentResult:
        if not self._api_key:
            raise EnrichmentConfigError("TAVILY_API_KEY is not set")

        Log.info("Searching Tavily", query=query)
        try:
            response = self._http.post(
                self._api_url,
                json=self.build_payload(query),
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise EnrichmentNetworkError(f"Tavily network error: {exc}") from exc

        if not response.is_success:
            Log.error(
                "Tavily API error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise EnrichmentResponseError(
                f"Tavily API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise EnrichmentResponseError(f"Tavily returned invalid JSON: {exc}") from exc

        result = validate_and_build(data)
        Log.info("Tavily results found", count=len(result.results))
        return result

    def close(self) -> None:
        if self._owns_client:
            self._http.close()
