class EnrichmentError(Exception):
    """Raised when the web search provider cannot produce results."""


class EnrichmentConfigError(EnrichmentError):
    """Raised when the provider is not configured (e.g. missing API key)."""


class EnrichmentNetworkError(EnrichmentError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class EnrichmentResponseError(EnrichmentError):
    """Raised when the provider answers with an error status or a malformed body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
