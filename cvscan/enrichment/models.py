from dataclasses import dataclass, field


@dataclass(frozen=True)
class EnrichmentItem:
    """A single web search hit."""

    title: str
    url: str
    content: str | None = None
    score: float | None = None


@dataclass(frozen=True)
class EnrichmentResult:
    """Provider answer plus hits in the order the provider ranked them."""

    answer: str | None = None
    results: list[EnrichmentItem] = field(default_factory=list)
