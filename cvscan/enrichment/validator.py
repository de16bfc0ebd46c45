"""Validates a raw search response body and builds typed results."""

from typing import Any

from cvscan.enrichment.exceptions import EnrichmentResponseError
from cvscan.enrichment.models import EnrichmentItem, EnrichmentResult
from cvscan.logging.logger import Log


def validate_and_build(data: Any) -> EnrichmentResult:
    """Build an EnrichmentResult from a decoded ``{answer?, results[]}`` body.

    A malformed hit is logged and skipped; the remaining hits keep their order.

    Raises:
        EnrichmentResponseError: if the body itself does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise EnrichmentResponseError("Search response must be a JSON object")
    answer = _build_answer(data.get("answer"))
    raw_results = data.get("results", [])
    if not isinstance(raw_results, list):
        raise EnrichmentResponseError("'results' must be a list")
    items: list[EnrichmentItem] = []
    for index, raw in enumerate(raw_results):
        try:
            items.append(_build_item(index, raw))
        except EnrichmentResponseError as exc:
            Log.warning("Skipping malformed search result", position=index, error=str(exc))
    return EnrichmentResult(answer=answer, results=items)


def _build_answer(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise EnrichmentResponseError("'answer' must be a string or null")
    return raw.strip() or None


def _build_item(index: int, raw: Any) -> EnrichmentItem:
    if not isinstance(raw, dict):
        raise EnrichmentResponseError(f"results[{index}] must be an object")
    title = raw.get("title")
    url = raw.get("url")
    if not isinstance(title, str) or not title:
        raise EnrichmentResponseError(f"results[{index}].title must be a non-empty string")
    if not isinstance(url, str) or not url:
        raise EnrichmentResponseError(f"results[{index}].url must be a non-empty string")

    content = raw.get("content")
    if content is not None and not isinstance(content, str):
        raise EnrichmentResponseError(f"results[{index}].content must be a string or null")

    score = raw.get("score")
    if score is not None:
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise EnrichmentResponseError(f"results[{index}].score must be a number or null")
        score = float(score)

    return EnrichmentItem(title=title, url=url, content=content, score=score)
