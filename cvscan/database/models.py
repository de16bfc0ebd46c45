from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ScanStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanStatus.COMPLETED, ScanStatus.FAILED)


@dataclass
class ScanRecord:
    """Represents a row from the scans table."""

    id: int
    file_name: str
    file_path: str
    file_size: int
    status: ScanStatus
    extracted_name: str | None = None
    extracted_text: str | None = None
    search_query: str | None = None
    summary: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ScanRecord":
        return cls(
            id=row["id"],
            file_name=row["file_name"],
            file_path=row["file_path"],
            file_size=row["file_size"],
            status=ScanStatus(row["status"]),
            extracted_name=row.get("extracted_name"),
            extracted_text=row.get("extracted_text"),
            search_query=row.get("search_query"),
            summary=row.get("summary"),
            error_message=row.get("error_message"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(frozen=True)
class NewScanResult:
    """A scan_results row that has not been inserted yet."""

    title: str
    url: str
    content: str | None = None
    score: float | None = None


@dataclass
class ScanResultRecord:
    """Represents a row from the scan_results table."""

    id: int
    scan_id: int
    title: str
    url: str
    content: str | None = None
    score: float | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ScanResultRecord":
        return cls(
            id=row["id"],
            scan_id=row["scan_id"],
            title=row["title"],
            url=row["url"],
            content=row.get("content"),
            score=row.get("score"),
            created_at=row.get("created_at"),
        )


@dataclass
class ScanWithResults:
    """A scan together with its enrichment hits in provider order."""

    scan: ScanRecord
    results: list[ScanResultRecord] = field(default_factory=list)
