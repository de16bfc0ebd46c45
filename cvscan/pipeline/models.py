import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cvscan.database.models import ScanRecord, ScanWithResults
from cvscan.enrichment.models import EnrichmentResult
from cvscan.extraction.engine import ExtractedDocument
from cvscan.pipeline.exceptions import ErrorKind, ScanError


@dataclass(frozen=True)
class UploadedFile:
    """An inbound upload as received from the presentation layer."""

    name: str
    size: int
    mime_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "UploadedFile":
        data = path.read_bytes()
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size=len(data),
            mime_type=mime_type or guessed or "application/octet-stream",
            data=data,
        )


class PipelineStage(str, Enum):
    UPLOADING = "uploading"
    RECORD_CREATED = "record_created"
    EXTRACTING = "extracting"
    ENRICHING = "enriching"
    FINALIZING = "finalizing"
    DONE = "done"


_STAGE_ORDER = list(PipelineStage)


@dataclass(slots=True)
class PipelineContext:
    """Accumulates state as one upload moves through the pipeline."""

    upload: UploadedFile
    stage: PipelineStage = PipelineStage.UPLOADING
    object_path: str | None = None
    scan: ScanRecord | None = None
    document: ExtractedDocument | None = None
    enrichment: EnrichmentResult | None = None

    @property
    def scan_id(self) -> int | None:
        return self.scan.id if self.scan is not None else None

    def advance(self, stage: PipelineStage) -> None:
        if _STAGE_ORDER.index(stage) <= _STAGE_ORDER.index(self.stage):
            raise RuntimeError(f"Cannot move pipeline from {self.stage.value} to {stage.value}")
        self.stage = stage


@dataclass(frozen=True)
class ScanOutcome:
    """Uniform result of a scan: either ``scan`` or ``error``/``kind`` is set."""

    scan: ScanWithResults | None = None
    error: str | None = None
    kind: ErrorKind | None = None
    scan_id: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, scan: ScanWithResults) -> "ScanOutcome":
        return cls(scan=scan, scan_id=scan.scan.id)

    @classmethod
    def failure(cls, error: ScanError) -> "ScanOutcome":
        return cls(error=error.reason, kind=error.kind, scan_id=error.scan_id)
