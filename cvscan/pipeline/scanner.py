from pathlib import Path

from cvscan.config.settings import Settings
from cvscan.database.exceptions import PersistenceError
from cvscan.database.models import NewScanResult, ScanStatus, ScanWithResults
from cvscan.database.repositories.scan_repository import ScanRepository
from cvscan.database.repositories.scan_result_repository import ScanResultRepository
from cvscan.enrichment.base import BaseEnrichmentClient
from cvscan.enrichment.exceptions import EnrichmentError
from cvscan.enrichment.factory import EnrichmentClientFactory
from cvscan.extraction.engine import TextExtractionEngine
from cvscan.logging.logger import Log
from cvscan.pdf.exceptions import ExtractionError
from cvscan.pdf.factory import PdfExtractorFactory
from cvscan.pipeline.exceptions import (
    ENRICHMENT_FAILED_MESSAGE,
    EXTRACTION_FAILED_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    RECORD_FAILED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    ErrorKind,
    ScanError,
)
from cvscan.pipeline.models import PipelineContext, PipelineStage, ScanOutcome, UploadedFile
from cvscan.pipeline.validation import validate_upload
from cvscan.storage.base import BaseObjectStore
from cvscan.storage.exceptions import StoreError
from cvscan.storage.local_store import LocalObjectStore
from cvscan.storage.paths import build_object_path

DEFAULT_SUMMARY = "No summary available."


class Scanner:
    """Runs one upload through the ingestion-enrichment pipeline.

    Stages: validate -> store object -> create scan row -> extract -> enrich ->
    persist results -> complete scan. Stages run strictly in order and are
    never retried. A failed scan-row insert deletes the stored object; later
    failures are recorded on the scan row, which keeps the object.
    """

    def __init__(
        self,
        *,
        object_store: BaseObjectStore,
        scan_repo: ScanRepository,
        result_repo: ScanResultRepository,
        engine: TextExtractionEngine,
        enrichment_client: BaseEnrichmentClient,
        accepted_mime_type: str = "application/pdf",
        max_upload_bytes: int = 10 * 1024 * 1024,
        extracted_text_max_chars: int = 5000,
    ) -> None:
        self._object_store = object_store
        self._scan_repo = scan_repo
        self._result_repo = result_repo
        self._engine = engine
        self._enrichment_client = enrichment_client
        self._accepted_mime_type = accepted_mime_type
        self._max_upload_bytes = max_upload_bytes
        self._extracted_text_max_chars = extracted_text_max_chars

    def scan_document(self, upload: UploadedFile) -> ScanOutcome:
        """Scan one uploaded document. Never raises for pipeline failures."""
        context = PipelineContext(upload=upload)
        Log.info("Starting scan", file_name=upload.name, size=upload.size)
        try:
            result = self._run(context)
        except ScanError as exc:
            Log.error(
                "Scan failed",
                stage=context.stage.value,
                kind=exc.kind.value,
                reason=exc.reason,
                scan_id=exc.scan_id,
            )
            return ScanOutcome.failure(exc)
        except Exception:
            Log.exception("Unexpected scan failure", stage=context.stage.value)
            self._contain_unexpected(context)
            return ScanOutcome.failure(
                ScanError(INTERNAL_ERROR_MESSAGE, kind=ErrorKind.INTERNAL, scan_id=context.scan_id)
            )

        Log.info("Scan completed", scan_id=result.scan.id, results=len(result.results))
        return ScanOutcome.success(result)

    def close(self) -> None:
        self._enrichment_client.close()

    def _run(self, context: PipelineContext) -> ScanWithResults:
        self._validate(context)
        self._store_object(context)
        self._create_record(context)
        self._extract(context)
        self._enrich(context)
        return self._finalize(context)

    def _contain_unexpected(self, context: PipelineContext) -> None:
        """Leave no orphaned object and no scan stuck in processing if avoidable."""
        if context.scan is None:
            if context.object_path is not None:
                self._compensate_upload(context.object_path)
            return
        if context.scan.status is ScanStatus.PROCESSING:
            try:
                self._record_failure(context, INTERNAL_ERROR_MESSAGE)
            except Exception:
                Log.exception("Could not mark scan as failed", scan_id=context.scan.id)

    def _validate(self, context: PipelineContext) -> None:
        validate_upload(
            context.upload,
            accepted_mime_type=self._accepted_mime_type,
            max_bytes=self._max_upload_bytes,
        )

    def _store_object(self, context: PipelineContext) -> None:
        path = build_object_path(context.upload.name)
        try:
            self._object_store.put(path, context.upload.data, self._accepted_mime_type)
        except StoreError as exc:
            Log.error("Object upload failed", path=path, error=str(exc))
            raise ScanError(UPLOAD_FAILED_MESSAGE, kind=ErrorKind.STORE) from exc
        context.object_path = path
        Log.info("Document stored", path=path)

    def _create_record(self, context: PipelineContext) -> None:
        if context.object_path is None:
            raise ValueError("PipelineContext.object_path must be set before creating the scan")
        try:
            context.scan = self._scan_repo.insert_scan(
                file_name=context.upload.name,
                file_path=context.object_path,
                file_size=context.upload.size,
            )
        except PersistenceError as exc:
            Log.error("Scan insert failed", path=context.object_path, error=str(exc))
            self._compensate_upload(context.object_path)
            raise ScanError(RECORD_FAILED_MESSAGE, kind=ErrorKind.PERSISTENCE) from exc
        context.advance(PipelineStage.RECORD_CREATED)
        Log.info("Scan record created", scan_id=context.scan.id)

    def _compensate_upload(self, path: str) -> None:
        """Delete an object whose scan row could not be created."""
        try:
            self._object_store.delete(path)
        except StoreError as exc:
            Log.error("Compensation failed, object is orphaned", path=path, error=str(exc))
            return
        Log.warning("Compensated failed scan insert by deleting object", path=path)

    def _extract(self, context: PipelineContext) -> None:
        context.advance(PipelineStage.EXTRACTING)
        try:
            context.document = self._engine.process(context.upload.data)
        except ExtractionError as exc:
            Log.error("Text extraction failed", scan_id=context.scan_id, error=str(exc))
            self._record_failure(context, EXTRACTION_FAILED_MESSAGE)
            raise ScanError(
                EXTRACTION_FAILED_MESSAGE, kind=ErrorKind.EXTRACTION, scan_id=context.scan_id
            ) from exc

    def _enrich(self, context: PipelineContext) -> None:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before enrichment")
        context.advance(PipelineStage.ENRICHING)
        try:
            context.enrichment = self._enrichment_client.search(context.document.search_query)
        except EnrichmentError as exc:
            Log.error("Enrichment failed", scan_id=context.scan_id, error=str(exc))
            self._record_failure(context, ENRICHMENT_FAILED_MESSAGE)
            raise ScanError(
                ENRICHMENT_FAILED_MESSAGE, kind=ErrorKind.ENRICHMENT, scan_id=context.scan_id
            ) from exc

    def _finalize(self, context: PipelineContext) -> ScanWithResults:
        scan, document, enrichment = context.scan, context.document, context.enrichment
        if scan is None or document is None or enrichment is None:
            raise ValueError("PipelineContext is incomplete at finalization")
        context.advance(PipelineStage.FINALIZING)

        rows = [
            NewScanResult(title=item.title, url=item.url, content=item.content, score=item.score)
            for item in enrichment.results
        ]
        try:
            results = self._result_repo.insert_results(scan.id, rows)
        except PersistenceError as exc:
            Log.error("Scan results insert failed", scan_id=scan.id, error=str(exc))
            results = []
        if len(results) < len(rows):
            Log.warning(
                "Some scan results were not persisted",
                scan_id=scan.id,
                expected=len(rows),
                persisted=len(results),
            )

        try:
            completed = self._scan_repo.complete_scan(
                scan.id,
                extracted_name=document.subject_name,
                extracted_text=self._truncate(document.text),
                search_query=document.search_query,
                summary=enrichment.answer or DEFAULT_SUMMARY,
            )
        except PersistenceError as exc:
            Log.error("Scan update failed, scan left processing", scan_id=scan.id, error=str(exc))
            raise ScanError(
                UPDATE_FAILED_MESSAGE, kind=ErrorKind.PERSISTENCE, scan_id=scan.id
            ) from exc

        context.scan = completed
        context.advance(PipelineStage.DONE)
        return ScanWithResults(scan=completed, results=results)

    def _record_failure(self, context: PipelineContext, message: str) -> None:
        """Move the scan to failed with whatever artifacts were collected.

        A persistence failure here is logged; the caller still reports the
        original reason.
        """
        if context.scan is None:
            raise ValueError("PipelineContext.scan must be set before recording a failure")
        document = context.document
        try:
            context.scan = self._scan_repo.fail_scan(
                context.scan.id,
                message,
                extracted_name=document.subject_name if document else None,
                extracted_text=self._truncate(document.text) if document else None,
                search_query=document.search_query if document else None,
            )
        except PersistenceError as exc:
            Log.error("Could not mark scan as failed", scan_id=context.scan.id, error=str(exc))

    def _truncate(self, text: str) -> str:
        return text[: self._extracted_text_max_chars]


def build_scanner(settings: Settings, storage_root: Path | None = None) -> Scanner:
    """Build a Scanner with all required adapters."""
    root = storage_root if storage_root is not None else Path(settings.storage_root)
    result_repo = ScanResultRepository()
    return Scanner(
        object_store=LocalObjectStore(root=root, bucket=settings.storage_bucket),
        scan_repo=ScanRepository(result_repo=result_repo),
        result_repo=result_repo,
        engine=TextExtractionEngine(PdfExtractorFactory.create(settings)),
        enrichment_client=EnrichmentClientFactory.create(settings),
        accepted_mime_type=settings.accepted_mime_type,
        max_upload_bytes=settings.max_upload_bytes,
        extracted_text_max_chars=settings.extracted_text_max_chars,
    )
