from enum import Enum

NO_FILE_MESSAGE = "No file provided"
UNSUPPORTED_TYPE_MESSAGE = "Only PDF files are supported"
EMPTY_FILE_MESSAGE = "File is empty"
UPLOAD_FAILED_MESSAGE = "Failed to upload PDF"
RECORD_FAILED_MESSAGE = "Failed to create scan record"
EXTRACTION_FAILED_MESSAGE = "Could not read text from the PDF"
ENRICHMENT_FAILED_MESSAGE = "Web search failed"
UPDATE_FAILED_MESSAGE = "Failed to update scan"
INTERNAL_ERROR_MESSAGE = "Unexpected error while scanning the PDF"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STORE = "store"
    PERSISTENCE = "persistence"
    EXTRACTION = "extraction"
    ENRICHMENT = "enrichment"
    INTERNAL = "internal"


class ScanError(Exception):
    """Pipeline failure whose message is safe to show to the caller."""

    def __init__(self, reason: str, *, kind: ErrorKind, scan_id: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.kind = kind
        self.scan_id = scan_id


class ValidationError(ScanError):
    """Raised when an upload is rejected before any side effect."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason, kind=ErrorKind.VALIDATION)
