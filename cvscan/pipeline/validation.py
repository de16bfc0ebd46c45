from cvscan.pipeline.exceptions import (
    EMPTY_FILE_MESSAGE,
    NO_FILE_MESSAGE,
    UNSUPPORTED_TYPE_MESSAGE,
    ValidationError,
)
from cvscan.pipeline.models import UploadedFile

_MIB = 1024 * 1024


def too_large_message(max_bytes: int) -> str:
    return f"File exceeds the {max_bytes / _MIB:g} MB limit"


def validate_upload(upload: UploadedFile, *, accepted_mime_type: str, max_bytes: int) -> None:
    """Reject unusable uploads. Pure check, no side effects.

    Raises:
        ValidationError: with a display-safe reason.
    """
    if not upload.name.strip():
        raise ValidationError(NO_FILE_MESSAGE)
    if upload.mime_type.strip().lower() != accepted_mime_type.lower():
        raise ValidationError(UNSUPPORTED_TYPE_MESSAGE)
    if max(upload.size, len(upload.data)) > max_bytes:
        raise ValidationError(too_large_message(max_bytes))
    if not upload.data or upload.size <= 0:
        raise ValidationError(EMPTY_FILE_MESSAGE)
