import pytest

from cvscan.pipeline.exceptions import ErrorKind, ValidationError
from cvscan.pipeline.models import UploadedFile
from cvscan.pipeline.validation import too_large_message, validate_upload

LIMIT = 10 * 1024 * 1024


def _upload(**overrides: object) -> UploadedFile:
    values: dict = {"name": "cv.pdf", "size": 4, "mime_type": "application/pdf", "data": b"%PDF"}
    values.update(overrides)
    return UploadedFile(**values)


def _validate(upload: UploadedFile) -> None:
    validate_upload(upload, accepted_mime_type="application/pdf", max_bytes=LIMIT)


class TestValidateUpload:
    def test_accepts_valid_pdf(self) -> None:
        _validate(_upload())

    def test_mime_type_comparison_ignores_case(self) -> None:
        _validate(_upload(mime_type="Application/PDF"))

    @pytest.mark.parametrize("mime_type", ["image/png", "application/msword", "", "text/plain"])
    def test_rejects_other_mime_types(self, mime_type: str) -> None:
        with pytest.raises(ValidationError, match="Only PDF files are supported") as info:
            _validate(_upload(mime_type=mime_type))
        assert info.value.kind is ErrorKind.VALIDATION

    def test_rejects_declared_size_over_limit(self) -> None:
        with pytest.raises(ValidationError, match="10 MB limit"):
            _validate(_upload(size=LIMIT + 1))

    def test_rejects_actual_size_over_limit(self) -> None:
        with pytest.raises(ValidationError, match="10 MB limit"):
            _validate(_upload(size=10, data=b"x" * (LIMIT + 1)))

    def test_accepts_file_exactly_at_limit(self) -> None:
        _validate(_upload(size=LIMIT, data=b"x" * LIMIT))

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(ValidationError, match="File is empty"):
            _validate(_upload(size=0, data=b""))

    def test_rejects_missing_name(self) -> None:
        with pytest.raises(ValidationError, match="No file provided"):
            _validate(_upload(name="  "))


def test_too_large_message_formats_fractional_limits() -> None:
    assert too_large_message(512 * 1024) == "File exceeds the 0.5 MB limit"
