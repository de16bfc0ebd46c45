import re
import uuid
from pathlib import PurePath

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_MAX_NAME_LENGTH = 120


def sanitize_filename(filename: str) -> str:
    """Reduce an uploaded filename to a safe single path segment."""
    name = PurePath(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[-_MAX_NAME_LENGTH:] or "upload.pdf"


def build_object_path(filename: str) -> str:
    """Build a unique object path: ``{uuid4 hex}-{sanitized filename}``."""
    return f"{uuid.uuid4().hex}-{sanitize_filename(filename)}"
