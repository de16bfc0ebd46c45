import json
import os
from pathlib import Path

from cvscan.logging.logger import Log
from cvscan.storage.base import BaseObjectStore
from cvscan.storage.exceptions import InvalidObjectPathError, StoreError


class LocalObjectStore(BaseObjectStore):
    """Stores objects as files under ``{root}/{bucket}/{path}``.

    The content type is kept in a ``{path}.meta.json`` sidecar.
    """

    FILES_ROOT = Path("/app/files")
    META_SUFFIX = ".meta.json"

    def __init__(self, root: Path | None = None, bucket: str = "cvs") -> None:
        base = root if root is not None else self.FILES_ROOT
        self._bucket_dir = (base / bucket).resolve()

    @property
    def bucket_dir(self) -> Path:
        return self._bucket_dir

    def put(self, path: str, data: bytes, content_type: str) -> None:
        """The sidecar is written before the object is moved into place."""
        target = self._resolve(path)
        tmp = target.with_name(f".{target.name}.tmp")
        meta = self._meta_path(target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            meta.write_text(json.dumps({"content_type": content_type, "size": len(data)}))
            os.replace(tmp, target)
        except OSError as exc:
            self._discard(tmp, meta)
            raise StoreError(f"Failed to write object '{path}': {exc}") from exc
        Log.debug("Stored object", path=path, size=len(data))

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
            self._meta_path(target).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to delete object '{path}': {exc}") from exc
        Log.debug("Deleted object", path=path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def load(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except OSError as exc:
            raise StoreError(f"Failed to read object '{path}': {exc}") from exc

    def content_type(self, path: str) -> str | None:
        meta = self._meta_path(self._resolve(path))
        if not meta.is_file():
            return None
        value = json.loads(meta.read_text()).get("content_type")
        return value if isinstance(value, str) else None

    def _resolve(self, path: str) -> Path:
        if not path or path.endswith(self.META_SUFFIX):
            raise InvalidObjectPathError(f"Invalid object path '{path}'")
        target = (self._bucket_dir / path).resolve()
        if not target.is_relative_to(self._bucket_dir):
            raise InvalidObjectPathError(f"Object path '{path}' escapes the bucket")
        return target

    def _meta_path(self, target: Path) -> Path:
        return target.with_name(target.name + self.META_SUFFIX)

    @staticmethod
    def _discard(*paths: Path) -> None:
        for path in paths:
            if not path.is_file():
                continue
            try:
                path.unlink()
            except OSError as exc:
                Log.warning("Could not remove partial write", path=str(path), error=str(exc))
