import logging
import secrets
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from config.settings import settings
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class LocalFileStorage:
    """Attachment files under a root directory, addressed by relative posix paths."""

    def __init__(self, root: str = settings.UPLOAD_DIR, max_bytes: int = settings.MAX_UPLOAD_MB * 1024 * 1024):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def _resolve(self, relative_path: str) -> Path:
        path = (self.root / PurePosixPath(relative_path)).resolve()
        if self.root.resolve() not in path.parents:
            raise ValidationError("Invalid file path")
        return path

    @staticmethod
    def build_path(student_id: str, file_name: str) -> str:
        """notes/{student_id}/{millis}-{random}.{ext}"""
        ext = PurePosixPath(file_name).suffix.lstrip(".") or "bin"
        return f"notes/{student_id}/{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"

    def save(self, relative_path: str, stream: BinaryIO) -> int:
        """Copy stream to storage; returns bytes written. Rejects files over the size limit."""
        target = self._resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        with open(target, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_bytes:
                    out.close()
                    target.unlink(missing_ok=True)
                    raise ValidationError(f"File exceeds the upload limit of {self.max_bytes} bytes")
                out.write(chunk)

        logger.info("Stored attachment %s (%d bytes)", relative_path, written)
        return written

    def path_for(self, relative_path: str) -> Path:
        path = self._resolve(relative_path)
        if not path.is_file():
            raise NotFoundError("Attachment file not found")
        return path

    def delete(self, relative_path: str):
        self._resolve(relative_path).unlink(missing_ok=True)


def get_storage() -> LocalFileStorage:
    return LocalFileStorage()
