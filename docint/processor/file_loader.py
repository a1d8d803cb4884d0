import uuid
from pathlib import Path
from typing import BinaryIO

from docint.processor.artifacts import discard_artifact
from docint.processor.exceptions import PayloadTooLargeError
from docint.processor.models import UploadedArtifact

DEFAULT_CONTENT_TYPE = "application/pdf"
_COPY_CHUNK_BYTES = 1024 * 1024


def upload_file_path(upload_dir: Path, filename: str) -> Path:
    """Build a collision-free upload path: {upload_dir}/{uuid4 hex}{ext}"""
    return upload_dir / f"{uuid.uuid4().hex}{Path(filename).suffix.lower()}"


class UploadStore:
    """Writes incoming uploads to uniquely named temporary files."""

    def __init__(self, upload_dir: Path, max_bytes: int) -> None:
        self._upload_dir = upload_dir
        self._max_bytes = max_bytes

    def save(
        self,
        source: BinaryIO,
        filename: str | None,
        content_type: str | None,
    ) -> UploadedArtifact:
        """Copy an upload stream to disk.

        Raises:
            PayloadTooLargeError: if the stream exceeds the intake limit. The
                partial file is removed first.
        """
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        path = upload_file_path(self._upload_dir, filename or "")
        written = 0
        try:
            with path.open("wb") as target:
                while chunk := source.read(_COPY_CHUNK_BYTES):
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise PayloadTooLargeError(
                            f"Upload exceeds the {self._max_bytes // (1024 * 1024)} MB limit."
                        )
                    target.write(chunk)
        except BaseException:
            discard_artifact(path)
            raise

        return UploadedArtifact(
            path=path,
            filename=filename or path.name,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            size_bytes=written,
        )

    def save_copy(self, source_path: Path, content_type: str | None = None) -> UploadedArtifact:
        """Store a copy of a local file, leaving the original untouched."""
        with source_path.open("rb") as source:
            return self.save(source, source_path.name, content_type)
