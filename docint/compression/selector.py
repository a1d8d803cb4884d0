from enum import Enum
from pathlib import Path

from docint.compression.base import BaseImageCompressor, BasePdfCompressor
from docint.logging.logger import Log
from docint.processor.artifacts import ArtifactScope
from docint.processor.exceptions import (
    CapabilityUnavailableError,
    UnsupportedMediaTypeError,
)
from docint.processor.models import UploadedArtifact, WorkingArtifact

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".tiff", ".tif"})
PDF_EXTENSION = ".pdf"


class CompressionAction(str, Enum):
    NONE = "none"
    PDF = "pdf"
    IMAGE = "image"


class CompressionSelector:
    """Decides whether and how an upload is shrunk before submission."""

    def __init__(
        self,
        *,
        max_size_bytes: int,
        pdf_compressor: BasePdfCompressor | None,
        image_compressor: BaseImageCompressor,
    ) -> None:
        self._max_size_bytes = max_size_bytes
        self._pdf_compressor = pdf_compressor
        self._image_compressor = image_compressor

    def select(self, size_bytes: int, extension: str) -> CompressionAction:
        """Pick the compression for a file of this size and extension.

        Raises:
            CapabilityUnavailableError: oversized PDF and no PDF compressor.
            UnsupportedMediaTypeError: oversized file of any other type.
        """
        if size_bytes <= self._max_size_bytes:
            return CompressionAction.NONE
        extension = extension.lower()
        if extension == PDF_EXTENSION:
            if self._pdf_compressor is None:
                limit_mb = round(self._max_size_bytes / 1024 / 1024)
                raise CapabilityUnavailableError(
                    "PDF too large and server has no PDF compressor; "
                    f"cannot accept files > {limit_mb} MB."
                )
            return CompressionAction.PDF
        if extension in IMAGE_EXTENSIONS:
            return CompressionAction.IMAGE
        raise UnsupportedMediaTypeError("Unsupported file type for compression")

    async def compress(
        self, artifact: UploadedArtifact, scope: ArtifactScope
    ) -> WorkingArtifact:
        """Run the selected compression and return the artifact to submit.

        The output file is registered with ``scope`` before the compressor
        starts, so partial output is removed as well.
        """
        action = self.select(artifact.size_bytes, artifact.extension)
        if action is CompressionAction.NONE:
            return WorkingArtifact(path=artifact.path, content_type=artifact.content_type)

        Log.info(
            "Compressing oversized upload",
            action=action.value,
            size_bytes=artifact.size_bytes,
            threshold_bytes=self._max_size_bytes,
        )
        if action is CompressionAction.PDF:
            if self._pdf_compressor is None:
                raise ValueError("PDF compression selected without a PDF compressor")
            output = scope.track(self._output_path(artifact.path, PDF_EXTENSION))
            await self._pdf_compressor.compress(artifact.path, output)
            return WorkingArtifact(
                path=output, content_type=artifact.content_type, compressed=True
            )

        compressor = self._image_compressor
        output = scope.track(self._output_path(artifact.path, compressor.output_extension))
        await compressor.compress(artifact.path, output)
        return WorkingArtifact(
            path=output, content_type=compressor.output_content_type, compressed=True
        )

    @staticmethod
    def _output_path(source: Path, extension: str) -> Path:
        return source.with_name(f"{source.stem}-compressed{extension}")
