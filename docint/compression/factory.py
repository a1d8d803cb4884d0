from collections.abc import Callable
from typing import ClassVar

from docint.compression.base import BaseImageCompressor, BasePdfCompressor
from docint.compression.ghostscript_adapter import GhostscriptAdapter
from docint.compression.pillow_adapter import PillowAdapter
from docint.compression.pymupdf_adapter import PyMuPdfAdapter
from docint.config.capabilities import Capabilities
from docint.config.settings import Settings


def _ghostscript(settings: Settings, capabilities: Capabilities) -> BasePdfCompressor | None:
    if capabilities.ghostscript_command is None:
        return None
    return GhostscriptAdapter(
        capabilities.ghostscript_command,
        quality_preset=settings.pdf_quality_preset,
    )


def _pymupdf(settings: Settings, capabilities: Capabilities) -> BasePdfCompressor | None:
    return PyMuPdfAdapter()


class PdfCompressorFactory:
    """Creates the configured PDF compressor, or None when it is unavailable."""

    ENGINES: ClassVar[
        dict[str, Callable[[Settings, Capabilities], BasePdfCompressor | None]]
    ] = {
        "ghostscript": _ghostscript,
        "pymupdf": _pymupdf,
    }

    @classmethod
    def create(cls, settings: Settings, capabilities: Capabilities) -> BasePdfCompressor | None:
        engine = settings.pdf_engine.lower()
        builder = cls.ENGINES.get(engine)
        if builder is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return builder(settings, capabilities)


class ImageCompressorFactory:
    """Creates the image compressor from settings."""

    @classmethod
    def create(cls, settings: Settings) -> BaseImageCompressor:
        return PillowAdapter(
            max_dimension=settings.image_max_dimension,
            quality=settings.image_quality,
        )
