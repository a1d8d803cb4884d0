import pytest

from docint.compression.factory import ImageCompressorFactory, PdfCompressorFactory
from docint.compression.ghostscript_adapter import GhostscriptAdapter
from docint.compression.pillow_adapter import PillowAdapter
from docint.compression.pymupdf_adapter import PyMuPdfAdapter
from docint.config.capabilities import Capabilities
from docint.config.settings import Settings


class TestPdfCompressorFactory:
    def test_creates_ghostscript_adapter_when_found(self) -> None:
        settings = Settings(pdf_engine="ghostscript")
        compressor = PdfCompressorFactory.create(settings, Capabilities(ghostscript_command="gs"))
        assert isinstance(compressor, GhostscriptAdapter)

    def test_ghostscript_missing_means_no_compressor(self) -> None:
        settings = Settings(pdf_engine="ghostscript")
        assert PdfCompressorFactory.create(settings, Capabilities()) is None

    def test_creates_pymupdf_adapter_without_ghostscript(self) -> None:
        settings = Settings(pdf_engine="pymupdf")
        compressor = PdfCompressorFactory.create(settings, Capabilities())
        assert isinstance(compressor, PyMuPdfAdapter)

    def test_is_case_insensitive(self) -> None:
        settings = Settings(pdf_engine="PyMuPDF")
        compressor = PdfCompressorFactory.create(settings, Capabilities())
        assert isinstance(compressor, PyMuPdfAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        settings = Settings(pdf_engine="unknown")
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfCompressorFactory.create(settings, Capabilities())


class TestImageCompressorFactory:
    def test_creates_pillow_adapter(self) -> None:
        compressor = ImageCompressorFactory.create(Settings())
        assert isinstance(compressor, PillowAdapter)
