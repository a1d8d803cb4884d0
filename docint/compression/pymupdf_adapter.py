from pathlib import Path

import pymupdf

from docint.compression.base import BasePdfCompressor, run_in_worker_thread
from docint.processor.exceptions import CompressionError


class PyMuPdfAdapter(BasePdfCompressor):
    """Shrinks PDFs with PyMuPDF: drops unused objects and deflates streams."""

    async def compress(self, input_path: Path, output_path: Path) -> Path:
        return await run_in_worker_thread(self._rewrite, input_path, output_path)

    @staticmethod
    def _rewrite(input_path: Path, output_path: Path) -> Path:
        try:
            with pymupdf.open(str(input_path)) as doc:  # type: ignore[no-untyped-call]
                doc.save(
                    str(output_path),
                    garbage=4,
                    deflate=True,
                    deflate_images=True,
                    deflate_fonts=True,
                    clean=True,
                )
            return output_path
        except CompressionError:
            raise
        except Exception as exc:
            raise CompressionError(f"pymupdf compression failed: {exc}") from exc
