import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from docint.logging.logger import Log


async def run_in_worker_thread(
    func: Callable[[Path, Path], Path], input_path: Path, output_path: Path
) -> Path:
    """Run a blocking compressor in a thread and outlive caller cancellation.

    A worker thread cannot be interrupted. If the awaiting task is cancelled,
    the thread is awaited before CancelledError propagates, so no output is
    written after the caller has removed its temporary files.
    """
    worker = asyncio.ensure_future(asyncio.to_thread(func, input_path, output_path))
    try:
        return await asyncio.shield(worker)
    except asyncio.CancelledError:
        await asyncio.wait([worker])
        if not worker.cancelled() and worker.exception() is not None:
            Log.warning(
                "Compression failed after cancellation",
                error=str(worker.exception()),
            )
        raise


class BasePdfCompressor(ABC):
    """Contract for all PDF compression adapters."""

    @abstractmethod
    async def compress(self, input_path: Path, output_path: Path) -> Path:
        """Write a smaller rendition of a PDF.

        Args:
            input_path: PDF to shrink. Left untouched.
            output_path: Where the rewritten PDF is written.

        Returns:
            The output path.

        Raises:
            CompressionError: if the rewrite fails for any reason.
        """


class BaseImageCompressor(ABC):
    """Contract for all raster image compression adapters."""

    output_extension: str = ".jpg"
    output_content_type: str = "image/jpeg"

    @abstractmethod
    async def compress(self, input_path: Path, output_path: Path) -> Path:
        """Re-encode an image, capping its longest side.

        Raises:
            CompressionError: if the image cannot be read or written.
        """
