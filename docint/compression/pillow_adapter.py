from pathlib import Path

from PIL import Image

from docint.compression.base import BaseImageCompressor, run_in_worker_thread
from docint.processor.exceptions import CompressionError


class PillowAdapter(BaseImageCompressor):
    """Downscales and re-encodes images as JPEG with Pillow."""

    def __init__(self, max_dimension: int = 4000, quality: int = 80) -> None:
        self._max_dimension = max_dimension
        self._quality = quality

    async def compress(self, input_path: Path, output_path: Path) -> Path:
        return await run_in_worker_thread(self._reencode, input_path, output_path)

    def _reencode(self, input_path: Path, output_path: Path) -> Path:
        try:
            with Image.open(input_path) as image:
                rgb = image.convert("RGB")
                # thumbnail() keeps the aspect ratio and never upscales.
                rgb.thumbnail((self._max_dimension, self._max_dimension))
                rgb.save(output_path, format="JPEG", quality=self._quality, optimize=True)
            return output_path
        except (OSError, Image.DecompressionBombError) as exc:
            raise CompressionError(f"Image compression failed: {exc}") from exc
