from pathlib import Path

import pytest
from PIL import Image

from docint.compression.pillow_adapter import PillowAdapter
from docint.processor.exceptions import CompressionError


class TestPillowAdapter:
    @pytest.mark.asyncio
    async def test_caps_longest_side_and_keeps_aspect_ratio(
        self, large_png_path: Path, tmp_path: Path
    ) -> None:
        adapter = PillowAdapter(max_dimension=400, quality=80)
        output = tmp_path / "out.jpg"

        result = await adapter.compress(large_png_path, output)

        assert result == output
        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert max(image.size) <= 400
            assert image.size == (400, 200)

    @pytest.mark.asyncio
    async def test_small_image_is_not_upscaled(self, tmp_path: Path) -> None:
        source = tmp_path / "small.png"
        Image.new("RGBA", (120, 80), (10, 20, 30, 128)).save(source)
        output = tmp_path / "out.jpg"

        await PillowAdapter(max_dimension=4000).compress(source, output)

        with Image.open(output) as image:
            assert image.size == (120, 80)
            assert image.mode == "RGB"

    @pytest.mark.asyncio
    async def test_reencoding_shrinks_noisy_png(
        self, large_png_path: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "out.jpg"

        await PillowAdapter(max_dimension=4000, quality=50).compress(large_png_path, output)

        assert output.stat().st_size < large_png_path.stat().st_size

    @pytest.mark.asyncio
    async def test_raises_on_unreadable_image(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.png"
        source.write_bytes(b"not an image")

        with pytest.raises(CompressionError, match="Image compression failed"):
            await PillowAdapter().compress(source, tmp_path / "out.jpg")
