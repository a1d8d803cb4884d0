import asyncio
from pathlib import Path

from docint.compression.base import BasePdfCompressor
from docint.logging.logger import Log
from docint.processor.exceptions import CompressionError


class GhostscriptAdapter(BasePdfCompressor):
    """Rewrites PDFs through the Ghostscript pdfwrite device."""

    def __init__(self, command: str, quality_preset: str = "screen") -> None:
        self._command = command
        self._quality_preset = quality_preset.lstrip("/")

    def build_args(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            "-sDEVICE=pdfwrite",
            "-dCompatibilityLevel=1.4",
            f"-dPDFSETTINGS=/{self._quality_preset}",
            "-dNOPAUSE",
            "-dQUIET",
            "-dBATCH",
            f"-sOutputFile={output_path}",
            str(input_path),
        ]

    async def compress(self, input_path: Path, output_path: Path) -> Path:
        try:
            process = await asyncio.create_subprocess_exec(
                self._command,
                *self.build_args(input_path, output_path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CompressionError(f"Ghostscript could not be started: {exc}") from exc

        try:
            _stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            await self._terminate(process)
            raise
        if process.returncode != 0:
            Log.error(
                "Ghostscript failed",
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace").strip(),
            )
            raise CompressionError(f"Ghostscript exited with code {process.returncode}")
        return output_path

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        """Kill Ghostscript and reap it before its output path is cleaned up."""
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()
        Log.warning("Ghostscript cancelled", returncode=process.returncode)
