"""Command-line entry point: analyze one local file and print the JSON result.

Usage:
    python -m docint.main scan.pdf
    python -m docint.main photo.png --content-type image/png
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from docint.config.capabilities import detect_capabilities
from docint.config.exceptions import ConfigurationError
from docint.config.settings import Settings
from docint.logging.logger import Log
from docint.processor.exceptions import ProcessorError
from docint.processor.file_loader import UploadStore
from docint.processor.models import ErrorResponse
from docint.processor.processor import build_processor


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="docint",
        description="Extract per-page sentences from a document via layout analysis.",
    )
    parser.add_argument("file", type=Path, help="PDF or image to analyze")
    parser.add_argument(
        "--content-type",
        default=None,
        help="declared content type (default: application/pdf)",
    )
    return parser.parse_args(argv)


async def run(settings: Settings, source: Path, content_type: str | None) -> int:
    """Copy the file into the upload store, process it and print the body."""
    capabilities = detect_capabilities(settings)
    processor = build_processor(settings, capabilities)
    store = UploadStore(Path(settings.upload_dir), settings.max_upload_bytes)
    try:
        if source.is_file():
            try:
                upload = store.save_copy(source, content_type)
            except ProcessorError as exc:
                outcome = ErrorResponse.from_exception(exc)
            else:
                outcome = await processor.handle(upload)
        else:
            outcome = ErrorResponse(
                status_code=400,
                error="file is required as multipart/form-data field 'file'",
            )
    finally:
        await processor.aclose()

    print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
    return 1 if isinstance(outcome, ErrorResponse) else 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: configure -> detect tools -> process one file."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        settings.require_remote()
    except ConfigurationError as exc:
        Log.error(str(exc))
        return 2
    return asyncio.run(run(settings, args.file, args.content_type))


if __name__ == "__main__":
    sys.exit(main())
