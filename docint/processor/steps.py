from dataclasses import replace

from docint.analysis.client import AnalysisClient
from docint.analysis.normalizer import ResultNormalizer
from docint.compression.selector import CompressionSelector
from docint.logging.logger import Log
from docint.processor.exceptions import (
    MissingFileError,
    PayloadTooLargeError,
    UpstreamSubmitError,
)
from docint.processor.models import NormalizedPage, WorkingArtifact
from docint.processor.pipeline import PipelineContext, PipelineStep
from docint.text.segmenter import split_into_sentences

_MB = 1024 * 1024


class ValidateUploadStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        path = context.upload.path
        size = path.stat().st_size if path.is_file() else 0
        if size == 0:
            raise MissingFileError("file is required as multipart/form-data field 'file'")
        context.upload = replace(context.upload, size_bytes=size)
        Log.info(
            f"Received {context.upload.filename}",
            size_bytes=size,
            content_type=context.upload.content_type,
        )
        return context


class CompressStep(PipelineStep):
    def __init__(self, selector: CompressionSelector) -> None:
        self._selector = selector

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.working = await self._selector.compress(context.upload, context.scope)
        if context.working.compressed:
            Log.info(
                f"Compressed {context.upload.filename}",
                before_bytes=context.upload.size_bytes,
                after_bytes=context.working.path.stat().st_size,
            )
        return context


class CheckSizeStep(PipelineStep):
    def __init__(self, remote_max_bytes: int) -> None:
        self._remote_max_bytes = remote_max_bytes

    async def run(self, context: PipelineContext) -> PipelineContext:
        working = self._working(context)
        size = working.path.stat().st_size
        if size > self._remote_max_bytes:
            qualifier = " after compression" if working.compressed else ""
            raise PayloadTooLargeError(
                f"File too large{qualifier} ({round(size / _MB)} MB). "
                f"Analysis service limit is {round(self._remote_max_bytes / _MB)} MB."
            )
        return context

    @staticmethod
    def _working(context: PipelineContext) -> WorkingArtifact:
        if context.working is None:
            return WorkingArtifact(
                path=context.upload.path, content_type=context.upload.content_type
            )
        return context.working


class SubmitStep(PipelineStep):
    def __init__(self, client: AnalysisClient) -> None:
        self._client = client

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.working is None:
            raise ValueError("PipelineContext.working must be set before submission")
        try:
            context.job = await self._client.submit(
                context.working.path, context.working.content_type
            )
        except UpstreamSubmitError:
            raise
        except OSError as exc:
            raise UpstreamSubmitError(f"Could not read artifact for submission: {exc}") from exc
        return context


class PollStep(PipelineStep):
    def __init__(self, client: AnalysisClient) -> None:
        self._client = client

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.job is None:
            raise ValueError("PipelineContext.job must be set before polling")
        context.result = await self._client.poll(context.job)
        return context


class NormalizeStep(PipelineStep):
    def __init__(self, normalizer: ResultNormalizer) -> None:
        self._normalizer = normalizer

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_pages = self._normalizer.normalize(context.result)
        if not context.raw_pages:
            Log.warning("Analysis result contained no recognisable pages")
        return context


class SegmentStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.pages = [
            NormalizedPage(
                page_number=page.page_number,
                raw_text=page.raw_text,
                sentences=tuple(split_into_sentences(page.raw_text)),
            )
            for page in context.raw_pages
        ]
        Log.info(
            f"Segmented {context.upload.filename}",
            pages=len(context.pages),
            sentences=sum(len(page.sentences) for page in context.pages),
        )
        return context
