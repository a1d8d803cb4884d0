from collections.abc import Sequence

import httpx

from docint.analysis.client import AnalysisClient
from docint.analysis.models import PollPolicy
from docint.analysis.normalizer import ResultNormalizer
from docint.compression.factory import ImageCompressorFactory, PdfCompressorFactory
from docint.compression.selector import CompressionSelector
from docint.config.capabilities import Capabilities
from docint.config.settings import Settings
from docint.logging.logger import Log
from docint.processor.artifacts import ArtifactScope
from docint.processor.exceptions import InternalError, ProcessorError
from docint.processor.models import AnalysisResponse, ErrorResponse, UploadedArtifact
from docint.processor.pipeline import PipelineContext, PipelineStep
from docint.processor.steps import (
    CheckSizeStep,
    CompressStep,
    NormalizeStep,
    PollStep,
    SegmentStep,
    SubmitStep,
    ValidateUploadStep,
)


class Processor:
    """Runs one upload through the analysis pipeline.

    Pipeline: validate -> compress -> check size -> submit -> poll ->
    normalize -> segment. The upload and any compressed copy are deleted on
    every exit path.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._steps = list(steps)
        self._http_client = http_client

    async def process(self, upload: UploadedArtifact) -> AnalysisResponse:
        """Process an upload and delete its temporary files.

        Raises:
            ProcessorError: every failure, unexpected ones wrapped in
                InternalError. Task cancellation propagates unchanged.
        """
        with ArtifactScope(upload.path) as scope:
            context = PipelineContext(upload=upload, scope=scope)
            try:
                for step in self._steps:
                    context = await step.run(context)
            except ProcessorError as exc:
                Log.error(
                    f"Processing {upload.filename} failed: {exc.message}",
                    status=exc.status_code,
                )
                raise
            except Exception as exc:
                Log.exception(f"Processing {upload.filename} failed unexpectedly")
                raise InternalError(str(exc) or type(exc).__name__) from exc

        return AnalysisResponse(filename=upload.filename, pages=context.pages)

    async def handle(self, upload: UploadedArtifact) -> AnalysisResponse | ErrorResponse:
        """Process an upload and map any failure to a status and message."""
        try:
            return await self.process(upload)
        except ProcessorError as exc:
            return ErrorResponse.from_exception(exc)

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()


def build_processor(
    settings: Settings,
    capabilities: Capabilities,
    http_client: httpx.AsyncClient | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    http_client = http_client if http_client is not None else httpx.AsyncClient()
    selector = CompressionSelector(
        max_size_bytes=settings.max_size_bytes,
        pdf_compressor=PdfCompressorFactory.create(settings, capabilities),
        image_compressor=ImageCompressorFactory.create(settings),
    )
    client = AnalysisClient(
        http_client=http_client,
        analyze_url=settings.resolved_analyze_url,
        api_key=settings.api_key,
        policy=PollPolicy(
            timeout=settings.timeout_seconds,
            interval=settings.poll_interval_seconds,
            max_backoff=settings.max_backoff_seconds,
            server_error_delay=settings.server_error_delay_seconds,
        ),
        submit_timeout_seconds=settings.submit_timeout_seconds,
    )
    steps: list[PipelineStep] = [
        ValidateUploadStep(),
        CompressStep(selector),
        CheckSizeStep(settings.remote_max_bytes),
        SubmitStep(client),
        PollStep(client),
        NormalizeStep(ResultNormalizer()),
        SegmentStep(),
    ]
    return Processor(steps=steps, http_client=http_client)
