from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from docint.analysis.models import AnalysisJob, RawPage
from docint.processor.artifacts import ArtifactScope
from docint.processor.models import NormalizedPage, UploadedArtifact, WorkingArtifact


@dataclass(slots=True)
class PipelineContext:
    upload: UploadedArtifact
    scope: ArtifactScope
    working: WorkingArtifact | None = None
    job: AnalysisJob | None = None
    result: dict[str, Any] = field(default_factory=dict)
    raw_pages: list[RawPage] = field(default_factory=list)
    pages: list[NormalizedPage] = field(default_factory=list)


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
