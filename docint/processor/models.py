from dataclasses import dataclass, field
from pathlib import Path

from docint.processor.exceptions import ProcessorError


@dataclass(frozen=True)
class UploadedArtifact:
    """An uploaded file on disk, owned by a single processing run."""

    path: Path
    filename: str
    content_type: str
    size_bytes: int

    @property
    def extension(self) -> str:
        """Lower-cased extension of the declared filename, e.g. '.pdf'."""
        return Path(self.filename).suffix.lower()


@dataclass(frozen=True)
class WorkingArtifact:
    """The file actually submitted for analysis."""

    path: Path
    content_type: str
    compressed: bool = False


@dataclass(frozen=True)
class NormalizedPage:
    """Text of one page as reported by the analysis service."""

    page_number: int | None
    raw_text: str
    sentences: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "pageNumber": self.page_number,
            "rawText": self.raw_text,
            "sentences": list(self.sentences),
        }


@dataclass(frozen=True)
class AnalysisResponse:
    """Successful result of a processing run."""

    filename: str
    pages: list[NormalizedPage] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def to_dict(self) -> dict[str, object]:
        """JSON-ready body: {filename, pageCount, pages}."""
        return {
            "filename": self.filename,
            "pageCount": self.page_count,
            "pages": [page.to_dict() for page in self.pages],
        }


@dataclass(frozen=True)
class ErrorResponse:
    """Failed result of a processing run, as a status and a message."""

    status_code: int
    error: str

    @classmethod
    def from_exception(cls, exc: ProcessorError) -> "ErrorResponse":
        return cls(status_code=exc.status_code, error=exc.message)

    def to_dict(self) -> dict[str, object]:
        return {"error": self.error}
