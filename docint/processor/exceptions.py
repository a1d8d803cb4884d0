from typing import ClassVar


class ProcessorError(Exception):
    """Base exception for every failure the pipeline reports to a caller.

    Each subclass carries the HTTP-like status the outer layer should answer
    with. ``payload`` holds an upstream body, kept verbatim for diagnosis.
    """

    status_code: ClassVar[int] = 500

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload


class MissingFileError(ProcessorError):
    """Raised when the upload is absent or empty."""

    status_code = 400


class UnsupportedMediaTypeError(ProcessorError):
    """Raised when an oversized file has a type that cannot be compressed."""

    status_code = 415


class CapabilityUnavailableError(ProcessorError):
    """Raised when compression is needed but no compressor was found at startup."""

    status_code = 413


class PayloadTooLargeError(ProcessorError):
    """Raised when a file exceeds a hard size limit."""

    status_code = 413


class UpstreamSubmitError(ProcessorError):
    """Raised when the analysis service does not accept a submission."""


class NoOperationLocationError(UpstreamSubmitError):
    """Raised when a submission is accepted without a location to poll."""


class OperationFailedError(ProcessorError):
    """Raised when the remote analysis job reports failure."""


class PollTimeoutError(ProcessorError):
    """Raised when the job does not finish before the poll deadline."""


class PollError(ProcessorError):
    """Raised on a non-recoverable transport or HTTP error while polling."""


class InternalError(ProcessorError):
    """Raised for anything unexpected."""


class CompressionError(InternalError):
    """Raised when a compressor fails to produce its output."""
