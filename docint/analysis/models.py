from dataclasses import dataclass
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    """Lifecycle of a remote analysis job."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def parse(cls, raw: object) -> "JobStatus":
        """Map a remote status string; anything unknown counts as still running."""
        value = str(raw or "").lower()
        if value == cls.SUCCEEDED.value:
            return cls.SUCCEEDED
        if value == cls.FAILED.value:
            return cls.FAILED
        return cls.RUNNING


class PollState(str, Enum):
    """States of the poll loop itself, as opposed to the remote job."""

    RUNNING = "running"
    BACKING_OFF = "backing_off"
    TERMINAL = "terminal"


@dataclass
class AnalysisJob:
    """Handle of a submitted analysis plus its last known state."""

    operation_location: str
    status: JobStatus = JobStatus.RUNNING
    result: dict[str, Any] | None = None


@dataclass(frozen=True)
class PollPolicy:
    """Timing of the poll loop, in seconds."""

    timeout: float = 120.0
    interval: float = 1.0
    max_backoff: float = 30.0
    server_error_delay: float = 2.0

    def backoff_for(self, consecutive_rate_limits: int) -> float:
        """Wait after the n-th consecutive 429: interval doubling, capped."""
        exponent = max(consecutive_rate_limits - 1, 0)
        return min(self.interval * 2**exponent, self.max_backoff)


@dataclass(frozen=True)
class RawPage:
    """One page-like entry of an analysis result before segmentation."""

    page_number: int | None
    raw_text: str
