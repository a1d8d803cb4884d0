import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx

from docint.analysis.models import AnalysisJob, JobStatus, PollPolicy, PollState
from docint.logging.logger import Log
from docint.processor.exceptions import (
    NoOperationLocationError,
    OperationFailedError,
    PollError,
    PollTimeoutError,
    UpstreamSubmitError,
)

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"
_OPERATION_LOCATION_HEADERS = ("operation-location", "operation_location")
_UPLOAD_CHUNK_BYTES = 64 * 1024

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


async def _read_chunks(path: Path) -> AsyncIterator[bytes]:
    with path.open("rb") as handle:
        while chunk := await asyncio.to_thread(handle.read, _UPLOAD_CHUNK_BYTES):
            yield chunk


class AnalysisClient:
    """Submits documents to the layout analysis service and polls the result.

    The poll loop is a small state machine (running, backing off, terminal)
    driven by one wait per iteration. Clock and sleep are injectable so the
    retry policy can be exercised without real time passing.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        analyze_url: str,
        api_key: str,
        policy: PollPolicy,
        submit_timeout_seconds: float = 60.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._http = http_client
        self._analyze_url = analyze_url
        self._api_key = api_key
        self._policy = policy
        self._submit_timeout = submit_timeout_seconds
        self._clock = clock
        self._sleep = sleep

    async def submit(self, path: Path, content_type: str) -> AnalysisJob:
        """Stream a file to the analyze endpoint and return the job handle.

        Raises:
            UpstreamSubmitError: on transport failure or a non-2xx answer.
            NoOperationLocationError: if the answer names no location to poll.
        """
        size = path.stat().st_size
        headers = {
            SUBSCRIPTION_KEY_HEADER: self._api_key,
            "Content-Type": content_type,
            "Content-Length": str(size),
        }
        try:
            response = await self._http.post(
                self._analyze_url,
                content=_read_chunks(path),
                headers=headers,
                timeout=self._submit_timeout,
            )
        except httpx.HTTPError as exc:
            raise UpstreamSubmitError(f"Analyze request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamSubmitError(
                response.text or f"Analyze request rejected with HTTP {response.status_code}",
                payload=response.text,
            )

        location = self._operation_location(response)
        if not location:
            raise NoOperationLocationError(
                "Analyze request did not return operation-location header."
            )
        Log.info("Analysis submitted", size_bytes=size, operation_location=location)
        return AnalysisJob(operation_location=location)

    async def poll(self, job: AnalysisJob) -> dict[str, Any]:
        """Poll the job until it succeeds, fails or the deadline passes.

        HTTP 429 answers back off exponentially from the poll interval up to
        the ceiling; the streak resets after any other successful poll. 5xx
        answers wait a fixed delay. Both are bounded only by the deadline.

        Raises:
            OperationFailedError: if the job reports failure.
            PollTimeoutError: if the deadline passes first.
            PollError: on any other HTTP or transport error.
        """
        started = self._clock()
        rate_limited = 0
        state = PollState.RUNNING

        while state is not PollState.TERMINAL:
            if self._clock() - started > self._policy.timeout:
                raise PollTimeoutError("Timeout polling operation result.")

            response = await self._fetch_status(job)

            if response.status_code == 429:
                rate_limited += 1
                state = PollState.BACKING_OFF
                delay = self._policy.backoff_for(rate_limited)
                Log.warning("Analysis service rate limited, backing off", delay=delay)
                await self._sleep(delay)
                continue

            if response.is_server_error:
                Log.warning(
                    "Analysis service error while polling, retrying",
                    status=response.status_code,
                )
                await self._sleep(self._policy.server_error_delay)
                continue

            if not response.is_success:
                raise PollError(
                    response.text or f"Polling failed with HTTP {response.status_code}",
                    payload=response.text,
                )

            rate_limited = 0
            state = PollState.RUNNING
            data = self._parse_body(response)
            job.status = JobStatus.parse(data.get("status"))

            if job.status is JobStatus.SUCCEEDED:
                job.result = data
                state = PollState.TERMINAL
            elif job.status is JobStatus.FAILED:
                raise OperationFailedError(
                    f"Operation failed: {response.text}", payload=data
                )
            else:
                await self._sleep(self._policy.interval)

        Log.info("Analysis succeeded", operation_location=job.operation_location)
        return data

    async def _fetch_status(self, job: AnalysisJob) -> httpx.Response:
        try:
            return await self._http.get(
                job.operation_location,
                headers={SUBSCRIPTION_KEY_HEADER: self._api_key},
            )
        except httpx.HTTPError as exc:
            raise PollError(f"Polling request failed: {exc}") from exc

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise PollError(
                f"Poll response is not JSON: {response.text}", payload=response.text
            ) from exc
        if not isinstance(data, dict):
            raise PollError(
                f"Poll response is not an object: {response.text}", payload=response.text
            )
        return data

    @staticmethod
    def _operation_location(response: httpx.Response) -> str | None:
        for header in _OPERATION_LOCATION_HEADERS:
            value = response.headers.get(header)
            if value:
                return value
        return None
