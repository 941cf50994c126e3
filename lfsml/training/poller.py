"""
Client-side tracking of long-running training jobs

A job is started with POST /api/training/start and then observed through
GET /api/training/status/{job_id} until it reaches a terminal state
(completed or failed). Requests for one job are issued strictly one after
another: the next status request is only scheduled once the previous
response has been handled.
"""

import logging
import threading
import time
from typing import Callable, Iterator, Optional

from ..exceptions import (
    APIError,
    JobCancelledError,
    JobConnectionLostError,
    JobFailedError,
    JobTimeoutError,
    TransportError,
    ValidationError,
)
from ..http_client import HTTPClient
from .job import JobStatus, TrainingJob

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BACKOFF = 1.0


class CancellationToken:
    """Caller-owned switch that stops polling"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`; returns True as soon as the token is cancelled"""
        return self._event.wait(seconds)


def _check_job_id(job_id) -> str:
    if not isinstance(job_id, str) or not job_id.strip():
        raise ValidationError(f"Invalid job id: {job_id!r}")
    return job_id


def _is_retryable(error: Exception) -> bool:
    if isinstance(error, TransportError):
        return True
    return isinstance(error, APIError) and error.status_code is not None and error.status_code >= 500


class JobPoller:
    """
    Polls the training status endpoint until a job is terminal

    Example:
        >>> poller = JobPoller(http, poll_interval=2.0)
        >>> for job in poller.track(job_id):
        ...     print(f"{job.progress}% {job.message}")
    """

    def __init__(self,
                 http_client: HTTPClient,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 max_retries: int = DEFAULT_MAX_RETRIES,
                 retry_backoff: float = DEFAULT_RETRY_BACKOFF,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            http_client: HTTP client for API requests
            poll_interval: Seconds between two status requests
            max_retries: Transport failures tolerated in a row before giving up
            retry_backoff: Base delay of the exponential retry backoff, in seconds
            clock: Monotonic clock used for timeouts
        """
        self.http = http_client
        self.poll_interval = poll_interval
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self._clock = clock

    def fetch(self, job_id: str) -> TrainingJob:
        """Issue a single status request"""
        _check_job_id(job_id)
        data = self.http.get(f'/api/training/status/{job_id}')
        return TrainingJob.from_dict(job_id, data)

    def track(self,
              job_id: str,
              cancel_token: Optional[CancellationToken] = None,
              timeout: Optional[float] = None) -> Iterator[TrainingJob]:
        """
        Stream snapshots of a job until it is terminal

        The job id is checked before anything is sent, so an invalid id fails
        here rather than on the first iteration.

        Args:
            job_id: Identifier returned by the start call
            cancel_token: Token that stops polling when cancelled
            timeout: Give up after this many seconds (None polls indefinitely)

        Yields:
            TrainingJob: Every observed snapshot, the terminal one included

        Raises:
            ValidationError: If job_id is empty
            JobFailedError: After yielding a failed snapshot
            JobConnectionLostError: If status requests keep failing at transport level
            JobTimeoutError: If timeout elapses first
            JobCancelledError: If cancel_token is cancelled
        """
        _check_job_id(job_id)
        return self._track(job_id, cancel_token or CancellationToken(), timeout)

    def _track(self, job_id: str, token: CancellationToken, timeout: Optional[float]) -> Iterator[TrainingJob]:
        deadline = None if timeout is None else self._clock() + timeout
        last: Optional[TrainingJob] = None

        while True:
            if token.cancelled:
                raise JobCancelledError(f"Tracking of job {job_id} was cancelled", job_id=job_id)

            job = self._poll_once(job_id, token, last)

            if last is not None and not job.is_terminal and job.progress < last.progress:
                logger.warning(f"Job {job_id} reported progress {job.progress}% after {last.progress}%, keeping {last.progress}%")
                job = job.with_progress(last.progress)

            logger.debug(f"Job {job_id}: {job}")
            last = job
            yield job

            if job.status == JobStatus.COMPLETED:
                return
            if job.status == JobStatus.FAILED:
                raise JobFailedError(job.error, job_id=job_id, job=job)

            if deadline is not None and self._clock() >= deadline:
                raise JobTimeoutError(f"Job {job_id} did not finish within {timeout}s", job_id=job_id)

            if token.wait(self.poll_interval):
                raise JobCancelledError(f"Tracking of job {job_id} was cancelled", job_id=job_id)

    def _poll_once(self, job_id: str, token: CancellationToken, last: Optional[TrainingJob]) -> TrainingJob:
        attempt = 0
        while True:
            try:
                return self.fetch(job_id)
            except (TransportError, APIError) as e:
                if not _is_retryable(e):
                    raise
                if attempt >= self.max_retries:
                    raise JobConnectionLostError(
                        f"Lost connection to job {job_id} after {attempt + 1} failed status requests: {e}",
                        job_id=job_id,
                        last_job=last
                    ) from e
                delay = self.retry_backoff * (2 ** attempt)
                attempt += 1
                logger.warning(f"Status request for job {job_id} failed ({e}), retry {attempt}/{self.max_retries} in {delay:.1f}s")
                if token.wait(delay):
                    raise JobCancelledError(f"Tracking of job {job_id} was cancelled", job_id=job_id)

    def wait(self,
             job_id: str,
             on_update: Optional[Callable[[TrainingJob], None]] = None,
             cancel_token: Optional[CancellationToken] = None,
             timeout: Optional[float] = None) -> TrainingJob:
        """
        Block until the job completes

        Args:
            job_id: Identifier returned by the start call
            on_update: Called with every snapshot, including the terminal one
            cancel_token: Token that stops polling when cancelled
            timeout: Give up after this many seconds

        Returns:
            TrainingJob: The completed snapshot (results populated)
        """
        final = None
        for job in self.track(job_id, cancel_token=cancel_token, timeout=timeout):
            final = job
            if on_update is not None:
                on_update(job)
        return final

    def track_in_background(self,
                            job_id: str,
                            on_update: Optional[Callable[[TrainingJob], None]] = None,
                            timeout: Optional[float] = None) -> 'PollHandle':
        """Run wait() on a daemon thread and return a handle to it"""
        _check_job_id(job_id)
        handle = PollHandle(self, job_id, on_update, timeout)
        handle._start()
        return handle


class PollHandle:
    """Handle to a job tracked on a background thread"""

    def __init__(self,
                 poller: JobPoller,
                 job_id: str,
                 on_update: Optional[Callable[[TrainingJob], None]] = None,
                 timeout: Optional[float] = None):
        self.job_id = job_id
        self.latest: Optional[TrainingJob] = None
        self._poller = poller
        self._on_update = on_update
        self._timeout = timeout
        self._token = CancellationToken()
        self._done = threading.Event()
        self._result: Optional[TrainingJob] = None
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name=f"poll-{job_id}", daemon=True)

    def __repr__(self) -> str:
        return f"PollHandle(job_id='{self.job_id}', done={self.done()}, latest={self.latest})"

    def _start(self):
        self._thread.start()

    def _update(self, job: TrainingJob):
        self.latest = job
        if self._on_update is not None:
            self._on_update(job)

    def _run(self):
        try:
            self._result = self._poller.wait(
                self.job_id,
                on_update=self._update,
                cancel_token=self._token,
                timeout=self._timeout
            )
        except Exception as e:
            self._error = e
        finally:
            self._done.set()

    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self):
        """Stop polling; the job keeps running on the server"""
        self._token.cancel()

    def result(self, timeout: Optional[float] = None) -> TrainingJob:
        """
        Wait for the tracked job and return its completed snapshot

        Raises:
            TimeoutError: If the job is still being tracked after `timeout` seconds
            JobError: Whatever ended tracking (failed, connection lost, cancelled, ...)
        """
        if not self._done.wait(timeout):
            raise TimeoutError(f"Job {self.job_id} is still running")
        if self._error is not None:
            raise self._error
        return self._result
