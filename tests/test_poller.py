import threading

import pytest

from lfsml.exceptions import (
    APIError,
    JobCancelledError,
    JobConnectionLostError,
    JobFailedError,
    JobTimeoutError,
    ResourceNotFoundError,
    TransportError,
    ValidationError,
)
from lfsml.training.job import JobStatus
from lfsml.training.poller import CancellationToken, JobPoller

from .conftest import completed, failed, running


def test_track_yields_every_snapshot_then_stops(http, poller):
    http.get.side_effect = [running(10), running(60), completed(), running(99)]

    snapshots = list(poller.track("job-1"))

    assert [(s.status, s.progress) for s in snapshots] == [
        (JobStatus.RUNNING, 10),
        (JobStatus.RUNNING, 60),
        (JobStatus.COMPLETED, 100),
    ]
    assert http.get.call_count == 3
    http.get.assert_called_with("/api/training/status/job-1")
    assert snapshots[-1].results.metrics["accuracy"] == 0.81
    assert snapshots[0].results is None


def test_failed_job_raises_with_server_message(http, poller):
    http.get.side_effect = [running(20), failed("insufficient data"), running(50)]

    seen = []
    with pytest.raises(JobFailedError) as excinfo:
        for job in poller.track("job-2"):
            seen.append(job)

    assert str(excinfo.value) == "insufficient data"
    assert excinfo.value.job_id == "job-2"
    assert seen[-1].status == JobStatus.FAILED
    assert seen[-1].error == "insufficient data"
    assert http.get.call_count == 2


def test_wait_reports_failure_after_final_update(http, poller):
    http.get.side_effect = [failed("insufficient data")]
    updates = []

    with pytest.raises(JobFailedError, match="insufficient data"):
        poller.wait("job-2", on_update=updates.append)

    assert len(updates) == 1


def test_progress_never_goes_backwards(http, poller):
    http.get.side_effect = [running(10), running(50), running(30), running(70), completed()]

    progress = [job.progress for job in poller.track("job-3")]

    assert progress == [10, 50, 50, 70, 100]
    assert progress == sorted(progress)


@pytest.mark.parametrize("job_id", ["", "   ", None])
def test_invalid_job_id_fails_before_any_request(http, poller, job_id):
    with pytest.raises(ValidationError):
        poller.track(job_id)
    with pytest.raises(ValidationError):
        poller.track_in_background(job_id)

    http.get.assert_not_called()


def test_transient_transport_errors_are_retried(http, poller):
    http.get.side_effect = [running(10), TransportError("connection reset"), running(40), completed()]

    snapshots = list(poller.track("job-4"))

    assert [s.progress for s in snapshots] == [10, 40, 100]
    assert http.get.call_count == 4


def test_server_errors_are_retried(http, poller):
    http.get.side_effect = [APIError("bad gateway", status_code=502), completed()]

    assert poller.wait("job-4").status == JobStatus.COMPLETED


def test_exhausted_retries_raise_connection_lost(http, poller):
    http.get.side_effect = [running(30)] + [TransportError("timed out")] * 3

    with pytest.raises(JobConnectionLostError) as excinfo:
        list(poller.track("job-5"))

    assert not isinstance(excinfo.value, JobFailedError)
    assert excinfo.value.last_job.progress == 30
    # one successful poll, then the first attempt plus max_retries=2
    assert http.get.call_count == 4


def test_unknown_job_is_not_retried(http, poller):
    http.get.side_effect = ResourceNotFoundError("Job not found")

    with pytest.raises(ResourceNotFoundError):
        poller.wait("missing")

    assert http.get.call_count == 1


def test_unexpected_status_is_an_api_error(http, poller):
    http.get.side_effect = [{"status": "exploded", "progress": 5}]

    with pytest.raises(APIError, match="Unexpected job status"):
        poller.wait("job-6")


def test_timeout(http):
    ticks = iter([0.0, 5.0, 11.0])
    poller = JobPoller(http, poll_interval=0, clock=lambda: next(ticks))
    http.get.side_effect = [running(10), running(20), running(30)]

    with pytest.raises(JobTimeoutError):
        list(poller.track("job-7", timeout=10))

    assert http.get.call_count == 2


def test_cancelled_token_stops_polling(http, poller):
    token = CancellationToken()
    http.get.side_effect = [running(10), running(20), completed()]

    stream = poller.track("job-8", cancel_token=token)
    first = next(stream)
    token.cancel()

    with pytest.raises(JobCancelledError):
        next(stream)
    assert first.progress == 10
    assert http.get.call_count == 1


def test_background_tracking_returns_final_snapshot(http, poller):
    http.get.side_effect = [running(10), running(60), completed()]
    updates = []

    handle = poller.track_in_background("job-9", on_update=updates.append)
    job = handle.result(timeout=5)

    assert handle.done()
    assert job.status == JobStatus.COMPLETED
    assert handle.latest is job
    assert [u.progress for u in updates] == [10, 60, 100]


def test_background_failure_is_reraised(http, poller):
    http.get.side_effect = [failed("insufficient data")]

    handle = poller.track_in_background("job-10")

    with pytest.raises(JobFailedError, match="insufficient data"):
        handle.result(timeout=5)


def test_cancel_while_waiting_leaves_no_polling_behind(http):
    poller = JobPoller(http, poll_interval=30)
    http.get.return_value = running(10)
    first_snapshot = threading.Event()

    handle = poller.track_in_background("job-11", on_update=lambda job: first_snapshot.set())
    assert first_snapshot.wait(5)
    handle.cancel()

    with pytest.raises(JobCancelledError):
        handle.result(timeout=5)
    assert http.get.call_count == 1


def test_next_status_request_waits_for_previous_snapshot(http):
    events = []
    responses = iter([running(20), running(50), running(80), completed()])

    def status(endpoint):
        events.append("request")
        return next(responses)

    http.get.side_effect = status
    poller = JobPoller(http, poll_interval=0)

    for job in poller.track("job-12"):
        events.append(f"snapshot {job.progress}")

    assert events == [
        "request", "snapshot 20",
        "request", "snapshot 50",
        "request", "snapshot 80",
        "request", "snapshot 100",
    ]
