import threading
import time

import pytest

from lfsml.exceptions import APIError, JobFailedError, ValidationError
from lfsml.training import TrainingManager, TrainingOptions, TrainingSession, parse_param_grid
from lfsml.training.job import JobStatus
from lfsml.training.poller import JobPoller

from .conftest import completed, failed, running

MODEL_TYPES = [
    {"value": "random_forest", "label": "Random Forest"},
    {"value": "xgboost", "label": "XGBoost"},
]


@pytest.fixture
def manager(http, poller):
    return TrainingManager(http, poller=poller, interactive=False)


def test_default_payload_includes_cv_folds():
    payload = TrainingOptions().to_payload("random_forest")

    assert payload == {
        "model_type": "random_forest",
        "perform_cv": True,
        "perform_tuning": False,
        "use_param_grid": False,
        "cv_folds": 5,
    }


def test_payload_without_cv_omits_folds():
    payload = TrainingOptions(perform_cv=False).to_payload("xgboost")

    assert "cv_folds" not in payload


def test_param_grid_only_sent_with_tuning():
    options = TrainingOptions(use_param_grid=True)
    assert "param_grid" not in options.to_payload("xgboost")

    options.perform_tuning = True
    assert options.to_payload("xgboost")["param_grid"] == {
        "max_depth": [5, 10],
        "learning_rate": [0.05, 0.1],
        "n_estimators": [200, 300],
    }


def test_invalid_cv_folds_rejected():
    with pytest.raises(ValidationError, match="cv_folds"):
        TrainingOptions(cv_folds=6).to_payload("xgboost")


def test_parse_param_grid_keeps_non_numeric_tokens():
    grid = parse_param_grid({"criterion": "gini, entropy", "max_depth": [3, None], "C": 1.5})

    assert grid == {"criterion": ["gini", "entropy"], "max_depth": [3, None], "C": [1.5]}


def test_parse_param_grid_rejects_empty_entry():
    with pytest.raises(ValidationError):
        parse_param_grid({"max_depth": " , "})


def test_start_returns_job_id(http, manager):
    http.post.return_value = {"job_id": "abc"}

    assert manager.start("random_forest") == "abc"
    endpoint, payload = http.post.call_args[0]
    assert endpoint == "/api/training/start"
    assert payload["model_type"] == "random_forest"


def test_start_without_job_id_is_an_error(http, manager):
    http.post.return_value = {"detail": "queued"}

    with pytest.raises(APIError):
        manager.start("random_forest")


def test_train_waits_for_completion(http, manager):
    http.post.return_value = {"job_id": "abc"}
    http.get.side_effect = [running(30), completed()]
    updates = []

    job = manager.train("random_forest", on_update=updates.append)

    assert job.status == JobStatus.COMPLETED
    assert [u.progress for u in updates] == [30, 100]


def test_train_many_runs_jobs_sequentially(http, manager):
    calls = []
    statuses = {
        "job-a": iter([running(10), running(60), completed()]),
        "job-b": iter([running(50), completed()]),
    }

    def post(endpoint, payload):
        calls.append(("start", payload["model_type"]))
        return {"job_id": "job-a" if payload["model_type"] == "A" else "job-b"}

    def get(endpoint):
        job_id = endpoint.rsplit("/", 1)[-1]
        snapshot = next(statuses[job_id])
        calls.append(("status", job_id, snapshot["status"]))
        return snapshot

    http.post.side_effect = post
    http.get.side_effect = get

    results = manager.train_many(["A", "B"])

    assert list(results) == ["A", "B"]
    start_b = calls.index(("start", "B"))
    assert ("status", "job-a", "completed") in calls[:start_b]
    assert all(call[1] != "job-b" for call in calls[:start_b])


def test_train_many_stops_at_first_failure(http, manager):
    http.post.side_effect = [{"job_id": "job-a"}, {"job_id": "job-b"}]
    http.get.side_effect = [failed("insufficient data")]

    with pytest.raises(JobFailedError):
        manager.train_many(["A", "B"])

    assert http.post.call_count == 1


def test_train_many_requires_a_model(manager):
    with pytest.raises(ValidationError, match="at least one model"):
        manager.train_many([])


def test_list_and_delete_jobs(http, manager):
    http.get.return_value = {"jobs": [{"job_id": "abc"}]}
    http.delete.return_value = {"message": "deleted"}

    assert manager.list_jobs() == [{"job_id": "abc"}]
    manager.delete_job("abc")
    http.delete.assert_called_once_with("/api/training/jobs/abc")


def test_results_summary_and_feature_importance(http, manager):
    http.post.return_value = {"job_id": "abc"}
    http.get.side_effect = [completed({
        "model_name": "XGBoost",
        "metrics": {"accuracy": 0.8, "f1_macro": 0.75},
        "cv_scores": [0.7, 0.8, 0.9],
        "feature_importance": {"AGE": 0.2, "EDU": 0.5, "SEX": 0.1},
        "training_time": 3.5,
    })]

    results = manager.train("xgboost").results

    assert list(results.feature_importance) == ["EDU", "AGE", "SEX"]
    assert results.cv_mean == pytest.approx(0.8)
    frame = results.feature_importance_frame()
    assert frame.iloc[0]["feature"] == "EDU"
    summary = results.summary()
    assert "Accuracy: 80.00%" in summary
    assert "Training time: 3.50s" in summary


def test_session_selection():
    session = TrainingSession(None, MODEL_TYPES)
    assert session.selected_models == ["random_forest"]

    session.select_all()
    assert session.selected_models == ["random_forest", "xgboost"]
    session.select_all()
    assert session.selected_models == []

    session.toggle("xgboost")
    assert session.selected_models == ["xgboost"]


def test_session_run_tracks_state(http, manager):
    http.post.side_effect = [{"job_id": "job-a"}, {"job_id": "job-b"}]
    http.get.side_effect = [running(50), completed(), completed()]
    session = TrainingSession(manager, MODEL_TYPES)
    session.select_all()

    completed_jobs = session.run()

    assert list(completed_jobs) == ["random_forest", "xgboost"]
    assert session.current_model == "xgboost"
    assert session.job_id == "job-b"
    assert session.status.status == JobStatus.COMPLETED
    assert session.error is None
    assert not session.training_active


def test_session_records_failure_inline(http, manager):
    http.post.return_value = {"job_id": "job-a"}
    http.get.side_effect = [failed("insufficient data")]
    session = TrainingSession(manager, MODEL_TYPES)

    session.run()

    assert session.error == "Failed to complete training: insufficient data"
    assert session.status.error == "insufficient data"


def test_session_can_raise(http, manager):
    http.post.return_value = {"job_id": "job-a"}
    http.get.side_effect = [failed("insufficient data")]
    session = TrainingSession(manager, MODEL_TYPES, raise_errors=True)

    with pytest.raises(JobFailedError):
        session.run()


def test_session_without_selection(manager):
    session = TrainingSession(manager, [])

    assert session.run() == {}
    assert session.error == "Please select at least one model to train"


def _slow_manager(http):
    poller = JobPoller(http, poll_interval=0.01)
    return TrainingManager(http, poller=poller, interactive=False)


def _assert_no_more_status_requests(http):
    calls = http.get.call_count
    time.sleep(0.1)
    assert http.get.call_count == calls


def test_session_close_stops_polling(http):
    manager = _slow_manager(http)
    http.post.return_value = {"job_id": "job-a"}
    first_request = threading.Event()

    def status(endpoint):
        first_request.set()
        return running(10)

    http.get.side_effect = status
    session = TrainingSession(manager, MODEL_TYPES)
    worker = threading.Thread(target=session.run, daemon=True)
    worker.start()
    assert first_request.wait(5)

    session.close()
    worker.join(5)

    assert not worker.is_alive()
    assert not session.training_active
    assert session.error is None
    _assert_no_more_status_requests(http)


def test_new_run_stops_the_previous_one(http):
    manager = _slow_manager(http)
    http.post.side_effect = [{"job_id": "job-a"}, {"job_id": "job-b"}]
    polled = {"job-a": threading.Event(), "job-b": threading.Event()}

    def status(endpoint):
        polled[endpoint.rsplit("/", 1)[-1]].set()
        return running(10)

    http.get.side_effect = status
    session = TrainingSession(manager, MODEL_TYPES)

    first = threading.Thread(target=session.run, daemon=True)
    first.start()
    assert polled["job-a"].wait(5)

    second = threading.Thread(target=session.run, daemon=True)
    second.start()
    assert polled["job-b"].wait(5)

    first.join(5)
    assert not first.is_alive()
    assert session.training_active
    assert session.job_id == "job-b"

    session.close()
    second.join(5)

    assert not second.is_alive()
    assert not session.training_active
    _assert_no_more_status_requests(http)
