"""Shared fixtures: a fake HTTP layer driven by scripted responses."""

import matplotlib

matplotlib.use("Agg")

from unittest.mock import Mock

import pytest

from lfsml.http_client import HTTPClient
from lfsml.training.poller import JobPoller


def running(progress, message="Training"):
    return {"status": "running", "progress": progress, "message": message}


def completed(results=None):
    return {
        "status": "completed",
        "progress": 100,
        "message": "Training completed",
        "results": results or {"model_name": "Random Forest", "metrics": {"accuracy": 0.81}},
    }


def failed(error):
    return {"status": "failed", "progress": 40, "message": "Training failed", "error": error}


@pytest.fixture
def http():
    client = Mock(spec=HTTPClient)
    client.url.side_effect = lambda endpoint: "http://api.test/" + endpoint.lstrip("/")
    return client


@pytest.fixture
def poller(http):
    return JobPoller(http, poll_interval=0, max_retries=2, retry_backoff=0)
