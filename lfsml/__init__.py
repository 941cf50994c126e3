"""
lfsml - Python SDK for the employment prediction model service

Preprocess labour force survey data, train and compare classifiers, and
request predictions from a remote model service.
"""

__version__ = "0.1.0"

from .client import LfsmlClient
from .training import JobStatus, TrainingJob, TrainingOptions, CancellationToken
from .exceptions import (
    LfsmlError,
    APIError,
    ResourceNotFoundError,
    TransportError,
    ValidationError,
    JobFailedError,
    JobConnectionLostError,
    JobTimeoutError,
    JobCancelledError
)

__all__ = [
    "LfsmlClient",
    "JobStatus",
    "TrainingJob",
    "TrainingOptions",
    "CancellationToken",
    "LfsmlError",
    "APIError",
    "ResourceNotFoundError",
    "TransportError",
    "ValidationError",
    "JobFailedError",
    "JobConnectionLostError",
    "JobTimeoutError",
    "JobCancelledError",
]
