"""Training jobs: starting, polling and session state"""

from .job import JobStatus, TrainingJob
from .manager import TrainingManager
from .options import TrainingOptions, parse_param_grid
from .poller import CancellationToken, JobPoller, PollHandle
from .results import TrainingResults
from .session import TrainingSession

__all__ = [
    "JobStatus",
    "TrainingJob",
    "TrainingManager",
    "TrainingOptions",
    "parse_param_grid",
    "CancellationToken",
    "JobPoller",
    "PollHandle",
    "TrainingResults",
    "TrainingSession",
]
