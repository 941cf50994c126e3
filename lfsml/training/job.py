"""TrainingJob snapshot returned by the training status endpoint"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import APIError
from .results import TrainingResults


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True)
class TrainingJob:
    """
    One observed state of a server-side training job

    results is only set when status is completed, error only when failed.
    """
    job_id: str
    status: JobStatus
    progress: int = 0
    message: str = ""
    results: Optional[TrainingResults] = None
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, job_id: str, data: Dict[str, Any]) -> 'TrainingJob':
        """
        Build a snapshot from a GET /api/training/status/{job_id} response

        Raises:
            APIError: If the response carries an unknown status
        """
        try:
            status = JobStatus(str(data.get('status', '')).lower())
        except ValueError:
            raise APIError(f"Unexpected job status {data.get('status')!r} for job {job_id}",
                           response_data=data)

        try:
            progress = int(data.get('progress') or 0)
        except (TypeError, ValueError):
            progress = 0
        progress = max(0, min(100, progress))

        results = None
        error = None
        if status == JobStatus.COMPLETED:
            results = TrainingResults(data.get('results') or {})
        elif status == JobStatus.FAILED:
            error = data.get('error') or data.get('message') or "Training failed"

        return cls(
            job_id=job_id,
            status=status,
            progress=progress,
            message=data.get('message') or "",
            results=results,
            error=error,
            raw=data,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def with_progress(self, progress: int) -> 'TrainingJob':
        """Copy of this snapshot with a different progress value"""
        return replace(self, progress=progress)

    def __str__(self) -> str:
        return f"{self.status.value.upper()} {self.progress}% {self.message}".rstrip()
