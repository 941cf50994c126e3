"""Training manager for starting and following training jobs"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import APIError, ValidationError
from ..http_client import HTTPClient
from .job import TrainingJob
from .options import TrainingOptions
from .poller import CancellationToken, JobPoller, PollHandle

logger = logging.getLogger(__name__)


class TrainingManager:
    """Manages training jobs on the backend"""

    def __init__(self, http_client: HTTPClient, poller: Optional[JobPoller] = None, interactive: bool = True):
        self.http = http_client
        self.poller = poller or JobPoller(http_client)
        self.interactive = interactive

    def start(self, model_type: str, options: Optional[TrainingOptions] = None) -> str:
        """
        Start training a model

        Args:
            model_type: Model type identifier (e.g. 'xgboost')
            options: Cross-validation and tuning options

        Returns:
            str: Job id to track
        """
        options = options or TrainingOptions()
        payload = options.to_payload(model_type)

        response = self.http.post('/api/training/start', payload)
        job_id = response.get('job_id') if isinstance(response, dict) else None
        if not job_id:
            raise APIError("Training start response did not include a job_id", response_data=response)

        logger.info(f"Started training job {job_id} for {model_type}")
        if self.interactive:
            print(f"🚀 Training {model_type} (job {job_id})")
        return job_id

    def status(self, job_id: str) -> TrainingJob:
        """Get the current snapshot of a job"""
        return self.poller.fetch(job_id)

    def list_jobs(self) -> List[Dict[str, Any]]:
        """List training jobs known to the backend"""
        response = self.http.get('/api/training/jobs')
        if isinstance(response, dict):
            return response.get('jobs', [])
        return response

    def delete_job(self, job_id: str) -> Dict[str, Any]:
        """Delete a job record on the backend"""
        if not job_id:
            raise ValidationError("job_id is required")
        return self.http.delete(f'/api/training/jobs/{job_id}')

    def _progress_printer(self, model_type: str) -> Callable[[TrainingJob], None]:
        def _print(job: TrainingJob):
            print(f"   [{model_type}] {job.progress:3d}% {job.message}")
        return _print

    def train(self,
              model_type: str,
              options: Optional[TrainingOptions] = None,
              on_update: Optional[Callable[[TrainingJob], None]] = None,
              cancel_token: Optional[CancellationToken] = None,
              timeout: Optional[float] = None) -> TrainingJob:
        """
        Start a training job and block until it completes

        Example:
            >>> job = client.training.train('random_forest', TrainingOptions(cv_folds=10))
            >>> print(job.results.summary())

        Returns:
            TrainingJob: Completed snapshot with results

        Raises:
            JobFailedError: If the server reports the job as failed
        """
        job_id = self.start(model_type, options)
        if on_update is None and self.interactive:
            on_update = self._progress_printer(model_type)

        job = self.poller.wait(job_id, on_update=on_update, cancel_token=cancel_token, timeout=timeout)

        if self.interactive:
            accuracy = job.results.metrics.get('accuracy') if job.results else None
            if accuracy is not None:
                print(f"✅ {model_type} trained (accuracy {accuracy * 100:.2f}%)")
            else:
                print(f"✅ {model_type} trained")
        return job

    def train_in_background(self,
                            model_type: str,
                            options: Optional[TrainingOptions] = None,
                            on_update: Optional[Callable[[TrainingJob], None]] = None) -> PollHandle:
        """Start a training job and track it without blocking"""
        job_id = self.start(model_type, options)
        return self.poller.track_in_background(job_id, on_update=on_update)

    def train_many(self,
                   model_types: List[str],
                   options: Optional[TrainingOptions] = None,
                   on_update: Optional[Callable[[str, TrainingJob], None]] = None,
                   cancel_token: Optional[CancellationToken] = None) -> Dict[str, TrainingJob]:
        """
        Train several models one after another

        Each job is awaited until terminal before the next one is started.
        The first failure stops the sequence.

        Args:
            model_types: Model types in training order
            options: Options shared by every job
            on_update: Called with (model_type, snapshot)
            cancel_token: Token that stops polling when cancelled

        Returns:
            Dict mapping model type to its completed snapshot
        """
        if not model_types:
            raise ValidationError("Please select at least one model to train")

        completed = {}
        for model_type in model_types:
            callback = None
            if on_update is not None:
                callback = lambda job, mt=model_type: on_update(mt, job)
            completed[model_type] = self.train(model_type, options, on_update=callback, cancel_token=cancel_token)
        return completed
