"""
Training session controller

Holds the state of one training page: which models are selected, which job
is running, the latest snapshot and the last error. Views read this object
instead of sharing globals.
"""

import logging
from typing import Dict, List, Optional

from ..exceptions import JobCancelledError, LfsmlError
from .job import TrainingJob
from .manager import TrainingManager
from .options import TrainingOptions
from .poller import CancellationToken

logger = logging.getLogger(__name__)


class TrainingSession:
    """
    Page-level controller for sequential training runs

    Example:
        >>> session = client.training_session()
        >>> session.select_all()
        >>> session.run()
        >>> print(session.status)
    """

    def __init__(self,
                 training: TrainingManager,
                 available_models: List[Dict[str, str]],
                 options: Optional[TrainingOptions] = None,
                 raise_errors: bool = False):
        """
        Args:
            training: Training manager used to start and track jobs
            available_models: Model types as returned by /api/models/types ({value, label})
            options: Training options, defaults to TrainingOptions()
            raise_errors: Re-raise failures instead of only recording them in `error`
        """
        self.training = training
        self.available_models = available_models
        self.options = options or TrainingOptions()
        self.raise_errors = raise_errors

        first = available_models[0]['value'] if available_models else None
        self.selected_models: List[str] = [first] if first else []
        self.current_model: Optional[str] = first
        self.job_id: Optional[str] = None
        self.status: Optional[TrainingJob] = None
        self.error: Optional[str] = None
        self.training_active = False
        self.completed: Dict[str, TrainingJob] = {}
        self._token: Optional[CancellationToken] = None

    def __repr__(self) -> str:
        return (f"TrainingSession(selected={self.selected_models}, current='{self.current_model}', "
                f"active={self.training_active})")

    # ============================================
    # SELECTION
    # ============================================

    def toggle(self, model_type: str):
        """Add or remove a model from the selection"""
        if model_type in self.selected_models:
            self.selected_models.remove(model_type)
        else:
            self.selected_models.append(model_type)

    def select_all(self):
        """Select every model, or clear the selection if everything is selected already"""
        if len(self.selected_models) == len(self.available_models):
            self.selected_models = []
        else:
            self.selected_models = [m['value'] for m in self.available_models]

    # ============================================
    # RUN
    # ============================================

    def _updater(self, token: CancellationToken):
        def _on_update(job: TrainingJob):
            # a superseded run must not overwrite the current status
            if not token.cancelled:
                self.status = job
        return _on_update

    def run(self) -> Dict[str, TrainingJob]:
        """
        Train the selected models sequentially

        Starting a new run stops polling for any run still in progress.

        Returns:
            Dict of completed snapshots keyed by model type (partial if a job failed)
        """
        if not self.selected_models:
            self.error = "Please select at least one model to train"
            return {}

        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token
        self.training_active = True
        self.error = None
        self.status = None
        completed: Dict[str, TrainingJob] = {}
        self.completed = completed
        on_update = self._updater(token)
        job_id = None

        try:
            for model_type in list(self.selected_models):
                if token.cancelled:
                    break
                job_id = self.training.start(model_type, self.options)
                if token.cancelled:
                    break
                self.current_model = model_type
                self.job_id = job_id
                completed[model_type] = self.training.poller.wait(
                    job_id,
                    on_update=on_update,
                    cancel_token=token
                )
        except JobCancelledError:
            logger.info(f"Training session stopped while tracking job {job_id}")
        except LfsmlError as e:
            if not token.cancelled:
                self.error = f"Failed to complete training: {e}"
                logger.error(self.error)
                if self.raise_errors:
                    raise
        finally:
            if self._token is token:
                self.training_active = False

        return completed

    def close(self):
        """Stop polling (the view is going away); server-side jobs keep running"""
        if self._token is not None:
            self._token.cancel()
        self.training_active = False
