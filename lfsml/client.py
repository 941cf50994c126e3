"""
Main lfsml SDK client
"""

import logging
from typing import Any, Dict, Optional
from .http_client import HTTPClient
from .user_settings import UserSettingsManager
from .models.manager import ModelManager
from .training.manager import TrainingManager
from .training.options import TrainingOptions
from .training.poller import JobPoller
from .training.session import TrainingSession
from .predictions.manager import PredictionManager
from .datasets.manager import DatasetManager
from .visualization import VisualizationManager
from .exceptions import LfsmlError

logger = logging.getLogger(__name__)


class LfsmlClient:
    """
    Main client for interacting with the employment prediction model service

    Example:
        >>> client = LfsmlClient(api_url="http://localhost:8000")
        >>> client.datasets.preprocess("labour_force.csv")
        >>> job = client.training.train("random_forest")
        >>> print(job.results.summary())
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        interactive: bool = True,
        poll_interval: Optional[float] = None,
        request_timeout: Optional[float] = 30.0,
        settings: Optional[UserSettingsManager] = None
    ):
        """
        Initialize client

        Args:
            api_url: Base URL of the backend API. If None, uses LFSML_API_URL,
                then the saved default URL, then http://localhost:8000
            interactive: Print progress messages (default: True)
            poll_interval: Seconds between training status requests. If None, uses the saved setting (2s by default)
            request_timeout: Per-request timeout in seconds
            settings: Settings store (defaults to ~/.lfsml/user_settings.db)
        """
        self.user_settings = settings or UserSettingsManager()
        self.api_url = self.user_settings.resolve_api_url(api_url)
        self.interactive = interactive

        if poll_interval is None:
            poll_interval = self.user_settings.get_poll_interval()

        self.http = HTTPClient(self.api_url, timeout=request_timeout)
        self.poller = JobPoller(self.http, poll_interval=poll_interval)

        self.models = ModelManager(self.http, interactive=interactive)
        self.training = TrainingManager(self.http, poller=self.poller, interactive=interactive)
        self.predictions = PredictionManager(self.http, interactive=interactive)
        self.datasets = DatasetManager(self.http, interactive=interactive)
        self.visualizations = VisualizationManager(self.http)

        logger.debug(f"Client initialized for {self.api_url}")

    def __repr__(self) -> str:
        return f"LfsmlClient(api_url='{self.api_url}')"

    def training_session(self, options: Optional[TrainingOptions] = None, raise_errors: bool = False) -> TrainingSession:
        """
        Create a training page controller with the trainable model types loaded

        Args:
            options: Training options for every job in the session
            raise_errors: Re-raise failures instead of only recording them
        """
        return TrainingSession(self.training, self.models.types(), options=options, raise_errors=raise_errors)

    def set_default_api_url(self, api_url: str) -> bool:
        """Persist the API URL used when none is given"""
        return self.user_settings.set_default_api_url(api_url)

    def health_check(self) -> Dict[str, Any]:
        """
        Check if the API is reachable

        Returns:
            dict: Health status information
        """
        try:
            self.http.get('/api/models/types')
            return {"status": "healthy", "api_url": self.api_url}
        except LfsmlError as e:
            return {
                "status": "unhealthy",
                "api_url": self.api_url,
                "error": str(e)
            }
