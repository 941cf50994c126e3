"""Model class representing a trained model on the backend"""

import logging
from typing import Any, Dict, Optional
from ..http_client import HTTPClient
from ..visualization import VisualizationManager

logger = logging.getLogger(__name__)


class Model:
    """
    Represents a trained model

    A model is identified by its model type (e.g. 'random_forest'); the
    backend keeps one trained artifact per type.
    """

    def __init__(self, http_client: HTTPClient, model_data: dict, interactive: bool = True):
        """
        Initialize Model instance

        Args:
            http_client: HTTP client for API requests
            model_data: Model data from API
            interactive: Whether to print progress messages (default: True)
        """
        self.http = http_client
        self._data = model_data
        self.model_type = model_data.get('model_type')
        self.name = model_data.get('model_name') or self.model_type
        self.interactive = interactive

    def __repr__(self) -> str:
        return f"Model(model_type='{self.model_type}', name='{self.name}')"

    # ============================================
    # PROPERTIES
    # ============================================

    @property
    def filename(self) -> Optional[str]:
        return self._data.get('filename')

    @property
    def has_visualizations(self) -> bool:
        """False means the model still needs an evaluation run"""
        return bool(self._data.get('has_visualizations', False))

    @property
    def metrics(self) -> Dict[str, Any]:
        return self._data.get('metrics') or {}

    @property
    def visualizations(self) -> VisualizationManager:
        return VisualizationManager(self.http)

    # ============================================
    # ACTIONS
    # ============================================

    def details(self) -> Dict[str, Any]:
        """Fetch full model details and merge them into this instance"""
        response = self.http.get(f'/api/models/{self.model_type}/details')
        self._data.update(response)
        self.name = self._data.get('model_name') or self.model_type
        return response

    def show(self, kind: str = 'confusion-matrix', ax=None):
        """Display one of this model's visualizations"""
        return self.visualizations.show(self.model_type, kind, ax=ax)

    def delete(self) -> Dict[str, Any]:
        """Delete the trained model from the backend"""
        response = self.http.delete(f'/api/models/{self.model_type}')
        logger.info(f"Deleted model {self.model_type}")
        if self.interactive:
            print(f"🗑️ Model '{self.name}' deleted")
        return response
