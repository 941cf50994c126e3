"""Model manager for listing, inspecting and comparing trained models"""

from typing import Any, Dict, List
from ..exceptions import ValidationError
from ..http_client import HTTPClient
from .builder import Model
from .comparison import ModelComparison


class ModelManager:
    """Manages trained models"""

    def __init__(self, http_client: HTTPClient, interactive: bool = True):
        self.http = http_client
        self.interactive = interactive

    def list(self) -> List[Model]:
        """
        List all trained models

        Returns:
            List[Model]: Model instances
        """
        response = self.http.get('/api/models/')
        return [Model(self.http, data, interactive=self.interactive) for data in response]

    def types(self) -> List[Dict[str, str]]:
        """
        List the model types that can be trained

        Returns:
            List of {'value': ..., 'label': ...} dicts
        """
        response = self.http.get('/api/models/types')
        return response.get('model_types', [])

    def configs(self) -> Dict[str, Any]:
        """Get default configuration of every model type"""
        return self.http.get('/api/models/configs')

    def get(self, model_type: str) -> Model:
        """
        Retrieve a trained model with its details

        Args:
            model_type: Model type identifier

        Returns:
            Model: Model instance
        """
        if not model_type:
            raise ValidationError("model_type is required")
        response = self.http.get(f'/api/models/{model_type}/details')
        response.setdefault('model_type', model_type)
        return Model(self.http, response, interactive=self.interactive)

    def delete(self, model_type: str) -> Dict[str, Any]:
        """Delete a trained model"""
        if not model_type:
            raise ValidationError("model_type is required")
        return Model(self.http, {'model_type': model_type}, interactive=self.interactive).delete()

    def compare(self) -> ModelComparison:
        """Compare all trained models"""
        return ModelComparison(self.http.get('/api/models/compare'))
