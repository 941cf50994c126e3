"""Prediction manager for single and batch predictions"""

import logging
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

from ..exceptions import ValidationError
from ..http_client import HTTPClient
from .features import TARGET_COLUMN, describe, features_from_row, validate_features

if TYPE_CHECKING:
    from ..datasets.manager import DatasetManager

logger = logging.getLogger(__name__)


class Prediction:
    """Result of POST /api/predictions/predict"""

    def __init__(self, prediction_data: dict, features: Dict[str, int], actual: Optional[int] = None):
        self.data = prediction_data
        self.features = features
        self.actual = actual
        self.prediction = prediction_data.get('prediction')
        self.label = prediction_data.get('prediction_label')
        self.probabilities = prediction_data.get('probabilities') or {}
        self.model_name = prediction_data.get('model_name')
        self.shap_force_plot = prediction_data.get('shap_force_plot')

    def __repr__(self) -> str:
        return f"Prediction(prediction={self.prediction!r}, label={self.label!r}, model_name={self.model_name!r})"

    @property
    def is_correct(self) -> Optional[bool]:
        """Whether the prediction matches the dataset value (None without one)"""
        if self.actual is None:
            return None
        return self.actual == self.prediction

    @property
    def confidence(self) -> Optional[float]:
        """Highest class probability"""
        if not self.probabilities:
            return None
        values = self.probabilities.values() if isinstance(self.probabilities, dict) else self.probabilities
        return max(values)

    def describe_inputs(self) -> Dict[str, str]:
        return describe(self.features)


class PredictionManager:
    """Requests predictions from trained models"""

    def __init__(self, http_client: HTTPClient, interactive: bool = True):
        self.http = http_client
        self.interactive = interactive

    def predict(self, model_type: str, features: Mapping[str, Any], actual: Optional[int] = None) -> Prediction:
        """
        Predict employment status for one person

        Features are validated locally, nothing is sent if any value is invalid.

        Args:
            model_type: Model type identifier
            features: Encoded feature values (see FEATURE_DEFINITIONS)
            actual: Known outcome, kept on the result for comparison

        Returns:
            Prediction: Prediction result

        Example:
            >>> result = client.predictions.predict('xgboost', {**DEFAULT_FEATURES, 'AGE': 40})
            >>> print(result.label, result.confidence)
        """
        if not model_type:
            raise ValidationError("Please select a model")
        validated = validate_features(features)

        response = self.http.post('/api/predictions/predict', {
            'model_type': model_type,
            'features': validated,
        })
        prediction = Prediction(response, validated, actual=actual)

        if actual is not None:
            logger.debug(f"Actual vs predicted: {actual} / {prediction.prediction}")
        if self.interactive:
            print(f"🔮 {prediction.model_name or model_type}: {prediction.label}")
        return prediction

    def predict_row(self, model_type: str, row_number: int, datasets: 'DatasetManager') -> Prediction:
        """
        Predict using the features of a dataset row

        The row's Employment_Status_Encoded value is kept as `actual`.
        """
        row = datasets.row(row_number)
        data = row.get('data', {})
        try:
            actual = int(data.get(TARGET_COLUMN))
        except (TypeError, ValueError):
            actual = None
        return self.predict(model_type, features_from_row(data), actual=actual)

    def batch_predict(self, model_type: str, rows: List[Mapping[str, Any]]) -> Dict[str, Any]:
        """Predict for several feature dicts at once"""
        if not model_type:
            raise ValidationError("Please select a model")
        if not rows:
            raise ValidationError("At least one row is required")
        validated = [validate_features(row) for row in rows]
        return self.http.post('/api/predictions/batch-predict', validated, params={'model_type': model_type})

    def features(self) -> Dict[str, Any]:
        """Feature metadata published by the backend"""
        return self.http.get('/api/predictions/features')
