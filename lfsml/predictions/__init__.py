"""Predictions and model input features"""

from .features import DEFAULT_FEATURES, FEATURE_DEFINITIONS, features_from_row, validate_features
from .manager import Prediction, PredictionManager

__all__ = [
    "DEFAULT_FEATURES",
    "FEATURE_DEFINITIONS",
    "features_from_row",
    "validate_features",
    "Prediction",
    "PredictionManager",
]
