"""Trained models: listing, details and comparison"""

from .builder import Model
from .comparison import ModelComparison
from .manager import ModelManager

__all__ = ["Model", "ModelComparison", "ModelManager"]
