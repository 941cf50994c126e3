"""
Visualization utilities for the lfsml SDK.

Explainability plots (confusion matrix, feature importance, SHAP, LIME,
partial dependence) are rendered by the backend as PNG images. This module
builds their URLs, downloads them and displays them with matplotlib. It also
draws the model comparison charts.
"""

import io
import logging
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import matplotlib.image as mpimg
import numpy as np

from .exceptions import ResourceNotFoundError, ValidationError
from .http_client import HTTPClient

logger = logging.getLogger(__name__)

VISUALIZATION_KINDS = (
    'confusion-matrix',
    'feature-importance',
    'shap-summary',
    'lime-explanation',
    'partial-dependence',
)

KIND_TITLES = {
    'confusion-matrix': 'Confusion Matrix',
    'feature-importance': 'Feature Importance',
    'shap-summary': 'SHAP Summary',
    'lime-explanation': 'LIME Explanation',
    'partial-dependence': 'Partial Dependence Plot',
}


def _check_kind(kind: str) -> str:
    if kind not in VISUALIZATION_KINDS:
        raise ValidationError(
            f"Unknown visualization '{kind}'. Expected one of: {', '.join(VISUALIZATION_KINDS)}"
        )
    return kind


class VisualizationManager:
    """Access to backend-rendered model visualizations"""

    def __init__(self, http_client: HTTPClient):
        self.http = http_client

    def _endpoint(self, model_type: str, kind: str) -> str:
        if not model_type:
            raise ValidationError("model_type is required")
        return f'/api/visualizations/{model_type}/{_check_kind(kind)}'

    def url(self, model_type: str, kind: str) -> str:
        """Absolute URL of an image, usable directly as an image source"""
        return self.http.url(self._endpoint(model_type, kind))

    def status(self, model_type: str) -> Dict:
        """Which visualizations the backend has generated for a model"""
        if not model_type:
            raise ValidationError("model_type is required")
        return self.http.get(f'/api/visualizations/{model_type}/status')

    def fetch(self, model_type: str, kind: str) -> bytes:
        """
        Download an image

        Raises:
            ResourceNotFoundError: If the visualization is not yet available
        """
        return self.http.get_bytes(self._endpoint(model_type, kind))

    def available(self, model_type: str, kinds: Sequence[str] = VISUALIZATION_KINDS) -> Dict[str, bool]:
        """Check each kind by downloading it; missing ones map to False"""
        result = {}
        for kind in kinds:
            try:
                self.fetch(model_type, kind)
                result[kind] = True
            except ResourceNotFoundError:
                logger.info(f"{KIND_TITLES[kind]} for {model_type}: visualization not yet available")
                result[kind] = False
        return result

    def save(self, model_type: str, kind: str, path: str) -> str:
        """Download an image to `path` and return the path"""
        content = self.fetch(model_type, kind)
        with open(path, 'wb') as fh:
            fh.write(content)
        return path

    def show(self, model_type: str, kind: str, ax=None):
        """
        Display an image with matplotlib

        Args:
            model_type: Model type identifier
            kind: One of VISUALIZATION_KINDS
            ax: Optional matplotlib axis

        Returns:
            The matplotlib axis
        """
        image = mpimg.imread(io.BytesIO(self.fetch(model_type, kind)), format='png')

        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 6))

        ax.imshow(image)
        ax.set_title(f"{KIND_TITLES[kind]}: {model_type}", fontsize=13, fontweight='bold')
        ax.axis('off')
        return ax


def plot_metric_comparison(model_names: List[str],
                           metrics: Dict[str, List[float]],
                           title: str = 'Model Performance Comparison',
                           ax=None):
    """
    Grouped bar chart of metrics (as percentages) per model

    Args:
        model_names: Names along the x axis
        metrics: Metric label -> one value in [0, 1] per model
        title: Chart title
        ax: Optional matplotlib axis
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 5))

    x = np.arange(len(model_names))
    n_metrics = max(len(metrics), 1)
    width = 0.8 / n_metrics

    for i, (label, values) in enumerate(metrics.items()):
        values = np.asarray(values, dtype=float) * 100
        ax.bar(x + (i - (n_metrics - 1) / 2) * width, values, width, label=label)

    ax.set_xticks(x)
    ax.set_xticklabels(model_names, rotation=20, ha='right')
    ax.set_ylabel('Score (%)', fontsize=11)
    ax.set_ylim(0, 100)
    ax.set_title(title, fontsize=13, fontweight='bold')
    ax.legend(loc='best', framealpha=0.9)
    ax.grid(True, axis='y', alpha=0.3)
    return ax


def plot_training_times(model_names: List[str], training_times: List[Optional[float]], ax=None):
    """Bar chart of training time in seconds per model"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    times = [t if t is not None else 0.0 for t in training_times]
    ax.bar(model_names, times, color='#8884d8')
    ax.set_ylabel('Training Time (s)', fontsize=11)
    ax.set_title('Training Time', fontsize=13, fontweight='bold')
    plt.setp(ax.xaxis.get_majorticklabels(), rotation=20, ha='right')
    ax.grid(True, axis='y', alpha=0.3)
    return ax
