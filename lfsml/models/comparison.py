"""Side-by-side comparison of trained models"""

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..visualization import plot_metric_comparison, plot_training_times

COMPARISON_METRICS = {
    'accuracy': 'Accuracy',
    'precision': 'Precision',
    'recall': 'Recall',
    'f1_score': 'F1 Score',
}


class ModelComparison:
    """Result of GET /api/models/compare"""

    def __init__(self, comparison_data: dict):
        self.data = comparison_data
        self.models: List[Dict[str, Any]] = comparison_data.get('models') or []
        self.best_model: Optional[str] = comparison_data.get('best_model')

    def __repr__(self) -> str:
        return f"ModelComparison(models={len(self.models)}, best_model='{self.best_model}')"

    def __len__(self) -> int:
        return len(self.models)

    def to_frame(self) -> pd.DataFrame:
        """One row per model, indexed by model type"""
        columns = ['model_type', 'model_name', *COMPARISON_METRICS, 'training_time', 'cv_mean', 'cv_std']
        rows = [{col: model.get(col) for col in columns} for model in self.models]
        return pd.DataFrame(rows, columns=columns).set_index('model_type')

    def best(self, metric: str = 'accuracy') -> Optional[Dict[str, Any]]:
        """
        Best model entry

        With the default metric the server's own choice (best_model) wins
        when present; otherwise the model with the highest `metric`.
        """
        if metric == 'accuracy' and self.best_model:
            for model in self.models:
                if model.get('model_type') == self.best_model:
                    return model
        scored = [m for m in self.models if m.get(metric) is not None]
        if not scored:
            return None
        return max(scored, key=lambda m: m[metric])

    def cv_table(self) -> pd.DataFrame:
        """Cross-validation summary for models that have fold scores"""
        rows = [
            {
                'model_name': m.get('model_name'),
                'cv_mean': m.get('cv_mean'),
                'cv_std': m.get('cv_std'),
                'cv_scores': list(m['cv_scores']),
            }
            for m in self.models if m.get('cv_scores')
        ]
        return pd.DataFrame(rows, columns=['model_name', 'cv_mean', 'cv_std', 'cv_scores'])

    def plot(self, metrics: Sequence[str] = tuple(COMPARISON_METRICS), ax=None):
        """Grouped bar chart of the selected metrics"""
        names = [m.get('model_name') or m.get('model_type') for m in self.models]
        series = {
            COMPARISON_METRICS.get(metric, metric): [m.get(metric) or 0.0 for m in self.models]
            for metric in metrics
        }
        return plot_metric_comparison(names, series, ax=ax)

    def plot_training_times(self, ax=None):
        names = [m.get('model_name') or m.get('model_type') for m in self.models]
        return plot_training_times(names, [m.get('training_time') for m in self.models], ax=ax)
