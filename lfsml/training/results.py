"""Training results container"""

from typing import Any, Dict, List, Optional
import numpy as np
import pandas as pd

METRIC_LABELS = {
    'accuracy': 'Accuracy',
    'f1_weighted': 'F1 Score (Weighted)',
    'precision_weighted': 'Precision (Weighted)',
    'recall_weighted': 'Recall (Weighted)',
    'precision_macro': 'Precision (Macro)',
    'recall_macro': 'Recall (Macro)',
    'f1_macro': 'F1 Score (Macro)',
}


class TrainingResults:
    """Results attached to a completed training job"""

    def __init__(self, results_data: dict):
        self.data = results_data
        self.model_name = results_data.get('model_name')
        self.metrics: Dict[str, float] = results_data.get('metrics') or {}
        self.cv_scores: List[float] = list(results_data.get('cv_scores') or [])
        self.best_hyperparameters: Dict[str, Any] = results_data.get('best_hyperparameters') or {}
        self.training_details: Dict[str, Any] = results_data.get('training_details') or {}
        self.training_time: Optional[float] = results_data.get('training_time')

    def __repr__(self) -> str:
        accuracy = self.metrics.get('accuracy')
        if accuracy is None:
            return f"TrainingResults(model_name={self.model_name!r})"
        return f"TrainingResults(model_name={self.model_name!r}, accuracy={accuracy:.4f})"

    @property
    def cv_mean(self) -> Optional[float]:
        """Mean cross-validation score (server value, else computed from fold scores)"""
        if self.data.get('cv_mean') is not None:
            return self.data['cv_mean']
        if self.cv_scores:
            return float(np.mean(self.cv_scores))
        return None

    @property
    def cv_std(self) -> Optional[float]:
        """Standard deviation of cross-validation scores"""
        if self.data.get('cv_std') is not None:
            return self.data['cv_std']
        if self.cv_scores:
            return float(np.std(self.cv_scores))
        return None

    @property
    def feature_importance(self) -> Dict[str, float]:
        """Feature importance, most important first"""
        raw = self.data.get('feature_importance') or {}
        return dict(sorted(raw.items(), key=lambda item: item[1], reverse=True))

    def feature_importance_frame(self) -> pd.DataFrame:
        """Feature importance as a DataFrame with columns feature/importance"""
        items = list(self.feature_importance.items())
        return pd.DataFrame(items, columns=['feature', 'importance'])

    def summary(self) -> str:
        """Human-readable summary of training details, metrics and CV scores"""
        lines = [f"Model: {self.model_name or 'N/A'}"]

        details = self.training_details
        if details:
            lines.append(f"   Train samples: {details.get('train_samples', 'N/A')}")
            lines.append(f"   Test samples: {details.get('test_samples', 'N/A')}")
            lines.append(f"   Features: {details.get('features', 'N/A')}")
            lines.append(f"   CV folds: {details.get('cv_folds') or 'N/A'}")
            if details.get('hyperparameter_tuning'):
                lines.append("   Hyperparameter tuning: Enabled")
                tuned = details.get('tuned_parameters')
                if tuned:
                    lines.append(f"   Tuned: {', '.join(tuned)}")
        if self.training_time is not None:
            lines.append(f"   Training time: {self.training_time:.2f}s")

        if self.metrics:
            lines.append("Performance metrics:")
            for key, label in METRIC_LABELS.items():
                if key in self.metrics:
                    lines.append(f"   {label}: {self.metrics[key] * 100:.2f}%")

        if self.cv_scores:
            folds = ', '.join(f"{score * 100:.2f}%" for score in self.cv_scores)
            lines.append(f"Cross-validation: mean {self.cv_mean * 100:.2f}%, std {self.cv_std * 100:.2f}%")
            lines.append(f"   Fold scores: {folds}")

        if self.best_hyperparameters:
            lines.append("Best hyperparameters:")
            for key, value in self.best_hyperparameters.items():
                lines.append(f"   {key}: {value}")

        return "\n".join(lines)
