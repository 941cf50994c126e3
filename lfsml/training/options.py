"""
Training options and request payload construction
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..exceptions import ValidationError

CV_FOLD_CHOICES = (3, 4, 5, 7, 10)

DEFAULT_PARAM_GRID = {
    'max_depth': '5,10',
    'learning_rate': '0.05,0.1',
    'n_estimators': '200,300',
}


def _parse_grid_value(token: str) -> Union[int, float, str]:
    token = token.strip()
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        return token


def parse_param_grid(grid: Dict[str, Any]) -> Dict[str, List[Any]]:
    """
    Normalize a parameter grid

    Values may be lists or comma-separated strings ("5,10"). Numeric tokens
    become numbers, anything else is kept as a string.

    Example:
        >>> parse_param_grid({'max_depth': '5, 10', 'criterion': 'gini,entropy'})
        {'max_depth': [5, 10], 'criterion': ['gini', 'entropy']}
    """
    parsed = {}
    for name, value in grid.items():
        if isinstance(value, str):
            values = [_parse_grid_value(v) for v in value.split(',') if v.strip()]
        elif isinstance(value, (list, tuple)):
            values = list(value)
        else:
            values = [value]
        if not values:
            raise ValidationError(f"Parameter grid entry '{name}' has no values")
        parsed[name] = values
    return parsed


@dataclass
class TrainingOptions:
    """Options sent with POST /api/training/start"""
    perform_cv: bool = True
    cv_folds: int = 5
    perform_tuning: bool = False
    use_param_grid: bool = False
    param_grid: Optional[Dict[str, Any]] = field(default_factory=lambda: dict(DEFAULT_PARAM_GRID))

    def validate(self):
        """Raise ValidationError for option combinations the backend would reject"""
        if self.perform_cv and self.cv_folds not in CV_FOLD_CHOICES:
            raise ValidationError(
                f"cv_folds must be one of {', '.join(str(n) for n in CV_FOLD_CHOICES)}, got {self.cv_folds}"
            )
        if self.perform_tuning and self.use_param_grid and not self.param_grid:
            raise ValidationError("A parameter grid is required when use_param_grid is enabled")

    def to_payload(self, model_type: str) -> Dict[str, Any]:
        """
        Build the request body for one model

        cv_folds is only sent when cross-validation is on; param_grid only
        when both tuning and the custom grid are on.
        """
        if not model_type:
            raise ValidationError("model_type is required")
        self.validate()

        payload: Dict[str, Any] = {
            'model_type': model_type,
            'perform_cv': self.perform_cv,
            'perform_tuning': self.perform_tuning,
            'use_param_grid': self.use_param_grid,
        }
        if self.perform_cv:
            payload['cv_folds'] = self.cv_folds
        if self.use_param_grid and self.perform_tuning:
            payload['param_grid'] = parse_param_grid(self.param_grid)
        return payload
