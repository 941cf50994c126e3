import matplotlib.pyplot as plt
import pandas as pd
import pytest

from lfsml.exceptions import ValidationError
from lfsml.models import Model, ModelComparison, ModelManager

COMPARISON = {
    "best_model": "xgboost",
    "models": [
        {"model_type": "random_forest", "model_name": "Random Forest", "accuracy": 0.84,
         "precision": 0.8, "recall": 0.79, "f1_score": 0.8, "training_time": 12.5,
         "cv_scores": [0.8, 0.82], "cv_mean": 0.81, "cv_std": 0.01},
        {"model_type": "xgboost", "model_name": "XGBoost", "accuracy": 0.83,
         "precision": 0.82, "recall": 0.81, "f1_score": 0.82, "training_time": 4.0},
    ],
}


@pytest.fixture
def models(http):
    return ModelManager(http, interactive=False)


def test_list(http, models):
    http.get.return_value = [
        {"model_type": "xgboost", "model_name": "XGBoost", "filename": "xgb.pkl", "has_visualizations": True},
        {"model_type": "svm", "filename": "svm.pkl"},
    ]

    result = models.list()

    http.get.assert_called_once_with("/api/models/")
    assert [m.model_type for m in result] == ["xgboost", "svm"]
    assert result[0].has_visualizations
    assert result[1].name == "svm"
    assert not result[1].has_visualizations


def test_types(http, models):
    http.get.return_value = {"model_types": [{"value": "xgboost", "label": "XGBoost"}]}

    assert models.types() == [{"value": "xgboost", "label": "XGBoost"}]


def test_get_fetches_details(http, models):
    http.get.return_value = {"model_name": "XGBoost", "metrics": {"accuracy": 0.83}}

    model = models.get("xgboost")

    http.get.assert_called_once_with("/api/models/xgboost/details")
    assert model.model_type == "xgboost"
    assert model.metrics["accuracy"] == 0.83


def test_get_requires_model_type(models):
    with pytest.raises(ValidationError):
        models.get("")


def test_delete(http, models):
    http.delete.return_value = {"message": "deleted"}

    models.delete("svm")

    http.delete.assert_called_once_with("/api/models/svm")


def test_model_details_refresh_name(http):
    model = Model(http, {"model_type": "svm"}, interactive=False)
    http.get.return_value = {"model_name": "Support Vector Machine"}

    model.details()

    assert model.name == "Support Vector Machine"


def test_compare_uses_server_best_model(http, models):
    http.get.return_value = COMPARISON

    comparison = models.compare()

    assert len(comparison) == 2
    assert comparison.best()["model_type"] == "xgboost"
    assert comparison.best("f1_score")["model_type"] == "xgboost"
    assert comparison.best("training_time")["model_type"] == "random_forest"


def test_comparison_frames():
    comparison = ModelComparison(COMPARISON)

    frame = comparison.to_frame()
    assert frame.loc["random_forest", "accuracy"] == 0.84
    assert pd.isna(frame.loc["xgboost", "cv_mean"])

    cv = comparison.cv_table()
    assert cv["model_name"].tolist() == ["Random Forest"]


def test_comparison_plots():
    comparison = ModelComparison(COMPARISON)

    ax = comparison.plot()
    assert len(ax.patches) == 8
    ax = comparison.plot_training_times()
    assert len(ax.patches) == 2
    plt.close("all")


def test_empty_comparison():
    comparison = ModelComparison({"models": []})

    assert comparison.best() is None
    assert comparison.to_frame().empty
