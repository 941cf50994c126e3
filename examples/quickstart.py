"""
Quickstart example for the lfsml SDK

This example shows the basic workflow:
1. Preprocess the dataset
2. Train two models one after another
3. Compare them
4. Predict for a dataset row
"""

from lfsml import LfsmlClient, TrainingOptions, JobFailedError

# Initialize client (falls back to LFSML_API_URL / saved default)
client = LfsmlClient(api_url="http://localhost:8000")

print("✅ Client initialized")
print(f"   API URL: {client.api_url}")

# Step 1: Preprocess the data already on the server
print("\n🧹 Preprocessing dataset...")
summary = client.datasets.preprocess()
print(f"   Rows: {summary.get('total_rows')}")

# Step 2: Train models sequentially
print("\n🤖 Training models...")
options = TrainingOptions(cv_folds=5, perform_tuning=True, use_param_grid=True)
try:
    jobs = client.training.train_many(["random_forest", "xgboost"], options)
except JobFailedError as e:
    print(f"❌ Training failed: {e}")
    raise SystemExit(1)

for model_type, job in jobs.items():
    print(f"\n{job.results.summary()}")

# Step 3: Compare
print("\n📊 Comparing models...")
comparison = client.models.compare()
print(comparison.to_frame())
best = comparison.best()
print(f"🏆 Best performing model: {best['model_name']}")

# Step 4: Predict from a dataset row
print("\n🔮 Predicting row 0...")
client.datasets.info()
prediction = client.predictions.predict_row(best["model_type"], 0, client.datasets)
print(f"   Predicted: {prediction.label} (actual: {prediction.actual}, correct: {prediction.is_correct})")

print("\n🎉 Quickstart complete!")
