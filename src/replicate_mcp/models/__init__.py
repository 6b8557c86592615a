"""Request and prediction models."""

from replicate_mcp.models.prediction import GenerationRequest, Prediction, PredictionStatus

__all__ = ["GenerationRequest", "Prediction", "PredictionStatus"]
