"""Pipeline domain exports."""

from .normalization_pipeline import NormalizationError, normalize_document, run_normalization
from .pipeline_contracts import NormalizationOutcome, NormalizationRequest

__all__ = [
    "NormalizationError",
    "NormalizationOutcome",
    "NormalizationRequest",
    "normalize_document",
    "run_normalization",
]
