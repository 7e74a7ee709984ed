"""
Schemas Package

Pydantic models for the analysis contract.
"""

from .analysis_schemas import (
    BOX_SCALE,
    RESULT_SCHEMA,
    AnalysisRequest,
    AnalysisResult,
    Defect,
    EncodedImage,
    Verdict,
)

__all__ = [
    "BOX_SCALE",
    "RESULT_SCHEMA",
    "AnalysisRequest",
    "AnalysisResult",
    "Defect",
    "EncodedImage",
    "Verdict",
]
