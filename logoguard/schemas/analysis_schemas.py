"""
Analysis Schemas

Contract between the inspection pipeline and the remote visual-comparison model:
the request value, the structured-output description sent with it, and the
pydantic models used to validate the reply before it is trusted.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOX_SCALE = 1000


class Verdict(str, Enum):
    """Inspection verdict"""

    PASS = "PASS"
    FAIL = "FAIL"
    UNCERTAIN = "UNCERTAIN"


# Structured-output contract sent to the remote model
RESULT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "verdict": {
            "type": "STRING",
            "enum": [v.value for v in Verdict],
            "description": "Final verdict. PASS only when the print is physically intact.",
        },
        "confidence": {
            "type": "NUMBER",
            "description": "Confidence score between 0 and 100.",
        },
        "reasoning": {
            "type": "STRING",
            "description": (
                "Detailed explanation of why the part passed or failed, including how lighting and "
                "perspective effects were excluded."
            ),
        },
        "defects": {
            "type": "ARRAY",
            "description": "Physical defects found. Empty when the verdict is PASS.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "description": {
                        "type": "STRING",
                        "description": "Concrete description of the physical defect.",
                    },
                    "box_2d": {
                        "type": "ARRAY",
                        "items": {"type": "INTEGER"},
                        "description": (
                            "Bounding box on the inspection photo as [ymin, xmin, ymax, xmax] (0-1000 scale)."
                        ),
                    },
                },
                "required": ["description"],
            },
        },
    },
    "required": ["verdict", "confidence", "reasoning", "defects"],
}


class EncodedImage(BaseModel):
    """Transport-ready image payload"""

    model_config = ConfigDict(frozen=True)

    data: str = Field(..., min_length=1, description="Base64 body without data-URL prefix")
    media_type: str = Field("image/png", description="MIME type, e.g. image/png")


class AnalysisRequest(BaseModel):
    """Single request to the remote visual-comparison model"""

    model_config = ConfigDict(frozen=True)

    system_instruction: str
    prompt_text: str
    images: Tuple[EncodedImage, EncodedImage] = Field(..., description="(reference, inspection)")
    output_schema: Dict[str, Any] = Field(default_factory=lambda: RESULT_SCHEMA)
    language_hint: str = "ja"

    @property
    def reference(self) -> EncodedImage:
        return self.images[0]

    @property
    def inspection(self) -> EncodedImage:
        return self.images[1]


class Defect(BaseModel):
    """Reported physical discrepancy"""

    model_config = ConfigDict(frozen=True)

    description: str = Field(..., min_length=1, description="Defect description")
    box_2d: Optional[List[int]] = Field(
        None, description="[top, left, bottom, right] on a 0-1000 grid; None when absent or malformed"
    )

    @field_validator("box_2d", mode="before")
    @classmethod
    def _coerce_box(cls, value: Any) -> Optional[List[int]]:
        # A malformed box drops the spatial region, not the defect
        if not isinstance(value, (list, tuple)):
            return None
        coords = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                return None
            try:
                number = float(item)
            except OverflowError:
                return None
            if not math.isfinite(number):
                return None
            coords.append(int(round(number)))
        return coords


class AnalysisResult(BaseModel):
    """Validated analysis outcome"""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    confidence: float = Field(..., description="Expected 0-100, not clamped")
    reasoning: str = Field(..., min_length=1)
    defects: List[Defect] = Field(default_factory=list)

    @field_validator("verdict", mode="before")
    @classmethod
    def _coerce_verdict(cls, value: Any) -> Verdict:
        if not isinstance(value, str):
            raise ValueError("verdict must be a string")
        try:
            return Verdict(value)
        except ValueError:
            return Verdict.UNCERTAIN

    @field_validator("confidence", mode="before")
    @classmethod
    def _reject_bool_confidence(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("confidence must be a number")
        return value

    @field_validator("confidence")
    @classmethod
    def _reject_non_finite_confidence(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("confidence must be a finite number")
        return value

    @field_validator("defects", mode="before")
    @classmethod
    def _default_defects(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_pass(self) -> bool:
        return self.verdict == Verdict.PASS

    @property
    def confidence_display(self) -> int:
        return int(round(self.confidence))
