"""
Inspection API Schemas

Response models for the inspection workflow endpoints.
"""

from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, Field

from logoguard.core.geometry_mapper import map_defects
from logoguard.schemas.analysis_schemas import AnalysisResult
from logoguard.services.inspection_workflow import InspectionWorkflow


class RegionData(BaseModel):
    """Overlay region as percentages of the displayed image"""

    top_pct: float
    left_pct: float
    height_pct: float
    width_pct: float


class DefectData(BaseModel):
    """Defect with its overlay region"""

    index: int = Field(..., description="1-based label drawn on the overlay", ge=1)
    description: str
    box_2d: Optional[List[int]] = None
    region: Optional[RegionData] = Field(None, description="None when the defect has no usable box")


class ResultData(BaseModel):
    verdict: str = Field(..., description="PASS | FAIL | UNCERTAIN")
    confidence: float
    confidence_display: int
    reasoning: str
    is_pass: bool
    defects: List[DefectData] = []

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "ResultData":
        defects = []
        for index, (defect, region) in enumerate(map_defects(result.defects), start=1):
            defects.append(
                DefectData(
                    index=index,
                    description=defect.description,
                    box_2d=defect.box_2d,
                    region=RegionData(**asdict(region)) if region is not None else None,
                )
            )
        return cls(
            verdict=result.verdict.value,
            confidence=result.confidence,
            confidence_display=result.confidence_display,
            reasoning=result.reasoning,
            is_pass=result.is_pass,
            defects=defects,
        )


class WorkflowStateResponse(BaseModel):
    status: str = Field(..., description="IDLE | ANALYZING | SUCCESS | ERROR")
    ready: bool
    reference_asset_id: Optional[str] = None
    inspection_asset_id: Optional[str] = None
    result: Optional[ResultData] = None
    error: Optional[str] = None

    @classmethod
    def from_workflow(cls, workflow: InspectionWorkflow) -> "WorkflowStateResponse":
        reference, inspection = workflow.reference_asset, workflow.inspection_asset
        result = workflow.result
        return cls(
            status=workflow.state.status.value,
            ready=workflow.is_ready,
            reference_asset_id=reference.asset_id if reference is not None else None,
            inspection_asset_id=inspection.asset_id if inspection is not None else None,
            result=ResultData.from_result(result) if result is not None else None,
            error=workflow.error_message,
        )


class AssetUploadResponse(BaseModel):
    role: str = Field(..., description="reference | target")
    asset_id: str
    media_type: str
    size_bytes: int = Field(..., ge=0)
