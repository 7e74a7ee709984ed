"""
Inspection API Router

Endpoints that drive the inspection workflow: upload the two images, run the
analysis, read the state and overlay, and reset.
"""

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from logoguard.config.settings import InspectionSettings
from logoguard.services.analysis_client import AnalysisClient
from logoguard.services.inspection_workflow import InspectionWorkflow
from logoguard.utils.image_codec import ImageAsset
from logoguard.utils.security import SecurityError, validate_file_extension, validate_file_size, validate_media_type
from logoguard.visualizer import DefectOverlayVisualizer, VisualizationError
from logoguard.web.schemas import AssetUploadResponse, WorkflowStateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inspection", tags=["Inspection"])

_settings: Optional[InspectionSettings] = None
_workflow: Optional[InspectionWorkflow] = None
visualizer = DefectOverlayVisualizer()


def get_settings() -> InspectionSettings:
    global _settings
    if _settings is None:
        _settings = InspectionSettings.from_env()
    return _settings


def get_workflow(settings: InspectionSettings = Depends(get_settings)) -> InspectionWorkflow:
    global _workflow
    if _workflow is None:
        _workflow = InspectionWorkflow(AnalysisClient(settings))
    return _workflow


async def _read_upload(file: UploadFile, settings: InspectionSettings) -> Tuple[ImageAsset, int]:
    if not validate_file_extension(file.filename or ""):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported file type: {file.filename}")
    try:
        media_type = validate_media_type(file.content_type)
    except SecurityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    data = await file.read()
    if not validate_file_size(len(data), max_size_mb=settings.max_upload_mb):
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File must be between 1 byte and {settings.max_upload_mb} MB",
        )
    return ImageAsset.from_bytes(data, media_type), len(data)


def _assign(workflow: InspectionWorkflow, role: str, asset: Optional[ImageAsset]) -> None:
    setter = workflow.set_reference_asset if role == "reference" else workflow.set_inspection_asset
    if not setter(asset):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=f"Images are locked in state {workflow.state.status.value}"
        )


@router.get("/state", response_model=WorkflowStateResponse)
async def get_state(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    return WorkflowStateResponse.from_workflow(workflow)


@router.post("/reference", response_model=AssetUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_reference(
    file: UploadFile = File(...),
    settings: InspectionSettings = Depends(get_settings),
    workflow: InspectionWorkflow = Depends(get_workflow),
) -> AssetUploadResponse:
    asset, size = await _read_upload(file, settings)
    _assign(workflow, "reference", asset)
    logger.info(f"Reference image set: {asset.asset_id} ({asset.media_type})")
    return AssetUploadResponse(
        role="reference", asset_id=asset.asset_id, media_type=asset.media_type, size_bytes=size
    )


@router.post("/target", response_model=AssetUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_target(
    file: UploadFile = File(...),
    settings: InspectionSettings = Depends(get_settings),
    workflow: InspectionWorkflow = Depends(get_workflow),
) -> AssetUploadResponse:
    asset, size = await _read_upload(file, settings)
    _assign(workflow, "target", asset)
    logger.info(f"Inspection image set: {asset.asset_id} ({asset.media_type})")
    return AssetUploadResponse(
        role="target", asset_id=asset.asset_id, media_type=asset.media_type, size_bytes=size
    )


@router.delete("/reference", response_model=WorkflowStateResponse)
async def clear_reference(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    _assign(workflow, "reference", None)
    return WorkflowStateResponse.from_workflow(workflow)


@router.delete("/target", response_model=WorkflowStateResponse)
async def clear_target(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    _assign(workflow, "target", None)
    return WorkflowStateResponse.from_workflow(workflow)


@router.post("/analyze", response_model=WorkflowStateResponse)
async def analyze(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    if not workflow.is_ready:
        if workflow.reference_asset is None or workflow.inspection_asset is None:
            detail = "Both reference and inspection images are required"
        else:
            detail = f"Cannot start analysis from state {workflow.state.status.value}"
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    await workflow.trigger()
    return WorkflowStateResponse.from_workflow(workflow)


@router.post("/reset", response_model=WorkflowStateResponse)
async def reset(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    if not workflow.reset():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Analysis in progress")
    return WorkflowStateResponse.from_workflow(workflow)


@router.post("/full-reset", response_model=WorkflowStateResponse)
async def full_reset(workflow: InspectionWorkflow = Depends(get_workflow)) -> WorkflowStateResponse:
    if not workflow.full_reset():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Analysis in progress")
    return WorkflowStateResponse.from_workflow(workflow)


@router.get("/overlay")
async def get_overlay(workflow: InspectionWorkflow = Depends(get_workflow)) -> Response:
    result = workflow.result
    if result is None or workflow.inspection_asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No analysis result available")
    try:
        png = visualizer.render(workflow.inspection_asset, result)
    except VisualizationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return Response(content=png, media_type="image/png")
