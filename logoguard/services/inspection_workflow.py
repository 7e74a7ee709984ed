"""
Inspection Workflow

State machine driving one inspection at a time:

    Idle --trigger--> Analyzing --success--> Success(result)
                                --failure--> Error(message)
    Success | Error | Idle --reset / full_reset--> Idle

trigger() is only accepted from Idle (and from Error, as an operator retry), so at
most one analysis is ever outstanding per workflow. Assets are frozen while
analyzing and while a result is shown, so a result always belongs to the photo it
was computed on; reset() unlocks them.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from logoguard.schemas.analysis_schemas import AnalysisResult
from logoguard.services.analysis_client import AnalysisClient
from logoguard.services.prompts import get_error_messages
from logoguard.utils.image_codec import ImageAsset

logger = logging.getLogger(__name__)


class AnalysisStatus(str, Enum):
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Idle:
    status: AnalysisStatus = AnalysisStatus.IDLE


@dataclass(frozen=True)
class Analyzing:
    status: AnalysisStatus = AnalysisStatus.ANALYZING


@dataclass(frozen=True)
class Success:
    result: AnalysisResult
    status: AnalysisStatus = AnalysisStatus.SUCCESS


@dataclass(frozen=True)
class Error:
    message: str
    status: AnalysisStatus = AnalysisStatus.ERROR


WorkflowState = Union[Idle, Analyzing, Success, Error]


class InspectionWorkflow:
    """
    Holds the two image assets and the current state of one inspection.

    The reference asset survives reset() so one master can be checked against
    many inspection photos; full_reset() clears it too.
    """

    def __init__(self, client: AnalysisClient):
        self.client = client
        self._state: WorkflowState = Idle()
        self._reference_asset: Optional[ImageAsset] = None
        self._inspection_asset: Optional[ImageAsset] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def reference_asset(self) -> Optional[ImageAsset]:
        return self._reference_asset

    @property
    def inspection_asset(self) -> Optional[ImageAsset]:
        return self._inspection_asset

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._state.result if isinstance(self._state, Success) else None

    @property
    def error_message(self) -> Optional[str]:
        return self._state.message if isinstance(self._state, Error) else None

    @property
    def is_ready(self) -> bool:
        """Both assets present and a trigger would be accepted."""
        return (
            self._reference_asset is not None
            and self._inspection_asset is not None
            and isinstance(self._state, (Idle, Error))
        )

    def _transition(self, new_state: WorkflowState) -> None:
        logger.info(f"Workflow transition: {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state

    def _assets_locked(self) -> bool:
        return isinstance(self._state, (Analyzing, Success))

    def set_reference_asset(self, asset: Optional[ImageAsset]) -> bool:
        """Set or clear (None) the reference asset. Ignored while analyzing or showing a result."""
        if self._assets_locked():
            logger.warning(f"Reference asset change ignored (state={self._state.status.value})")
            return False
        self._reference_asset = asset
        return True

    def set_inspection_asset(self, asset: Optional[ImageAsset]) -> bool:
        """Set or clear (None) the inspection asset. Ignored while analyzing or showing a result."""
        if self._assets_locked():
            logger.warning(f"Inspection asset change ignored (state={self._state.status.value})")
            return False
        self._inspection_asset = asset
        return True

    async def trigger(self) -> WorkflowState:
        """
        Run one analysis of the current asset pair.

        No-op (returns the current state) when an asset is missing or the workflow
        is not in Idle or Error.

        A cancelled caller leaves the workflow in Error; the cancellation propagates.

        Returns:
            Final state: Success or Error
        """
        if not self.is_ready:
            logger.debug(f"Trigger ignored (state={self._state.status.value})")
            return self._state

        reference, inspection = self._reference_asset, self._inspection_asset
        messages = get_error_messages(self.client.settings.output_language)
        self._transition(Analyzing())
        try:
            result = await self.client.analyze(reference, inspection)
        except asyncio.CancelledError:
            logger.warning("Inspection cancelled")
            self._transition(Error(message=messages.cancelled))
            raise
        except Exception as e:
            logger.error(f"Inspection failed: {e}", exc_info=True)
            self._transition(Error(message=str(e) or messages.unexpected_error))
        else:
            self._transition(Success(result=result))
        return self._state

    def reset(self) -> bool:
        """Back to Idle, clearing the inspection asset and any result or error."""
        if isinstance(self._state, Analyzing):
            logger.warning("Reset ignored while analyzing")
            return False
        self._inspection_asset = None
        self._transition(Idle())
        return True

    def full_reset(self) -> bool:
        """reset() plus clearing the reference asset."""
        if not self.reset():
            return False
        self._reference_asset = None
        return True
