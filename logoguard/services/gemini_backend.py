"""
Gemini transport for the visual-comparison model.
"""

import base64
import logging
from typing import Optional

from google import genai
from google.genai import types

from logoguard.schemas.analysis_schemas import AnalysisRequest
from logoguard.services.analysis_client import TransportError, VisionBackend, VisionResponse

logger = logging.getLogger(__name__)


class GeminiVisionBackend(VisionBackend):
    """VisionBackend backed by the google-genai async client"""

    name = "gemini"

    def __init__(self, api_key: str, model: str, thinking_budget: int = 1024, client: Optional[genai.Client] = None):
        self.model = model
        self.thinking_budget = thinking_budget
        self.client = client or genai.Client(api_key=api_key)

    def build_config(self, request: AnalysisRequest) -> types.GenerateContentConfig:
        thinking_config = None
        if self.thinking_budget > 0:
            thinking_config = types.ThinkingConfig(thinking_budget=self.thinking_budget)
        return types.GenerateContentConfig(
            system_instruction=request.system_instruction,
            response_mime_type="application/json",
            response_schema=request.output_schema,
            thinking_config=thinking_config,
        )

    def build_contents(self, request: AnalysisRequest) -> list:
        parts = [types.Part.from_text(text=request.prompt_text)]
        for image in request.images:
            parts.append(types.Part.from_bytes(data=base64.b64decode(image.data), mime_type=image.media_type))
        return [types.Content(role="user", parts=parts)]

    async def generate(self, request: AnalysisRequest) -> VisionResponse:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.build_contents(request),
                config=self.build_config(request),
            )
        except Exception as e:
            raise TransportError(f"Gemini request failed: {e}") from e
        return VisionResponse(text=response.text)
