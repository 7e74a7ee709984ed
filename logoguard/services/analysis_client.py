"""
Analysis Client

Builds one comparison request from a reference and an inspection image, sends it
to the remote visual-comparison model, and validates the structured reply into an
AnalysisResult.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from logoguard.config.settings import InspectionSettings
from logoguard.schemas.analysis_schemas import RESULT_SCHEMA, AnalysisRequest, AnalysisResult, EncodedImage
from logoguard.services.prompts import get_error_messages, get_prompts
from logoguard.utils.image_codec import AssetLike, encode, media_type_of

logger = logging.getLogger(__name__)


class AnalysisClientError(Exception):
    """Analysis Client operation errors"""

    pass


class ConfigurationError(AnalysisClientError):
    """Credential for the remote model is missing"""

    pass


class ImagePayloadError(AnalysisClientError):
    """An image asset yielded no usable payload"""

    pass


class EmptyResponseError(AnalysisClientError):
    """Remote model returned no text"""

    pass


class MalformedResponseError(AnalysisClientError):
    """Remote text could not be parsed or validated"""

    pass


class TransportError(AnalysisClientError):
    """Remote call itself failed (network, quota, server error)"""

    pass


@dataclass(frozen=True)
class VisionResponse:
    text: Optional[str] = None


class VisionBackend:
    """
    Remote visual-comparison capability.

    Concrete backends wrap a model SDK. Test doubles subclass this and return
    canned responses.
    """

    name: str = "base"

    async def generate(self, request: AnalysisRequest) -> VisionResponse:
        """Send one request and return the raw reply."""
        raise NotImplementedError


BackendFactory = Callable[[InspectionSettings], VisionBackend]


def _default_backend_factory(settings: InspectionSettings) -> VisionBackend:
    from logoguard.services.gemini_backend import GeminiVisionBackend

    return GeminiVisionBackend(api_key=settings.api_key, model=settings.model, thinking_budget=settings.thinking_budget)


def parse_response_payload(text: str) -> Dict[str, Any]:
    """
    Parse raw reply text into an untyped object.

    Raises:
        MalformedResponseError: If text is not a JSON object
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Response must be a JSON object, got {type(payload).__name__}")
    return payload


def validate_result(payload: Dict[str, Any]) -> AnalysisResult:
    """
    Validate an untyped reply object against the result contract.

    Raises:
        MalformedResponseError: If a required field is missing or has the wrong type
    """
    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedResponseError(f"Response failed validation ({fields}): {e}") from e


class AnalysisClient:
    """
    Client for the remote visual-comparison model.

    Responsibilities:
    - Check the credential before any network activity
    - Encode both images and compose the request
    - Issue exactly one call (no retry)
    - Parse and validate the reply
    """

    def __init__(
        self,
        settings: InspectionSettings,
        backend: Optional[VisionBackend] = None,
        backend_factory: Optional[BackendFactory] = None,
    ):
        """
        Initialize Analysis Client.

        Args:
            settings: Inspection settings (credential, model, output language)
            backend: Pre-built backend; takes precedence over backend_factory
            backend_factory: Builds a backend from settings on first use
        """
        self.settings = settings
        self._backend = backend
        self._backend_factory = backend_factory or _default_backend_factory
        logger.info(
            f"AnalysisClient initialized (model={settings.model}, language={settings.output_language}, "
            f"credential={'set' if settings.has_credential else 'missing'})"
        )

    def _get_backend(self) -> VisionBackend:
        if self._backend is None:
            self._backend = self._backend_factory(self.settings)
        return self._backend

    def _encode_image(self, asset: AssetLike, role: str) -> EncodedImage:
        payload = encode(asset) if asset is not None else ""
        if not payload:
            raise ImagePayloadError(f"No usable image payload for {role} image")
        media_type = media_type_of(asset, default=self.settings.default_media_type)
        return EncodedImage(data=payload, media_type=media_type)

    def build_request(self, reference: AssetLike, inspection: AssetLike) -> AnalysisRequest:
        """
        Compose the request for one comparison.

        Raises:
            ImagePayloadError: If either asset has no payload
        """
        prompts = get_prompts(self.settings.output_language)
        return AnalysisRequest(
            system_instruction=prompts.system_instruction,
            prompt_text=prompts.task_prompt,
            images=(self._encode_image(reference, "reference"), self._encode_image(inspection, "inspection")),
            output_schema=RESULT_SCHEMA,
            language_hint=self.settings.output_language,
        )

    async def analyze(self, reference: AssetLike, inspection: AssetLike) -> AnalysisResult:
        """
        Compare an inspection photo against the reference master.

        Args:
            reference: Reference master asset
            inspection: Inspection photo asset

        Returns:
            Validated AnalysisResult

        Raises:
            ConfigurationError: If no credential is configured
            ImagePayloadError: If either asset has no payload
            EmptyResponseError: If the reply has no text
            MalformedResponseError: If the reply cannot be parsed or validated
            Exception: Any backend failure, unchanged
        """
        if not self.settings.has_credential:
            raise ConfigurationError(get_error_messages(self.settings.output_language).missing_credential)

        request = self.build_request(reference, inspection)
        backend = self._get_backend()

        logger.info(f"Sending comparison request via {backend.name} (model={self.settings.model})")
        try:
            response = await backend.generate(request)
        except Exception as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            raise

        text = response.text if response is not None else None
        if not text or not text.strip():
            raise EmptyResponseError(get_error_messages(self.settings.output_language).empty_response)

        result = validate_result(parse_response_payload(text))
        logger.info(
            f"Analysis completed: {result.verdict.value} "
            f"(confidence={result.confidence:.1f}, defects={len(result.defects)})"
        )
        return result
