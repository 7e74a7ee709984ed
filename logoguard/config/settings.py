"""
Runtime settings for the inspection pipeline.

Settings are read once from the environment and then passed explicitly to the
services that need them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_OUTPUT_LANGUAGE = "ja"
DEFAULT_THINKING_BUDGET = 1024
DEFAULT_MEDIA_TYPE = "image/png"
DEFAULT_MAX_UPLOAD_MB = 10


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _int_or_default(value: Optional[str], default: int) -> int:
    value = _clean(value)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class InspectionSettings:
    """Inspection pipeline configuration"""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    output_language: str = DEFAULT_OUTPUT_LANGUAGE
    thinking_budget: int = DEFAULT_THINKING_BUDGET
    default_media_type: str = DEFAULT_MEDIA_TYPE
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InspectionSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            InspectionSettings instance
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=_clean(env.get("GEMINI_API_KEY")) or _clean(env.get("API_KEY")),
            model=_clean(env.get("LOGOGUARD_MODEL")) or DEFAULT_MODEL,
            output_language=_clean(env.get("LOGOGUARD_OUTPUT_LANGUAGE")) or DEFAULT_OUTPUT_LANGUAGE,
            thinking_budget=_int_or_default(env.get("LOGOGUARD_THINKING_BUDGET"), DEFAULT_THINKING_BUDGET),
            default_media_type=_clean(env.get("LOGOGUARD_DEFAULT_MEDIA_TYPE")) or DEFAULT_MEDIA_TYPE,
            max_upload_mb=_int_or_default(env.get("LOGOGUARD_MAX_UPLOAD_MB"), DEFAULT_MAX_UPLOAD_MB),
        )
