"""
Security Utilities

Upload validation for image assets.
"""

import re
from pathlib import Path
from typing import Iterable, Optional

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".heic", ".heif")
ALLOWED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/webp", "image/heic", "image/heif")


class SecurityError(Exception):
    """Upload validation failure"""

    pass


def validate_file_extension(filename: str, allowed_extensions: Optional[Iterable[str]] = None) -> bool:
    """
    Check the file extension.

    Args:
        filename: File name
        allowed_extensions: Allowed extensions (e.g. ['.jpg', '.png'])

    Returns:
        Whether the extension is allowed

    Example:
        >>> validate_file_extension("logo.png")
        True
        >>> validate_file_extension("script.exe")
        False
    """
    if allowed_extensions is None:
        allowed_extensions = ALLOWED_EXTENSIONS

    ext = Path(filename or "").suffix.lower()
    return ext in tuple(allowed_extensions)


def validate_file_size(file_size: int, max_size_mb: int = 10) -> bool:
    """
    Check the file size.

    Example:
        >>> validate_file_size(5_000_000, max_size_mb=10)  # 5MB
        True
        >>> validate_file_size(15_000_000, max_size_mb=10)  # 15MB
        False
    """
    max_size_bytes = max_size_mb * 1024 * 1024
    return 0 < file_size <= max_size_bytes


def validate_media_type(media_type: Optional[str], allowed_media_types: Optional[Iterable[str]] = None) -> str:
    """
    Normalize and check a MIME type.

    Returns:
        Lowercased media type without parameters

    Raises:
        SecurityError: If the media type is missing or not an allowed image type
    """
    if allowed_media_types is None:
        allowed_media_types = ALLOWED_MEDIA_TYPES

    if not media_type:
        raise SecurityError("Media type is missing")
    normalized = media_type.split(";", 1)[0].strip().lower()
    if not re.match(r"^[a-z]+/[a-z0-9.+-]+$", normalized):
        raise SecurityError(f"Invalid media type: '{media_type}'")
    if normalized not in tuple(allowed_media_types):
        raise SecurityError(f"Unsupported media type: '{normalized}'")
    return normalized
