"""
Image asset encoding for transport.

An asset is held as a data URL (``data:<media>;base64,<body>``); only the body is
sent to the remote model.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np


class ImageDecodeError(ValueError):
    """Asset payload could not be decoded into an image"""


@dataclass(frozen=True)
class ImageAsset:
    """Immutable image payload in data-URL form"""

    data_url: str
    asset_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @classmethod
    def from_bytes(cls, data: bytes, media_type: str = "image/png") -> "ImageAsset":
        body = base64.b64encode(data).decode("ascii")
        return cls(data_url=f"data:{media_type};base64,{body}")

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ImageAsset":
        filepath = Path(filepath)
        media_type, _ = mimetypes.guess_type(filepath.name)
        return cls.from_bytes(filepath.read_bytes(), media_type or "image/png")

    @property
    def media_type(self) -> Optional[str]:
        return media_type_of(self)


AssetLike = Union[ImageAsset, str]


def _data_url(asset: AssetLike) -> str:
    return asset.data_url if isinstance(asset, ImageAsset) else str(asset)


def encode(asset: AssetLike) -> str:
    """
    Strip the metadata prefix and return the encoded body.

    Args:
        asset: ImageAsset or raw ``<prefix>,<body>`` string

    Returns:
        The encoded body, or "" when the string has no separator
    """
    parts = _data_url(asset).split(",")
    if len(parts) < 2:
        return ""
    return parts[1]


def media_type_of(asset: AssetLike, default: Optional[str] = None) -> Optional[str]:
    """Return the media type declared in the prefix, e.g. ``image/jpeg``."""
    data_url = _data_url(asset)
    if "," not in data_url:
        return default
    prefix = data_url.split(",", 1)[0]
    if not prefix.startswith("data:"):
        return default
    media_type = prefix[len("data:") :].split(";", 1)[0].strip()
    return media_type or default


def decode_bytes(asset: AssetLike) -> bytes:
    payload = encode(asset)
    if not payload:
        raise ImageDecodeError("Asset has no encoded payload")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e


def decode_to_array(asset: AssetLike) -> np.ndarray:
    """Decode an asset into a BGR image array."""
    data = np.frombuffer(decode_bytes(asset), dtype=np.uint8)
    if data.size == 0:
        raise ImageDecodeError("Asset payload is empty")
    image = cv2.imdecode(data, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError("Not an image")
    return image
