"""
Defect Overlay Visualizer

Draws the defect regions returned by an analysis onto the inspection photo,
numbers each box, and adds a verdict banner.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from logoguard.core.geometry_mapper import map_defects
from logoguard.schemas.analysis_schemas import AnalysisResult, Verdict
from logoguard.utils.image_codec import AssetLike, ImageDecodeError, decode_to_array


@dataclass
class VisualizerConfig:
    """Visualizer configuration"""

    box_color: Tuple[int, int, int] = (0, 0, 255)  # BGR: Red
    box_thickness: int = 2
    fill_alpha: float = 0.2
    label_font_scale: float = 0.6
    label_thickness: int = 2
    show_labels: bool = True
    show_banner: bool = True

    verdict_colors: Tuple[Tuple[str, Tuple[int, int, int]], ...] = (
        ("PASS", (0, 200, 0)),  # Green
        ("FAIL", (0, 0, 200)),  # Red
        ("UNCERTAIN", (0, 200, 230)),  # Yellow
    )


class VisualizationError(Exception):
    """Base exception for visualization errors"""

    pass


class DefectOverlayVisualizer:
    """
    Renders analysis results over the inspection image.

    Regions are mapped from percentages to the pixel size of the decoded image,
    so the same result renders correctly at any resolution.
    """

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()

    def draw(self, image: np.ndarray, result: AnalysisResult) -> np.ndarray:
        """
        Draw defect regions on a copy of the image.

        Args:
            image: Inspection image (BGR)
            result: Analysis result

        Returns:
            Overlaid image (BGR)
        """
        overlay = image.copy()
        h, w = overlay.shape[:2]

        for index, (_, region) in enumerate(map_defects(result.defects), start=1):
            if region is None or not region.is_drawable:
                continue
            x1, y1, x2, y2 = region.to_pixels(w, h)
            self._draw_box(overlay, (x1, y1, x2, y2))
            if self.config.show_labels:
                self._draw_label(overlay, str(index), (x1, y1))

        if self.config.show_banner:
            self._draw_verdict_banner(overlay, result)
        return overlay

    def render(self, asset: AssetLike, result: AnalysisResult) -> bytes:
        """
        Decode the asset, draw the overlay and encode it as PNG.

        Raises:
            VisualizationError: If the asset cannot be decoded or the PNG encoding fails
        """
        try:
            image = decode_to_array(asset)
        except ImageDecodeError as e:
            raise VisualizationError(f"Cannot decode inspection image: {e}") from e

        ok, buffer = cv2.imencode(".png", self.draw(image, result))
        if not ok:
            raise VisualizationError("PNG encoding failed")
        return buffer.tobytes()

    def _draw_box(self, image: np.ndarray, rect: Tuple[int, int, int, int]):
        x1, y1, x2, y2 = rect
        if self.config.fill_alpha > 0:
            tinted = image.copy()
            cv2.rectangle(tinted, (x1, y1), (x2, y2), self.config.box_color, -1)
            cv2.addWeighted(tinted, self.config.fill_alpha, image, 1 - self.config.fill_alpha, 0, dst=image)
        cv2.rectangle(image, (x1, y1), (x2, y2), self.config.box_color, self.config.box_thickness)

    def _draw_label(self, image: np.ndarray, text: str, anchor: Tuple[int, int]):
        font = cv2.FONT_HERSHEY_SIMPLEX
        (text_w, text_h), baseline = cv2.getTextSize(
            text, font, self.config.label_font_scale, self.config.label_thickness
        )
        x, y = anchor
        y_top = max(0, y - text_h - baseline - 4)
        cv2.rectangle(image, (x, y_top), (x + text_w + 6, y_top + text_h + baseline + 4), self.config.box_color, -1)
        cv2.putText(
            image,
            text,
            (x + 3, y_top + text_h + 2),
            font,
            self.config.label_font_scale,
            (255, 255, 255),
            self.config.label_thickness,
            cv2.LINE_AA,
        )

    def _draw_verdict_banner(self, image: np.ndarray, result: AnalysisResult):
        """Draw verdict and confidence banner"""
        banner_text = f"[{result.verdict.value}] {result.confidence_display}%"

        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = 1.0
        thickness = 2
        (text_w, text_h), baseline = cv2.getTextSize(banner_text, font, font_scale, thickness)

        colors = dict(self.config.verdict_colors)
        bg_color = colors.get(result.verdict.value, colors[Verdict.UNCERTAIN.value])
        cv2.rectangle(image, (10, 10), (30 + text_w, 30 + text_h), bg_color, -1)
        cv2.putText(
            image, banner_text, (20, 20 + text_h), font, font_scale, (255, 255, 255), thickness, cv2.LINE_AA  # White
        )
