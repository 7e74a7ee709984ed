"""
Defect geometry mapping.

The remote model reports boxes on a fixed 0-1000 grid as (top, left, bottom, right).
They are turned into percentages of the displayed image so overlays can be drawn
at any size without knowing the source pixel dimensions.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from logoguard.schemas.analysis_schemas import BOX_SCALE, Defect

PERCENT_DIVISOR = BOX_SCALE / 100  # 0-1000 -> 0-100


@dataclass(frozen=True)
class OverlayRegion:
    """Box position and size as percentages of the displayed image"""

    top_pct: float
    left_pct: float
    height_pct: float
    width_pct: float

    @property
    def is_drawable(self) -> bool:
        return self.height_pct > 0 and self.width_pct > 0

    def to_pixels(self, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
        """
        Convert to pixel rectangle (x1, y1, x2, y2).

        Negative extents collapse to zero size. Corners are clipped to one image size
        beyond each edge so far out-of-range boxes stay drawable.
        """
        x1 = float(self.left_pct) / 100 * image_width
        y1 = float(self.top_pct) / 100 * image_height
        w = max(float(self.width_pct), 0.0) / 100 * image_width
        h = max(float(self.height_pct), 0.0) / 100 * image_height
        xs = np.clip(np.round([x1, x1 + w]), -image_width, 2 * image_width)
        ys = np.clip(np.round([y1, y1 + h]), -image_height, 2 * image_height)
        return int(xs[0]), int(ys[0]), int(xs[1]), int(ys[1])


def to_region(box: Optional[Sequence[float]]) -> Optional[OverlayRegion]:
    """
    Map a 0-1000 box to a percentage region.

    Args:
        box: [top, left, bottom, right] or None

    Returns:
        OverlayRegion, or None when the box is absent or not exactly 4 values.
        Out-of-range and inverted boxes are passed through unclamped.
    """
    if box is None or len(box) != 4:
        return None
    top, left, bottom, right = box
    return OverlayRegion(
        top_pct=top / PERCENT_DIVISOR,
        left_pct=left / PERCENT_DIVISOR,
        height_pct=(bottom - top) / PERCENT_DIVISOR,
        width_pct=(right - left) / PERCENT_DIVISOR,
    )


def map_defects(defects: Sequence[Defect]) -> List[Tuple[Defect, Optional[OverlayRegion]]]:
    """Pair each defect with its region (None for description-only defects)."""
    return [(defect, to_region(defect.box_2d)) for defect in defects]
