"""
Core Geometry

- geometry_mapper: 0-1000 defect boxes to percentage overlay regions
"""

from logoguard.core.geometry_mapper import OverlayRegion, map_defects, to_region

__all__ = ["OverlayRegion", "map_defects", "to_region"]
