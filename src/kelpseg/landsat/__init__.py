"""Landsat kelp pixel processing.

- loader: Read the canopy raster and the segment polygons
- segment_assigner: Pixel-to-segment spatial join
- presence_classifier: Historical kelp presence per segment
- max_occupiable: Maximum occupiable area per segment
"""

from kelpseg.landsat.loader import LandsatKelpLoader
from kelpseg.landsat.segment_assigner import SegmentAssigner
from kelpseg.landsat.presence_classifier import KelpPresenceClassifier
from kelpseg.landsat.max_occupiable import max_occupiable_area

__all__ = [
    "LandsatKelpLoader",
    "SegmentAssigner",
    "KelpPresenceClassifier",
    "max_occupiable_area",
]
