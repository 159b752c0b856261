"""
Geometry package - Pixel/stage coordinate mapping.

Modules:
    affine: 2x3 affine transform between pixel and stage space (AffineTransform)
    provider: Camera frame size and local transform lookup (GeometryProvider)
"""

from acquisition_sequencer.geometry.affine import AffineTransform
from acquisition_sequencer.geometry.provider import (
    CoreGeometryProvider,
    GeometryProvider,
    StaticGeometryProvider,
)

__all__ = ["AffineTransform", "GeometryProvider", "StaticGeometryProvider", "CoreGeometryProvider"]
