"""
Geometry providers - camera frame size and the local pixel-to-stage transform.

Tiling asks a provider for the affine transform valid near a stage position.
A provider may re-estimate the transform at every position (large-format
stitching over a curved or rotated stage); the simple providers here use one
calibration everywhere and only move the translation to the requested point.
"""

import logging
from typing import Protocol, Sequence

from acquisition_sequencer.errors import GeometryError
from acquisition_sequencer.geometry.affine import AffineTransform

logger = logging.getLogger(__name__)


class GeometryProvider(Protocol):
    """Boundary to the camera/stage hardware used for tile planning."""

    def get_affine_transform(self, x: float, y: float) -> AffineTransform:
        ...

    def get_image_width(self) -> int:
        ...

    def get_image_height(self) -> int:
        ...


class StaticGeometryProvider:
    """
    Geometry with a single, spatially uniform pixel calibration.

    Args:
        pixel_affine: AffineTransform whose linear part maps pixels to stage
            units (its translation is ignored)
        image_width: Camera frame width in pixels
        image_height: Camera frame height in pixels
    """

    def __init__(self, pixel_affine: AffineTransform, image_width: int, image_height: int):
        if image_width <= 0 or image_height <= 0:
            raise GeometryError(f"Invalid image size {image_width}x{image_height}")
        self.pixel_affine = pixel_affine
        self.image_width = int(image_width)
        self.image_height = int(image_height)

    @classmethod
    def from_pixel_size(cls, pixel_size_um: float, image_width: int, image_height: int):
        return cls(AffineTransform.from_pixel_size(pixel_size_um), image_width, image_height)

    def get_affine_transform(self, x: float, y: float) -> AffineTransform:
        return self.pixel_affine.translated_to(x, y)

    def get_image_width(self) -> int:
        return self.image_width

    def get_image_height(self) -> int:
        return self.image_height

    def __repr__(self):
        return (
            f"StaticGeometryProvider({self.pixel_affine!r}, "
            f"{self.image_width}x{self.image_height})"
        )


def _vector_to_list(vector) -> Sequence[float]:
    # Java DoubleVector (pycromanager bridge) exposes size()/get(i)
    if hasattr(vector, "size") and callable(vector.size) and hasattr(vector, "get"):
        return [float(vector.get(i)) for i in range(vector.size())]
    return [float(v) for v in vector]


class CoreGeometryProvider:
    """
    Geometry read from a pycromanager-style Micro-Manager core.

    The core must provide ``get_image_width``, ``get_image_height``,
    ``get_pixel_size_affine`` and ``get_pixel_size_um``. When the current
    pixel size configuration carries no affine calibration the scalar pixel
    size is used instead. Any failure talking to the core is raised as a
    GeometryError chained to the original exception.
    """

    def __init__(self, core):
        self.core = core

    def _pixel_affine(self) -> AffineTransform:
        try:
            affine = AffineTransform.from_pixel_size_affine(
                _vector_to_list(self.core.get_pixel_size_affine())
            )
            if not affine.is_degenerate():
                return affine
            pixel_size = float(self.core.get_pixel_size_um())
        except Exception as e:
            raise GeometryError(f"Could not read pixel size calibration: {e}") from e

        if pixel_size <= 0:
            raise GeometryError("No pixel size calibration defined for the current configuration")
        logger.debug(f"Pixel size affine not calibrated, using pixel size {pixel_size} um")
        return AffineTransform.from_pixel_size(pixel_size)

    def get_affine_transform(self, x: float, y: float) -> AffineTransform:
        return self._pixel_affine().translated_to(x, y)

    def get_image_width(self) -> int:
        try:
            return int(self.core.get_image_width())
        except Exception as e:
            raise GeometryError(f"Could not read camera image width: {e}") from e

    def get_image_height(self) -> int:
        try:
            return int(self.core.get_image_height())
        except Exception as e:
            raise GeometryError(f"Could not read camera image height: {e}") from e
