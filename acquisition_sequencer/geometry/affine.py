"""
Affine transform between camera pixel space and stage space.

The transform is stored as a 2x3 matrix::

    [[a, b, tx],
     [c, d, ty]]

so that ``stage = [[a, b], [c, d]] @ pixel + [tx, ty]``. The linear part
carries pixel size, rotation and shear; the translation anchors pixel offsets
(measured from the image center) to an absolute stage position.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np


class AffineTransform:
    """Immutable 2D affine mapping backed by a numpy array."""

    __slots__ = ("_matrix",)

    def __init__(self, matrix):
        m = np.array(matrix, dtype=np.float64)
        if m.shape != (2, 3):
            raise ValueError(f"Affine transform needs a 2x3 matrix, got shape {m.shape}")
        m.setflags(write=False)
        self._matrix = m

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])

    @classmethod
    def from_pixel_size(cls, pixel_size_um: float) -> "AffineTransform":
        """Pure scaling transform for an uncalibrated (unrotated) camera."""
        return cls([[pixel_size_um, 0.0, 0.0], [0.0, pixel_size_um, 0.0]])

    @classmethod
    def from_pixel_size_affine(cls, values: Sequence[float]) -> "AffineTransform":
        """
        Build a transform from the 6-value Micro-Manager pixel size affine.

        Args:
            values: (a, b, tx, c, d, ty) in row-major order

        Returns:
            AffineTransform
        """
        values = [float(v) for v in values]
        if len(values) != 6:
            raise ValueError(f"Pixel size affine needs 6 values, got {len(values)}")
        return cls([values[0:3], values[3:6]])

    @property
    def matrix(self) -> np.ndarray:
        """Read-only 2x3 matrix."""
        return self._matrix

    @property
    def linear(self) -> np.ndarray:
        return self._matrix[:, :2]

    @property
    def translation(self) -> Tuple[float, float]:
        return float(self._matrix[0, 2]), float(self._matrix[1, 2])

    def transform(self, point: Iterable[float]) -> Tuple[float, float]:
        """Map a single (x, y) point."""
        x, y = point
        out = self.linear @ np.array([x, y], dtype=np.float64) + self._matrix[:, 2]
        return float(out[0]), float(out[1])

    def transform_points(self, points) -> np.ndarray:
        """Map an (N, 2) array of points; returns an (N, 2) array."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        return pts @ self.linear.T + self._matrix[:, 2]

    def inverse(self) -> "AffineTransform":
        det = float(np.linalg.det(self.linear))
        if np.isclose(det, 0.0):
            raise ValueError("Affine transform is singular and cannot be inverted")
        inv_linear = np.linalg.inv(self.linear)
        inv_translation = -inv_linear @ self._matrix[:, 2]
        return AffineTransform(np.column_stack([inv_linear, inv_translation]))

    def translated_to(self, x: float, y: float) -> "AffineTransform":
        """Copy of this transform with the translation replaced by (x, y)."""
        return AffineTransform(np.column_stack([self.linear, [x, y]]))

    def is_degenerate(self) -> bool:
        """True when the linear part cannot map pixels to stage (e.g. all zeros)."""
        return bool(np.isclose(np.linalg.det(self.linear), 0.0))

    def __eq__(self, other):
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self):
        return hash(self._matrix.tobytes())

    def __repr__(self):
        (a, b, tx), (c, d, ty) = self._matrix.tolist()
        return f"AffineTransform([[{a:g}, {b:g}, {tx:g}], [{c:g}, {d:g}, {ty:g}]])"
