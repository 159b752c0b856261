"""
Stage positions and tiled XY grid generation.

A tiled region is laid out in camera pixel space around a center point and
mapped to stage coordinates through the affine transform reported by the
geometry provider. Tiles are visited in serpentine (snake) order: even
columns top to bottom, odd columns bottom to top.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np

from acquisition_sequencer.errors import TilingConfigurationError
from acquisition_sequencer.geometry.affine import AffineTransform
from acquisition_sequencer.geometry.provider import GeometryProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XYStagePosition:
    """One stage position, usually a tile of a grid.

    (x, y) is the stage coordinate of the tile CENTER. Tile sizes are in
    camera pixels; ``transform`` maps pixel offsets from the tile center to
    stage coordinates near this position.
    """

    x: float
    y: float
    tile_width_minus_overlap: int
    tile_height_minus_overlap: int
    full_tile_width: int
    full_tile_height: int
    row: int
    col: int
    transform: AffineTransform

    @property
    def name(self) -> str:
        return f"Grid_{self.col}_{self.row}"

    @property
    def center(self) -> Tuple[float, float]:
        return self.x, self.y

    def _corners(self, width: float, height: float) -> np.ndarray:
        half_w, half_h = width / 2.0, height / 2.0
        pixel_corners = [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]
        return self.transform.transform_points(pixel_corners)

    def full_tile_corners(self) -> np.ndarray:
        """Stage coordinates of the full camera field (4x2, clockwise from top-left)."""
        return self._corners(self.full_tile_width, self.full_tile_height)

    def displayed_tile_corners(self) -> np.ndarray:
        """Stage coordinates of the tile without its overlap margin."""
        return self._corners(self.tile_width_minus_overlap, self.tile_height_minus_overlap)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "row": self.row,
            "col": self.col,
            "tile_width_minus_overlap": self.tile_width_minus_overlap,
            "tile_height_minus_overlap": self.tile_height_minus_overlap,
            "full_tile_width": self.full_tile_width,
            "full_tile_height": self.full_tile_height,
        }


def tile_xy_positions(
    geometry: GeometryProvider,
    tile_overlap: float,
    center_x: float,
    center_y: float,
    num_rows: int,
    num_cols: int,
) -> List[XYStagePosition]:
    """
    Make the list of XY positions covering a tiled region around a center.

    Overlap in pixels is truncated to an integer (never rounded) so that the
    tile stride is the same whole number of pixels everywhere in the grid.

    Args:
        geometry: Provider of the frame size and pixel-to-stage transforms
        tile_overlap: Overlap between adjacent tiles as a fraction of the frame (0.1 = 10%)
        center_x: Stage X of the grid center
        center_y: Stage Y of the grid center
        num_rows: Number of tile rows
        num_cols: Number of tile columns

    Returns:
        Positions in serpentine acquisition order

    Raises:
        ValueError: Negative grid size or overlap outside [0, 1)
        TilingConfigurationError: The transform or camera size could not be obtained
    """
    if num_rows < 0 or num_cols < 0:
        raise ValueError(f"Grid size must not be negative, got {num_rows} rows x {num_cols} cols")
    if not 0.0 <= tile_overlap < 1.0:
        raise ValueError(f"Tile overlap must be a fraction in [0, 1), got {tile_overlap}")

    try:
        transform = geometry.get_affine_transform(center_x, center_y)
        full_tile_width = int(geometry.get_image_width())
        full_tile_height = int(geometry.get_image_height())
        overlap_x = int(full_tile_width * tile_overlap)
        overlap_y = int(full_tile_height * tile_overlap)
        tile_width_minus_overlap = full_tile_width - overlap_x
        tile_height_minus_overlap = full_tile_height - overlap_y

        positions: List[XYStagePosition] = []
        for col in range(num_cols):
            x_pixel_offset = (col - (num_cols - 1) / 2.0) * tile_width_minus_overlap
            # snake: odd columns run back up
            rows = range(num_rows) if col % 2 == 0 else range(num_rows - 1, -1, -1)
            for row in rows:
                y_pixel_offset = (row - (num_rows - 1) / 2.0) * tile_height_minus_overlap
                stage_x, stage_y = transform.transform((x_pixel_offset, y_pixel_offset))
                positions.append(
                    XYStagePosition(
                        x=stage_x,
                        y=stage_y,
                        tile_width_minus_overlap=tile_width_minus_overlap,
                        tile_height_minus_overlap=tile_height_minus_overlap,
                        full_tile_width=full_tile_width,
                        full_tile_height=full_tile_height,
                        row=row,
                        col=col,
                        transform=geometry.get_affine_transform(stage_x, stage_y),
                    )
                )
    except Exception as e:
        raise TilingConfigurationError(f"Couldn't get affine transform: {e}") from e

    logger.info(
        f"Generated {len(positions)} tile positions ({num_rows} rows x {num_cols} cols, "
        f"overlap {overlap_x}x{overlap_y} px) around ({center_x:.2f}, {center_y:.2f})"
    )
    return positions
