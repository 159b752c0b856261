"""
Tile configuration utilities for stitching.

This module reads and writes the TileConfiguration.txt files used by
Fiji/ImageJ and QuPath for stitching, converting between them and the
XYStagePosition lists consumed by the position axis.
"""

import logging
import pathlib
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from acquisition_sequencer.acquisition.events import AcquisitionEvent
from acquisition_sequencer.acquisition.positions import XYStagePosition
from acquisition_sequencer.errors import TilingConfigurationError
from acquisition_sequencer.geometry.provider import GeometryProvider

logger = logging.getLogger(__name__)

TILE_LINE_PATTERN = re.compile(r"([\w\-\.]+\.tif)[^(]*\((-?\d+\.?\d*),\s*(-?\d+\.?\d*)\)")


def _xy(position: Union[XYStagePosition, Sequence[float]]) -> Tuple[float, float]:
    if isinstance(position, XYStagePosition):
        return position.x, position.y
    x, y = position
    return float(x), float(y)


class TileConfigUtils:
    """Utilities for reading and writing tile configuration files."""

    @staticmethod
    def read_TileConfiguration_coordinates(tile_config_path) -> Dict[str, Tuple[float, float]]:
        """
        Read tile XY coordinates from a TileConfiguration.txt file.

        Args:
            tile_config_path: Path to TileConfiguration.txt file

        Returns:
            dict: Tile names mapped to (x, y) coordinate tuples, in file order
        """
        coordinates = {}
        with open(tile_config_path, "r") as file:
            for line in file:
                # Format: "tile_name.tif; ; (x, y)"
                match = TILE_LINE_PATTERN.search(line)
                if match:
                    coordinates[match.group(1)] = (float(match.group(2)), float(match.group(3)))
        return coordinates

    @staticmethod
    def read_positions(
        tile_config_path,
        geometry: GeometryProvider,
        pixel_size_um: float = 1.0,
    ) -> List[XYStagePosition]:
        """
        Build stage positions from a TileConfiguration.txt file.

        Pixel coordinates are scaled back to stage units with ``pixel_size_um``.
        Row and column are the rank of the tile's y and x among the distinct
        y and x values in the file, so a regular grid gets its grid indices back.

        Args:
            tile_config_path: Path to TileConfiguration.txt file
            geometry: Provider of the camera size and local transforms
            pixel_size_um: Pixel size the file was written with

        Returns:
            Positions in file order

        Raises:
            FileNotFoundError: The file does not exist
            TilingConfigurationError: The geometry could not be queried
        """
        coordinates = TileConfigUtils.read_TileConfiguration_coordinates(tile_config_path)
        stage_xy = [(x * pixel_size_um, y * pixel_size_um) for x, y in coordinates.values()]

        # round so that float noise does not split one grid line in two
        cols = {v: i for i, v in enumerate(sorted({round(x, 3) for x, _ in stage_xy}))}
        rows = {v: i for i, v in enumerate(sorted({round(y, 3) for _, y in stage_xy}))}

        try:
            width = int(geometry.get_image_width())
            height = int(geometry.get_image_height())
            positions = [
                XYStagePosition(
                    x=x,
                    y=y,
                    tile_width_minus_overlap=width,
                    tile_height_minus_overlap=height,
                    full_tile_width=width,
                    full_tile_height=height,
                    row=rows[round(y, 3)],
                    col=cols[round(x, 3)],
                    transform=geometry.get_affine_transform(x, y),
                )
                for x, y in stage_xy
            ]
        except Exception as e:
            raise TilingConfigurationError(f"Couldn't get affine transform: {e}") from e

        logger.info(f"Read {len(positions)} positions from {tile_config_path}")
        return positions

    @staticmethod
    def write_tileconfig(
        target_foldername: Optional[str] = None,
        positions: Optional[list] = None,
        filename: str = "TileConfiguration.txt",
        pixel_size_um: float = 1.0,
        id1: int = 0,
        suffix_length: int = 3,
        tileconfig_path: Optional[str] = None,
    ) -> Optional[pathlib.Path]:
        """
        Write a TileConfiguration.txt file.

        Args:
            target_foldername: Folder to create file in
            positions: XYStagePositions or (x, y) stage coordinates in micrometers
            filename: Name of output file (default: TileConfiguration.txt)
            pixel_size_um: Pixel size in micrometers for scaling coordinates
            id1: Starting index for tile numbering
            suffix_length: Number of digits for tile index
            tileconfig_path: Direct path to output file (overrides target_foldername/filename)

        Returns:
            Path of the written file, or None if there was nothing to write
        """
        if tileconfig_path is None and target_foldername is not None:
            tileconfig_path = str(pathlib.Path(target_foldername) / filename)

        if tileconfig_path is None or positions is None:
            return None

        # widen the index if the default suffix cannot hold the last tile
        last_tile_index = id1 + len(positions) - 1
        actual_suffix_length = max(suffix_length, len(str(last_tile_index)))

        with open(tileconfig_path, "w") as text_file:
            print("dim = {}".format(2), file=text_file)
            for ix, pos in enumerate(positions):
                file_id = f"tile_{id1 + ix:0{actual_suffix_length}d}"
                x, y = _xy(pos)
                print(
                    f"{file_id}.tif; ; ({x / pixel_size_um:.1f}, {y / pixel_size_um:.1f})",
                    file=text_file,
                )

        logger.info(f"Wrote TileConfiguration with {len(positions)} tiles to {tileconfig_path}")
        return pathlib.Path(tileconfig_path)

    @staticmethod
    def write_tileconfig_stage(
        output_path,
        tile_positions,
        filename: str = "TileConfiguration_Stage.txt",
    ) -> pathlib.Path:
        """
        Write a TileConfiguration file with stage coordinates including Z.

        Args:
            output_path: Directory to write the file (Path or str)
            tile_positions: Iterable (a pipeline's event generator included) of
                AcquisitionEvents with an XY position, or (x, y, z) /
                (filename, x, y, z) tuples
            filename: Name of output file (default: TileConfiguration_Stage.txt)

        Returns:
            Path of the written file
        """
        output_path = pathlib.Path(output_path)
        tileconfig_path = output_path / filename

        with open(tileconfig_path, "w") as f:
            f.write("dim = 3\n")
            f.write("# Stage coordinates in micrometers (X, Y, Z)\n")

            count = 0
            for idx, pos in enumerate(tile_positions):
                tile_filename = f"tile_{idx:03d}.tif"
                if isinstance(pos, AcquisitionEvent):
                    if pos.xy_position is None:
                        raise ValueError(f"Event {pos!r} has no XY position")
                    x, y = pos.xy_position.x, pos.xy_position.y
                    z = 0.0 if pos.z_position is None else pos.z_position
                elif len(pos) == 4:
                    tile_filename, x, y, z = pos
                elif len(pos) == 3:
                    x, y, z = pos
                else:
                    raise ValueError(f"Invalid position format: {pos}. Expected (x,y,z) or (filename,x,y,z)")

                f.write(f"{tile_filename}; ; ({x:.3f}, {y:.3f}, {z:.3f})\n")
                count += 1

        logger.info(f"Wrote stage TileConfiguration with {count} positions to {tileconfig_path}")
        return tileconfig_path
