"""
Acquisition package - Event generation for multi-dimensional acquisitions.

This package contains the acquisition event model, the axis generators,
the pipeline that composes them, tiled position planning and tile
configuration utilities.

Modules:
    events: Acquisition event model (AcquisitionEvent)
    channels: Channel group configuration (ChannelGroupSettings)
    positions: Stage positions and tiled grids (XYStagePosition, tile_xy_positions)
    axes: Time, z, channel and position axis generators
    pipeline: Axis composition (AcquisitionPipeline)
    tiles: Tile configuration utilities (TileConfigUtils)
"""

from acquisition_sequencer.acquisition.events import AcquisitionEvent
from acquisition_sequencer.acquisition.channels import ChannelGroupSettings, ChannelSetting
from acquisition_sequencer.acquisition.positions import XYStagePosition, tile_xy_positions
from acquisition_sequencer.acquisition.axes import (
    AxisGenerator,
    EventIterator,
    channels,
    positions,
    timelapse,
    z_stack,
)
from acquisition_sequencer.acquisition.pipeline import AcquisitionPipeline, multi_d_pipeline
from acquisition_sequencer.acquisition.tiles import TileConfigUtils

__all__ = [
    "AcquisitionEvent",
    "ChannelGroupSettings",
    "ChannelSetting",
    "XYStagePosition",
    "tile_xy_positions",
    "AxisGenerator",
    "EventIterator",
    "timelapse",
    "z_stack",
    "channels",
    "positions",
    "AcquisitionPipeline",
    "multi_d_pipeline",
    "TileConfigUtils",
]
