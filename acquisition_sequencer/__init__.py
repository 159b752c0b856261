"""
Acquisition Sequencer - Multi-dimensional Acquisition Event Generation
======================================================================

A library for planning multi-dimensional microscope acquisitions. Provides:

- Lazily generated acquisition events (time, z, channel, position axes)
- Composable axis generators chained through an explicit pipeline
- Tiled XY position grids mapped through the pixel-to-stage affine transform
- Serpentine tile ordering to minimize stage travel
- TileConfiguration.txt export for stitching
- YAML acquisition plans and a command line planner

The library only decides *what* events exist and in *what order*. Executing
them against hardware (moving stages, waiting for the minimum start time,
snapping images) is left to the orchestration layer that consumes the stream.

Example Usage:
-------------
from acquisition_sequencer.acquisition import AcquisitionPipeline, channels, timelapse, z_stack

pipeline = AcquisitionPipeline([
    timelapse(num_time_points=10, interval_ms=5000),
    channels(channel_group),
    z_stack(0, 20, z_step=0.5, z_origin=1200.0),
])
for event in pipeline.events():
    execute(event)
"""

__version__ = "1.0.0"
