"""
Shared pytest fixtures for acquisition_sequencer tests.

Provides geometry providers, channel groups, tile configuration data and
acquisition plans for event generation and tiling tests.
"""

import pytest
from pathlib import Path
import tempfile

from acquisition_sequencer.acquisition.channels import ChannelGroupSettings, ChannelSetting
from acquisition_sequencer.geometry.affine import AffineTransform
from acquisition_sequencer.geometry.provider import StaticGeometryProvider


class FixedClock:
    """Deterministic wall clock that counts how often it is read."""

    def __init__(self, now_s: float = 1000.0):
        self.now_s = now_s
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return self.now_s


@pytest.fixture
def fixed_clock():
    """
    Clock frozen at t = 1000 s (1,000,000 ms).

    Returns:
        FixedClock: Callable returning seconds
    """
    return FixedClock()


@pytest.fixture
def unit_geometry():
    """
    Geometry with 1 um pixels and a 100 x 80 pixel camera.

    Returns:
        StaticGeometryProvider
    """
    return StaticGeometryProvider(AffineTransform.from_pixel_size(1.0), 100, 80)


@pytest.fixture
def rotated_geometry():
    """
    Geometry with the camera rotated 90 degrees relative to the stage.

    Pixel (x, y) maps to stage offset (-y, x).

    Returns:
        StaticGeometryProvider
    """
    affine = AffineTransform.from_pixel_size_affine([0.0, -1.0, 0.0, 1.0, 0.0, 0.0])
    return StaticGeometryProvider(affine, 100, 80)


@pytest.fixture
def channel_group():
    """
    Channel group with one inactive channel and one focus offset.

    Returns:
        ChannelGroupSettings: DAPI (offset 0), FITC (offset 1.5), Cy5 (inactive)
    """
    return ChannelGroupSettings(
        "Channel",
        [
            ChannelSetting(group="Channel", name="DAPI", offset=0.0, exposure=50.0),
            ChannelSetting(group="Channel", name="FITC", offset=1.5),
            ChannelSetting(group="Channel", name="Cy5", offset=-2.0, use=False),
        ],
    )


@pytest.fixture
def inactive_channel_group():
    """
    Channel group in which no channel is active.

    Returns:
        ChannelGroupSettings
    """
    return ChannelGroupSettings(
        "Channel",
        [
            ChannelSetting(group="Channel", name="DAPI", use=False),
            ChannelSetting(group="Channel", name="FITC", use=False),
        ],
    )


@pytest.fixture
def sample_tile_configuration_txt():
    """
    Sample TileConfiguration.txt content for parsing tests.

    Returns:
        str: Sample TileConfiguration.txt format
    """
    return """# Define the number of dimensions we are working on
dim = 2

# Define the image coordinates
tile_0.tif; ; (0.0, 0.0)
tile_1.tif; ; (512.5, 0.0)
tile_2.tif; ; (1025.0, 0.0)
tile_3.tif; ; (0.0, 512.5)
tile_4.tif; ; (512.5, 512.5)
tile_5.tif; ; (1025.0, 512.5)
"""


@pytest.fixture
def sample_tile_positions():
    """
    Sample tile positions for TileConfiguration generation testing.

    Returns:
        list: List of (x, y) tuples representing tile positions
    """
    return [
        (0.0, 0.0),
        (512.5, 0.0),
        (1025.0, 0.0),
        (0.0, 512.5),
        (512.5, 512.5),
        (1025.0, 512.5),
    ]


@pytest.fixture
def sample_tile_positions_3d():
    """
    Sample 3D tile positions for stage TileConfiguration testing.

    Returns:
        list: List of (x, y, z) tuples representing stage positions
    """
    return [
        (1000.0, 2000.0, 5000.0),
        (1512.5, 2000.0, 5000.0),
        (2025.0, 2000.0, 5000.0),
        (1000.0, 2512.5, 5000.0),
        (1512.5, 2512.5, 5000.0),
        (2025.0, 2512.5, 5000.0),
    ]


@pytest.fixture
def temp_output_directory():
    """
    Create a temporary directory for test output files.

    Yields:
        Path: Temporary directory path
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_plan_dict():
    """
    Acquisition plan covering all four axes.

    2 time points x 4 tiles x 2 active channels x 3 slices = 48 events.

    Returns:
        dict: Plan mapping as loaded from YAML
    """
    return {
        "order": "tpcz",
        "time": {"num_time_points": 2, "interval_ms": 1000},
        "z": {"start": 0, "stop": 3, "step": 0.5, "origin": 100.0},
        "channels": {
            "group": "Channel",
            "channels": [
                {"name": "DAPI", "offset": 0.0, "exposure": 50},
                {"name": "FITC", "offset": 1.5},
                {"name": "Cy5", "use": False},
            ],
        },
        "tiling": {"overlap": 0.1, "center": [1000.0, 2000.0], "rows": 2, "cols": 2},
        "geometry": {"image_width": 100, "image_height": 80, "pixel_size_um": 1.0},
    }


@pytest.fixture
def sample_plan_yaml(temp_output_directory):
    """
    YAML file with a small tiled two-channel plan.

    Returns:
        Path: Path to the plan file
    """
    plan_path = temp_output_directory / "plan.yml"
    plan_path.write_text(
        """order: pcz
z:
  start: 0
  stop: 2
  step: 1.0
channels:
  group: Channel
  channels:
    - name: DAPI
    - name: FITC
      offset: 1.5
tiling:
  overlap: 0.0
  center: [0.0, 0.0]
  rows: 2
  cols: 2
geometry:
  image_width: 100
  image_height: 80
  pixel_size_um: 1.0
"""
    )
    return plan_path
