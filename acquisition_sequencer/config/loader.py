"""
Acquisition plan configuration.

Plans are YAML files describing which axes to acquire and in which order::

    order: tpcz
    time:
      num_time_points: 10
      interval_ms: 5000
    z:
      start: 0
      stop: 20
      step: 0.5
      origin: 1200.0
    channels:
      group: Channel
      channels:
        - {name: DAPI, offset: 0.0, exposure: 50}
        - {name: FITC, offset: 1.5}
        - {name: Cy5, use: false}
    tiling:
      overlap: 0.1
      center: [10000.0, 5000.0]
      rows: 3
      cols: 4
    geometry:
      image_width: 2048
      image_height: 2048
      pixel_size_um: 0.65

Stage positions are given either as a ``tiling`` grid or as an explicit
``positions`` list of ``{x, y}`` entries; both need a ``geometry`` section
(or a provider passed to ``build_pipeline``).
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from acquisition_sequencer.acquisition.channels import ChannelGroupSettings, ChannelSetting
from acquisition_sequencer.acquisition.pipeline import AcquisitionPipeline, multi_d_pipeline
from acquisition_sequencer.acquisition.positions import XYStagePosition, tile_xy_positions
from acquisition_sequencer.errors import ConfigurationError
from acquisition_sequencer.geometry.affine import AffineTransform
from acquisition_sequencer.geometry.provider import GeometryProvider, StaticGeometryProvider

logger = logging.getLogger(__name__)

PLAN_SECTIONS = ("order", "time", "z", "channels", "tiling", "positions", "geometry")


def _section(data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _require(section: Dict[str, Any], name: str, keys: List[str]):
    missing = [k for k in keys if k not in section]
    if missing:
        raise ConfigurationError(f"Section '{name}' is missing required keys: {missing}")


def _parse_channels(section: Dict[str, Any]) -> ChannelGroupSettings:
    group = str(section.get("group", "Channel"))
    entries = section.get("channels")
    if not isinstance(entries, list):
        raise ConfigurationError("Section 'channels' needs a 'channels' list")
    settings = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict) or "name" not in entry:
            raise ConfigurationError(f"Invalid channel entry: {entry!r}")
        exposure = entry.get("exposure")
        settings.append(
            ChannelSetting(
                group=group,
                name=str(entry["name"]),
                offset=float(entry.get("offset", 0.0)),
                use=bool(entry.get("use", True)),
                exposure=None if exposure is None else float(exposure),
            )
        )
    try:
        return ChannelGroupSettings(group, settings)
    except ValueError as e:
        raise ConfigurationError(f"Section 'channels': {e}") from e


def _parse_geometry(section: Dict[str, Any]) -> StaticGeometryProvider:
    _require(section, "geometry", ["image_width", "image_height"])
    if "pixel_affine" in section:
        affine = AffineTransform.from_pixel_size_affine(section["pixel_affine"])
    elif "pixel_size_um" in section:
        affine = AffineTransform.from_pixel_size(float(section["pixel_size_um"]))
    else:
        raise ConfigurationError("Section 'geometry' needs 'pixel_size_um' or 'pixel_affine'")
    if int(section["image_width"]) <= 0 or int(section["image_height"]) <= 0:
        raise ConfigurationError("Section 'geometry' needs a positive image size")
    return StaticGeometryProvider(affine, int(section["image_width"]), int(section["image_height"]))


@dataclass
class AcquisitionPlan:
    """Parsed acquisition plan."""

    order: str = "tpcz"
    time_plan: Optional[Dict[str, Any]] = None
    z_plan: Optional[Dict[str, Any]] = None
    channel_group: Optional[ChannelGroupSettings] = None
    stage_positions: Optional[List[Tuple[float, float]]] = None
    tiling: Optional[Dict[str, Any]] = None
    geometry: Optional[GeometryProvider] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AcquisitionPlan":
        """
        Validate and convert a plan mapping (as loaded from YAML).

        Raises:
            ConfigurationError: A section is malformed or incomplete
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Acquisition plan must be a mapping")
        unknown = sorted(str(k) for k in data if k not in PLAN_SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown plan sections: {unknown}")

        try:
            time_section = _section(data, "time")
            if time_section is not None:
                _require(time_section, "time", ["num_time_points"])
                time_section = {
                    "num_time_points": int(time_section["num_time_points"]),
                    "interval_ms": float(time_section.get("interval_ms", 0)),
                }

            z_section = _section(data, "z")
            if z_section is not None:
                _require(z_section, "z", ["start", "stop"])
                z_section = {
                    "start": int(z_section["start"]),
                    "stop": int(z_section["stop"]),
                    "step": float(z_section.get("step", 1.0)),
                    "origin": float(z_section.get("origin", 0.0)),
                }

            channel_section = _section(data, "channels")
            channel_group = None if channel_section is None else _parse_channels(channel_section)

            tiling = _section(data, "tiling")
            if tiling is not None:
                _require(tiling, "tiling", ["rows", "cols"])
                center = tiling.get("center", [0.0, 0.0])
                tiling = {
                    "overlap": float(tiling.get("overlap", 0.0)),
                    "center": (float(center[0]), float(center[1])),
                    "rows": int(tiling["rows"]),
                    "cols": int(tiling["cols"]),
                }

            stage_positions = None
            if data.get("positions") is not None:
                stage_positions = [(float(p["x"]), float(p["y"])) for p in data["positions"]]

            geometry_section = _section(data, "geometry")
            geometry = None if geometry_section is None else _parse_geometry(geometry_section)
        except ConfigurationError:
            raise
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise ConfigurationError(f"Invalid acquisition plan: {e}") from e

        if tiling is not None and stage_positions is not None:
            raise ConfigurationError("Use either 'tiling' or 'positions', not both")

        return cls(
            order=str(data.get("order", "tpcz")),
            time_plan=time_section,
            z_plan=z_section,
            channel_group=channel_group,
            stage_positions=stage_positions,
            tiling=tiling,
            geometry=geometry,
        )

    def xy_positions(self, geometry: Optional[GeometryProvider] = None) -> Optional[List[XYStagePosition]]:
        """
        Stage positions of the plan, or None if it has no position axis.

        Raises:
            ConfigurationError: Positions are requested but no geometry is available
            GeometryError: The geometry provider failed
        """
        if self.tiling is None and self.stage_positions is None:
            return None
        geometry = geometry or self.geometry
        if geometry is None:
            raise ConfigurationError("Stage positions need a 'geometry' section or a geometry provider")

        if self.tiling is not None:
            center_x, center_y = self.tiling["center"]
            try:
                return tile_xy_positions(
                    geometry,
                    self.tiling["overlap"],
                    center_x,
                    center_y,
                    self.tiling["rows"],
                    self.tiling["cols"],
                )
            except ValueError as e:
                raise ConfigurationError(f"Section 'tiling': {e}") from e

        width, height = geometry.get_image_width(), geometry.get_image_height()
        return [
            XYStagePosition(
                x=x,
                y=y,
                tile_width_minus_overlap=width,
                tile_height_minus_overlap=height,
                full_tile_width=width,
                full_tile_height=height,
                row=index,
                col=0,
                transform=geometry.get_affine_transform(x, y),
            )
            for index, (x, y) in enumerate(self.stage_positions)
        ]

    def build_pipeline(
        self,
        geometry: Optional[GeometryProvider] = None,
        clock: Callable[[], float] = time.time,
    ) -> AcquisitionPipeline:
        """Pipeline for this plan, with axes in the plan's order."""
        kwargs: Dict[str, Any] = {"order": self.order, "clock": clock}
        if self.time_plan is not None:
            kwargs["num_time_points"] = self.time_plan["num_time_points"]
            kwargs["time_interval_ms"] = self.time_plan["interval_ms"]
        if self.z_plan is not None:
            kwargs.update(
                z_start=self.z_plan["start"],
                z_stop=self.z_plan["stop"],
                z_step=self.z_plan["step"],
                z_origin=self.z_plan["origin"],
            )
        kwargs["channel_group"] = self.channel_group
        kwargs["xy_positions"] = self.xy_positions(geometry)
        try:
            return multi_d_pipeline(**kwargs)
        except ValueError as e:
            raise ConfigurationError(f"Invalid axis order: {e}") from e


def load_plan(path) -> AcquisitionPlan:
    """
    Load an acquisition plan from a YAML file.

    Raises:
        FileNotFoundError: The file does not exist
        ConfigurationError: The file is not valid YAML or the plan is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file {path} does not exist")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    plan = AcquisitionPlan.from_dict(data)
    logger.info(f"Loaded acquisition plan from {path} (order '{plan.order}')")
    return plan
