"""
Acquisition events - one fully specified instruction of what to capture.

Events are built up incrementally: a seed event is copied by each axis
generator, which fills in its own axis. Once an event leaves the pipeline it
is handed to the orchestration layer and should be treated as read-only.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional

from acquisition_sequencer.acquisition.positions import XYStagePosition


@dataclass
class AcquisitionEvent:
    """Acquisition instruction.

    Attributes:
        time_index: Frame index along the time axis
        minimum_start_time: Wall-clock lower bound (ms since epoch) before the
            event may be executed; 0 means no lower bound
        z_index: Absolute slice index
        z_position: Absolute focus position; axes may add offsets to it
        channel_name: Name of the channel config to use
        xy_position: Stage position, shared by reference between events
    """

    time_index: Optional[int] = None
    minimum_start_time: Optional[int] = None
    z_index: Optional[int] = None
    z_position: Optional[float] = None
    channel_name: Optional[str] = None
    xy_position: Optional[XYStagePosition] = None

    def copy(self) -> "AcquisitionEvent":
        """Independent copy; the (immutable) stage position is shared."""
        return dataclasses.replace(self)

    def set_z(self, index: Optional[int], position: Optional[float]):
        self.z_index = index
        self.z_position = position

    @property
    def axes(self) -> Dict[str, Any]:
        """Axis name -> index for every axis this event has a value on."""
        axes: Dict[str, Any] = {}
        if self.time_index is not None:
            axes["time"] = self.time_index
        if self.z_index is not None:
            axes["z"] = self.z_index
        if self.channel_name is not None:
            axes["channel"] = self.channel_name
        if self.xy_position is not None:
            axes["position"] = self.xy_position.name
        return axes

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary of the event."""
        data: Dict[str, Any] = {"axes": self.axes}
        if self.minimum_start_time is not None:
            data["minimum_start_time"] = self.minimum_start_time
        if self.z_position is not None:
            data["z"] = self.z_position
        if self.channel_name is not None:
            data["channel"] = self.channel_name
        if self.xy_position is not None:
            data["x"] = self.xy_position.x
            data["y"] = self.xy_position.y
            data["row"] = self.xy_position.row
            data["col"] = self.xy_position.col
        return data

    def __repr__(self):
        parts = [f"{k}={v}" for k, v in self.axes.items()]
        if self.z_position is not None:
            parts.append(f"z_position={self.z_position:g}")
        if self.xy_position is not None:
            parts.append(f"xy=({self.xy_position.x:.2f}, {self.xy_position.y:.2f})")
        if self.minimum_start_time:
            parts.append(f"minimum_start_time={self.minimum_start_time}")
        return f"AcquisitionEvent({', '.join(parts)})"
