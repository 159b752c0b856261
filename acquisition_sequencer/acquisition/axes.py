"""
Axis generators - the building blocks of multi-dimensional acquisitions.

Each factory (``timelapse``, ``z_stack``, ``channels``, ``positions``) returns
an AxisGenerator. Calling the generator on a seed event returns a fresh
EventIterator that yields copies of the seed with that axis filled in, so the
same generator can be applied to every event produced by an outer axis.

Iterators are explicit cursor objects with ``has_next()``/``next()`` and also
support the normal Python iterator protocol. Nothing is computed before it is
requested; a consumer that stops pulling stops the generation.
"""

import logging
import time
from typing import Callable, Iterator, List, Optional

from acquisition_sequencer.acquisition.channels import ChannelGroupSettings
from acquisition_sequencer.acquisition.events import AcquisitionEvent
from acquisition_sequencer.acquisition.positions import XYStagePosition

logger = logging.getLogger(__name__)


class EventIterator:
    """Pull-based cursor over the events derived from one seed event."""

    def __init__(self, seed: AcquisitionEvent):
        self.seed = seed

    def has_next(self) -> bool:
        raise NotImplementedError

    def _next_event(self) -> AcquisitionEvent:
        raise NotImplementedError

    def next(self) -> AcquisitionEvent:
        if not self.has_next():
            raise StopIteration
        return self._next_event()

    def __iter__(self) -> Iterator[AcquisitionEvent]:
        return self

    def __next__(self) -> AcquisitionEvent:
        return self.next()


class AxisGenerator:
    """Restartable factory of EventIterators for one axis."""

    name = "axis"

    def __call__(self, event: AcquisitionEvent) -> EventIterator:
        raise NotImplementedError


# ---- Time ----


class TimelapseIterator(EventIterator):
    def __init__(self, seed, num_time_points: int, interval_ms: int, clock: Callable[[], float]):
        super().__init__(seed)
        self.num_time_points = num_time_points
        self.interval_ms = interval_ms
        self.clock = clock
        self.frame_index = 0
        self.last_start_time: Optional[int] = None

    def has_next(self) -> bool:
        # frame 0 is always produced, even for num_time_points <= 0
        return self.frame_index == 0 or self.frame_index < self.num_time_points

    def _next_event(self) -> AcquisitionEvent:
        event = self.seed.copy()
        event.time_index = self.frame_index
        if self.interval_ms == 0 or self.frame_index == 0:
            event.minimum_start_time = 0
        else:
            event.minimum_start_time = self.last_start_time + self.interval_ms

        if self.frame_index == 0:
            # pacing anchor, taken once per iterator
            self.last_start_time = int(self.clock() * 1000)
        else:
            self.last_start_time = event.minimum_start_time
        self.frame_index += 1
        return event


class TimelapseAxis(AxisGenerator):
    name = "time"

    def __init__(self, num_time_points: int, interval_ms: float, clock: Callable[[], float] = time.time):
        self.num_time_points = int(num_time_points)
        # whole milliseconds only; fractions are truncated
        self.interval_ms = int(interval_ms)
        self.clock = clock

    def __call__(self, event: AcquisitionEvent) -> TimelapseIterator:
        return TimelapseIterator(event, self.num_time_points, self.interval_ms, self.clock)

    def __repr__(self):
        return f"timelapse(num_time_points={self.num_time_points}, interval_ms={self.interval_ms})"


def timelapse(num_time_points: int, interval_ms: float, clock: Callable[[], float] = time.time) -> TimelapseAxis:
    """
    Time axis with minimum-start-time pacing.

    Frame 0 has no start constraint and anchors the pacing to the clock at the
    moment it is generated; frame k is scheduled ``interval_ms`` after frame
    k-1. With ``interval_ms == 0`` no frame is paced. At least one frame is
    always produced.

    Args:
        num_time_points: Number of frames
        interval_ms: Minimum interval between frame starts, truncated to whole ms
        clock: Wall-clock source in seconds (time.time)
    """
    return TimelapseAxis(num_time_points, interval_ms, clock)


# ---- Z ----


class ZStackIterator(EventIterator):
    def __init__(self, seed, start_slice_index: int, stop_slice_index: int, z_step: float, z_origin: float):
        super().__init__(seed)
        self.z_index = start_slice_index
        self.stop_slice_index = stop_slice_index
        self.z_step = z_step
        self.z_origin = z_origin

    def has_next(self) -> bool:
        return self.z_index < self.stop_slice_index

    def _next_event(self) -> AcquisitionEvent:
        event = self.seed.copy()
        z_pos = self.z_index * self.z_step + self.z_origin
        # add, so offsets set by other axes (channel focus offsets) are kept
        base = 0.0 if event.z_position is None else event.z_position
        event.set_z(self.z_index, base + z_pos)
        self.z_index += 1
        return event


class ZStackAxis(AxisGenerator):
    name = "z"

    def __init__(self, start_slice_index: int, stop_slice_index: int, z_step: float, z_origin: float):
        self.start_slice_index = int(start_slice_index)
        self.stop_slice_index = int(stop_slice_index)
        self.z_step = float(z_step)
        self.z_origin = float(z_origin)

    def __call__(self, event: AcquisitionEvent) -> ZStackIterator:
        return ZStackIterator(
            event, self.start_slice_index, self.stop_slice_index, self.z_step, self.z_origin
        )

    def __repr__(self):
        return (
            f"z_stack({self.start_slice_index}, {self.stop_slice_index}, "
            f"z_step={self.z_step:g}, z_origin={self.z_origin:g})"
        )


def z_stack(start_slice_index: int, stop_slice_index: int, z_step: float, z_origin: float) -> ZStackAxis:
    """
    Z axis over the slice indices [start_slice_index, stop_slice_index).

    Each slice is at ``index * z_step + z_origin``, added to whatever z
    position the seed event already carries (0 if none).
    """
    return ZStackAxis(start_slice_index, stop_slice_index, z_step, z_origin)


# ---- Channel ----


class ChannelIterator(EventIterator):
    def __init__(self, seed, channel_group: ChannelGroupSettings):
        super().__init__(seed)
        self.channel_group = channel_group
        self.channel_name: Optional[str] = None

    def has_next(self) -> bool:
        return self.channel_group.next_active_channel(self.channel_name) is not None

    def _next_event(self) -> AcquisitionEvent:
        event = self.seed.copy()
        self.channel_name = self.channel_group.next_active_channel(self.channel_name)
        event.channel_name = self.channel_name
        offset = self.channel_group.get_channel_setting(self.channel_name).offset
        if event.z_position is not None or offset != 0:
            base = 0.0 if event.z_position is None else event.z_position
            event.set_z(event.z_index, base + offset)
        return event


class ChannelAxis(AxisGenerator):
    name = "channel"

    def __init__(self, channel_group: ChannelGroupSettings):
        self.channel_group = channel_group
        if channel_group.next_active_channel(None) is None:
            logger.warning(
                f"Channel group '{channel_group.group}' has no active channels; "
                "every event reaching this axis is dropped"
            )

    def __call__(self, event: AcquisitionEvent) -> ChannelIterator:
        return ChannelIterator(event, self.channel_group)

    def __repr__(self):
        return f"channels({self.channel_group!r})"


def channels(channel_group: ChannelGroupSettings) -> ChannelAxis:
    """
    Channel axis over the active channels of a group, in group order.

    The channel's focus offset is added to the event's z position. A group
    without active channels produces no events, dropping the seed.
    """
    return ChannelAxis(channel_group)


# ---- Position ----


class PositionIterator(EventIterator):
    def __init__(self, seed, position_list: Optional[List[XYStagePosition]]):
        super().__init__(seed)
        self.position_list = position_list
        self.index = 0

    def has_next(self) -> bool:
        if not self.position_list:
            return self.index == 0
        return self.index < len(self.position_list)

    def _next_event(self) -> AcquisitionEvent:
        if not self.position_list:
            # no positions: the seed passes through untouched
            self.index += 1
            return self.seed
        event = self.seed.copy()
        event.xy_position = self.position_list[self.index]
        self.index += 1
        return event


class PositionAxis(AxisGenerator):
    name = "position"

    def __init__(self, position_list: Optional[List[XYStagePosition]]):
        self.position_list = None if position_list is None else list(position_list)

    def __call__(self, event: AcquisitionEvent) -> PositionIterator:
        return PositionIterator(event, self.position_list)

    def __repr__(self):
        count = 0 if self.position_list is None else len(self.position_list)
        return f"positions({count} positions)"


def positions(position_list: Optional[List[XYStagePosition]]) -> PositionAxis:
    """
    Position axis over an arbitrary list of stage positions, in list order.

    With None or an empty list the seed event is passed through unchanged.
    """
    return PositionAxis(position_list)
