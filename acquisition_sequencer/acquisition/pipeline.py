"""
Acquisition pipeline - explicit composition of axis generators.

The pipeline takes an ordered list of axis generators; the first one is the
outermost loop. Every event produced by generator i becomes the seed of
generator i+1, so state set by an earlier axis is visible to (and may be
added to by) the later ones. In particular z offsets accumulate in the
order the axes are listed: a channel focus offset applied before a z-stack
is carried into every slice of that stack.
"""

import logging
import time
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from acquisition_sequencer.acquisition.axes import AxisGenerator, channels, positions, timelapse, z_stack
from acquisition_sequencer.acquisition.channels import ChannelGroupSettings
from acquisition_sequencer.acquisition.events import AcquisitionEvent
from acquisition_sequencer.acquisition.positions import XYStagePosition

logger = logging.getLogger(__name__)

AXIS_ORDER_LETTERS = {"t": "time", "p": "position", "c": "channel", "z": "z"}


class AcquisitionPipeline:
    """Nested, lazy enumeration over an ordered list of axes."""

    def __init__(self, generators: Sequence[AxisGenerator] = ()):
        self.generators: List[AxisGenerator] = list(generators)

    @property
    def axis_names(self) -> List[str]:
        return [g.name for g in self.generators]

    def then(self, generator: AxisGenerator) -> "AcquisitionPipeline":
        """New pipeline with ``generator`` added as the innermost axis."""
        return AcquisitionPipeline(self.generators + [generator])

    def events(self, seed: Optional[AcquisitionEvent] = None) -> Iterator[AcquisitionEvent]:
        """
        Lazily yield every fully expanded event.

        Args:
            seed: Starting event (an empty AcquisitionEvent by default)

        Yields:
            AcquisitionEvent in acquisition order
        """
        seed = AcquisitionEvent() if seed is None else seed
        return self._expand(seed, 0)

    def _expand(self, event: AcquisitionEvent, depth: int) -> Iterator[AcquisitionEvent]:
        if depth == len(self.generators):
            yield event
            return
        # an axis yielding nothing prunes this branch
        for child in self.generators[depth](event):
            yield from self._expand(child, depth + 1)

    def count(self, seed: Optional[AcquisitionEvent] = None) -> int:
        """Number of events a fresh enumeration produces."""
        return sum(1 for _ in self.events(seed))

    def __iter__(self) -> Iterator[AcquisitionEvent]:
        return self.events()

    def __repr__(self):
        return f"AcquisitionPipeline({self.generators!r})"


def multi_d_pipeline(
    num_time_points: Optional[int] = None,
    time_interval_ms: float = 0,
    z_start: Optional[int] = None,
    z_stop: Optional[int] = None,
    z_step: float = 1.0,
    z_origin: float = 0.0,
    channel_group: Optional[ChannelGroupSettings] = None,
    xy_positions: Optional[List[XYStagePosition]] = None,
    order: str = "tpcz",
    clock: Callable[[], float] = time.time,
) -> AcquisitionPipeline:
    """
    Build a pipeline for a standard multi-dimensional acquisition.

    Only the axes whose parameters are given are included. ``order`` lists
    the axes outermost first: t (time), p (position), c (channel), z.

    Args:
        num_time_points: Number of time points (time axis skipped if None)
        time_interval_ms: Minimum interval between time points
        z_start: First slice index (z axis skipped if z_start or z_stop is None)
        z_stop: Slice index to stop before
        z_step: Distance between slices
        z_origin: Z position of slice index 0
        channel_group: Channels to acquire (channel axis skipped if None)
        xy_positions: Stage positions (position axis skipped if None)
        order: Axis order string, e.g. "tpcz"
        clock: Wall-clock source for time pacing

    Returns:
        AcquisitionPipeline

    Raises:
        ValueError: Unknown or repeated letters in ``order``, or a configured
            axis missing from it
    """
    unknown = [letter for letter in order if letter not in AXIS_ORDER_LETTERS]
    if unknown:
        raise ValueError(f"Unknown axis letters {unknown} in order '{order}' (use t, p, c, z)")
    if len(set(order)) != len(order):
        raise ValueError(f"Repeated axis in order '{order}'")

    configured: Dict[str, AxisGenerator] = {}
    if num_time_points is not None:
        configured["t"] = timelapse(num_time_points, time_interval_ms, clock=clock)
    if xy_positions is not None:
        configured["p"] = positions(xy_positions)
    if channel_group is not None:
        configured["c"] = channels(channel_group)
    if z_start is not None and z_stop is not None:
        configured["z"] = z_stack(z_start, z_stop, z_step, z_origin)

    missing = [AXIS_ORDER_LETTERS[letter] for letter in configured if letter not in order]
    if missing:
        raise ValueError(f"Axes {missing} are configured but not listed in order '{order}'")

    pipeline = AcquisitionPipeline([configured[letter] for letter in order if letter in configured])
    logger.debug(f"Built pipeline with axes {pipeline.axis_names}")
    return pipeline
