"""
Channel group settings.

A channel group is an ordered set of named channel configurations. Only the
channels marked ``use`` take part in an acquisition; each may carry a focus
offset that is added to the z position whenever the channel is selected.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class ChannelSetting:
    """Single channel configuration within a group."""

    group: str
    name: str
    offset: float = 0.0
    use: bool = True
    exposure: Optional[float] = None


class ChannelGroupSettings:
    """Ordered collection of the channels of one config group."""

    def __init__(self, group: str, channels: List[ChannelSetting]):
        self.group = group
        self._channels: Dict[str, ChannelSetting] = {}
        for channel in channels:
            if channel.name in self._channels:
                raise ValueError(f"Duplicate channel '{channel.name}' in group '{group}'")
            self._channels[channel.name] = channel

    @classmethod
    def from_names(cls, group: str, names: List[str]) -> "ChannelGroupSettings":
        """All channels active and without focus offsets."""
        return cls(group, [ChannelSetting(group=group, name=name) for name in names])

    def get_channel_setting(self, name: str) -> ChannelSetting:
        return self._channels[name]

    def next_active_channel(self, current: Optional[str]) -> Optional[str]:
        """
        Name of the next active channel after ``current`` in group order.

        Args:
            current: Current channel name, or None to start from the beginning

        Returns:
            The next active channel name, or None when no active channel remains

        Raises:
            KeyError: ``current`` is not a channel of this group
        """
        names = list(self._channels)
        start = 0 if current is None else names.index(self._channels[current].name) + 1
        for name in names[start:]:
            if self._channels[name].use:
                return name
        return None

    def active_channel_names(self) -> List[str]:
        return [c.name for c in self._channels.values() if c.use]

    def __iter__(self) -> Iterator[ChannelSetting]:
        return iter(self._channels.values())

    def __len__(self):
        return len(self._channels)

    def __repr__(self):
        return f"ChannelGroupSettings(group={self.group!r}, active={self.active_channel_names()})"
