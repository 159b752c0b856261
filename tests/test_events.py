"""
Unit tests for the acquisition event model and channel group settings.
"""

import json

import pytest

from acquisition_sequencer.acquisition.channels import ChannelGroupSettings, ChannelSetting
from acquisition_sequencer.acquisition.events import AcquisitionEvent
from acquisition_sequencer.acquisition.positions import tile_xy_positions


class TestAcquisitionEvent:
    """Test event copying and serialization."""

    def test_defaults_are_unset(self):
        event = AcquisitionEvent()
        assert event.time_index is None
        assert event.z_position is None
        assert event.xy_position is None
        assert event.axes == {}

    def test_copy_is_independent(self):
        original = AcquisitionEvent(z_index=2, z_position=10.0, channel_name="DAPI")
        clone = original.copy()
        clone.z_position = 99.0
        clone.channel_name = "FITC"
        assert original.z_position == 10.0
        assert original.channel_name == "DAPI"
        assert clone is not original

    def test_copy_shares_position(self, unit_geometry):
        position = tile_xy_positions(unit_geometry, 0.0, 0.0, 0.0, 1, 1)[0]
        original = AcquisitionEvent(xy_position=position)
        assert original.copy().xy_position is position

    def test_set_z(self):
        event = AcquisitionEvent()
        event.set_z(3, 1.5)
        assert (event.z_index, event.z_position) == (3, 1.5)

    def test_axes(self, unit_geometry):
        position = tile_xy_positions(unit_geometry, 0.0, 0.0, 0.0, 1, 1)[0]
        event = AcquisitionEvent(time_index=1, z_index=4, channel_name="FITC", xy_position=position)
        assert event.axes == {"time": 1, "z": 4, "channel": "FITC", "position": "Grid_0_0"}

    def test_to_dict_is_json_serializable(self, unit_geometry):
        position = tile_xy_positions(unit_geometry, 0.0, 10.0, 20.0, 1, 1)[0]
        event = AcquisitionEvent(
            time_index=0, minimum_start_time=0, z_index=1, z_position=2.5, xy_position=position
        )
        data = json.loads(json.dumps(event.to_dict()))
        assert data["axes"] == {"time": 0, "z": 1, "position": "Grid_0_0"}
        assert data["z"] == 2.5
        assert (data["x"], data["y"]) == (10.0, 20.0)
        assert data["minimum_start_time"] == 0

    def test_repr(self):
        text = repr(AcquisitionEvent(time_index=2, z_index=0, z_position=1.0))
        assert text.startswith("AcquisitionEvent(")
        assert "time=2" in text


class TestChannelGroupSettings:
    """Test active channel traversal."""

    def test_walks_active_channels_in_order(self, channel_group):
        assert channel_group.next_active_channel(None) == "DAPI"
        assert channel_group.next_active_channel("DAPI") == "FITC"
        assert channel_group.next_active_channel("FITC") is None

    def test_skips_inactive_channels(self):
        group = ChannelGroupSettings(
            "Channel",
            [
                ChannelSetting("Channel", "DAPI"),
                ChannelSetting("Channel", "FITC", use=False),
                ChannelSetting("Channel", "Cy5"),
            ],
        )
        assert group.next_active_channel("DAPI") == "Cy5"
        assert group.next_active_channel("FITC") == "Cy5"
        assert group.active_channel_names() == ["DAPI", "Cy5"]

    def test_traversal_terminates(self, channel_group):
        visited = []
        current = channel_group.next_active_channel(None)
        while current is not None:
            visited.append(current)
            current = channel_group.next_active_channel(current)
        assert visited == ["DAPI", "FITC"]

    def test_no_active_channels(self, inactive_channel_group):
        assert inactive_channel_group.next_active_channel(None) is None

    def test_unknown_channel(self, channel_group):
        with pytest.raises(KeyError):
            channel_group.next_active_channel("TRITC")

    def test_duplicate_channel_rejected(self):
        with pytest.raises(ValueError):
            ChannelGroupSettings("Channel", [ChannelSetting("Channel", "DAPI")] * 2)

    def test_lookup_and_iteration(self, channel_group):
        assert channel_group.get_channel_setting("FITC").offset == 1.5
        assert len(channel_group) == 3
        assert [c.name for c in channel_group] == ["DAPI", "FITC", "Cy5"]

    def test_from_names(self):
        group = ChannelGroupSettings.from_names("Filter", ["A", "B"])
        assert group.active_channel_names() == ["A", "B"]
        assert group.get_channel_setting("B").offset == 0.0
