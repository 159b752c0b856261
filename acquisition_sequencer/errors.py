"""
Exception types raised by the acquisition sequencer.

Degenerate axis ranges (empty z-stacks, channel groups with nothing active)
are not errors; they produce empty sequences.
"""


class AcquisitionSequencerError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(AcquisitionSequencerError, ValueError):
    """An acquisition plan or one of its sections is malformed."""


class GeometryError(AcquisitionSequencerError, RuntimeError):
    """The camera geometry or pixel-to-stage transform could not be obtained."""


class TilingConfigurationError(GeometryError):
    """Tile generation was aborted; no partial position list is returned."""
