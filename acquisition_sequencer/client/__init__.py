"""
Client package - Command line tools.

Modules:
    cli: ``acq-events`` planner (expands YAML plans into acquisition events)
"""

from acquisition_sequencer.client.cli import main

__all__ = ["main"]
