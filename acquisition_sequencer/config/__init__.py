"""
Config package - YAML acquisition plans.

Modules:
    loader: Plan parsing and pipeline construction (AcquisitionPlan, load_plan)
"""

from acquisition_sequencer.config.loader import AcquisitionPlan, load_plan

__all__ = ["AcquisitionPlan", "load_plan"]
