"""Solvability statistics over generated deals."""

from klondike_deals.analysis.solvability_report import (
    SamplingConfig,
    SolvabilityStatistics,
    sample_deals,
    compute_statistics,
    print_summary,
    save_json,
)

__all__ = [
    "SamplingConfig",
    "SolvabilityStatistics",
    "sample_deals",
    "compute_statistics",
    "print_summary",
    "save_json",
]
