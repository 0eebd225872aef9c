"""Clan war records and statistics.

This package contains the pure, store-agnostic logic of the war tracker:

- war_records: Read-only views over raw war documents
- war_stats: Statistics aggregation for the wars/stats endpoint
- statistics_utils: Safe ratio, formatting and bucketing helpers
- exceptions: Domain error hierarchy
- config: Default constants

Nothing in here performs I/O; the HTTP layer lives in ``warapi``.
"""

from warcore.war_records import Attack, Participant, WarRecord, WarStatistics
from warcore.war_stats import NoStatsData, StatsReport, compute_war_stats

__all__ = [
    "Attack",
    "NoStatsData",
    "Participant",
    "StatsReport",
    "WarRecord",
    "WarStatistics",
    "compute_war_stats",
]
