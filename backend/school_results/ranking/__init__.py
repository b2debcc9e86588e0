"""Result ranking, statistics and integrity auditing over in-memory snapshots."""

from school_results.ranking.cohort import calculate_campus_percentile, rank_cohort
from school_results.ranking.dense_rank import dense_rank
from school_results.ranking.integrity import find_integrity_issues
from school_results.ranking.level import rank_level, rank_subjects
from school_results.ranking.statistics import aggregate_result_statistics

__all__ = [
    "aggregate_result_statistics",
    "calculate_campus_percentile",
    "dense_rank",
    "find_integrity_issues",
    "rank_cohort",
    "rank_level",
    "rank_subjects",
]
