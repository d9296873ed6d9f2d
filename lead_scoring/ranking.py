"""
Sales Rep Leaderboard
=====================
Sorting and truncation over precomputed per-rep performance.

Rate metrics are noisy on small samples, so for win rate every rep with
at least `min_sample_size` closed deals ranks above every rep without,
whatever their rates.
"""

from typing import List, Optional

from .models.schemas import LeaderboardSort, SalesRepPerformance
from .config.settings import LEADERBOARD_DEFAULTS


def _sort_key(performance: SalesRepPerformance, sort_by: LeaderboardSort, min_sample_size: int):
    if sort_by == LeaderboardSort.WON_DEALS:
        return (performance.won_deals,)
    if sort_by == LeaderboardSort.WIN_RATE:
        relevant = performance.closed_deals >= min_sample_size
        return (relevant, performance.win_rate)
    return (performance.total_won_value,)


def get_leaderboard(
    performances: List[SalesRepPerformance],
    sort_by: LeaderboardSort = LeaderboardSort.TOTAL_WON_VALUE,
    limit: int = LEADERBOARD_DEFAULTS["limit"],
    min_sample_size: int = LEADERBOARD_DEFAULTS["min_sample_size"],
) -> List[SalesRepPerformance]:
    """
    Rank sales reps by the chosen metric, best first.

    Args:
        performances: Per-rep statistics
        sort_by: total won value, won deal count, or win rate
        limit: Number of entries to keep
        min_sample_size: Closed deals needed for a win rate to count

    Returns:
        At most `limit` entries; ties keep their input order
    """
    ranked = sorted(
        performances,
        key=lambda p: _sort_key(p, LeaderboardSort(sort_by), min_sample_size),
        reverse=True,
    )
    return ranked[:limit]


def get_sales_rep_by_id(
    performances: List[SalesRepPerformance], user_id: int
) -> Optional[SalesRepPerformance]:
    for performance in performances:
        if performance.user_id == user_id:
            return performance
    return None
