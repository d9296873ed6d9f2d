"""
Factor Scoring
==============
Pure functions mapping one raw attribute to a 0-100 sub-score.

Numeric factors use threshold ladders (first matching step wins, values
outside the ladder clamp to the last step). Categorical factors use map
lookups with separate defaults for unknown and missing values. Industry
fit is a two-tier substring match against the target list.
"""

import math
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.scoring_config import ScoringConfig, ThresholdStep, DistanceStep
from ..config.settings import NO_ROLE_KEY


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)"""
    # Trim float noise first so 69.49999999999999 counts as 69.5
    return int(math.floor(round(value, 9) + 0.5))


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


# =============================================================================
# Generic lookups
# =============================================================================

def find_tier_score(value: float, steps: List[ThresholdStep]) -> int:
    """Score of the first step whose minimum is <= value, else the last step"""
    for step in steps:
        if step.minimum is None or value >= step.minimum:
            return step.score
    return steps[-1].score


def find_distance_score(value: float, steps: List[DistanceStep]) -> int:
    """Score of the first step whose maximum is >= value, else the last step"""
    for step in steps:
        if step.maximum is None or value <= step.maximum:
            return step.score
    return steps[-1].score


def lookup_category(key: str, scores: Dict[str, int], unknown: int) -> int:
    return scores.get(key, unknown)


def matches_target(text: str, targets: Iterable[str]) -> bool:
    """Case-insensitive substring containment of any target in text"""
    normalized = text.lower()
    return any(target.lower() in normalized for target in targets)


# =============================================================================
# Person factors
# =============================================================================

def score_role(functions: Optional[List[str]], config: ScoringConfig) -> Tuple[int, Optional[str]]:
    """
    Score of the most valuable role and the role that earned it.

    The first role wins a tie, so the result does not depend on how the
    remaining roles are ordered.
    """
    if not functions:
        return config.role_scores.get(NO_ROLE_KEY, config.unknown_role_score), None

    best_role = None
    best_score = -1
    for role in functions:
        score = lookup_category(role, config.role_scores, config.unknown_role_score)
        if score > best_score:
            best_role, best_score = role, score
    return best_score, best_role


def score_relationship(strength: Optional[str], config: ScoringConfig) -> int:
    if strength is None:
        return config.missing.relationship
    return lookup_category(
        strength, config.relationship_scores, config.unknown_relationship_score
    )


def score_engagement(activities: Optional[int], config: ScoringConfig) -> int:
    # No data scores below a confirmed zero
    if activities is None:
        return config.missing.engagement
    return find_tier_score(activities, config.engagement_tiers)


# =============================================================================
# Company factors
# =============================================================================

def score_revenue(revenue: Optional[float], config: ScoringConfig) -> int:
    if revenue is None:
        return config.missing.revenue
    return find_tier_score(revenue, config.revenue_tiers)


def score_growth(cagr: Optional[float], config: ScoringConfig) -> int:
    if cagr is None:
        return config.missing.growth
    return find_tier_score(cagr, config.growth_tiers)


def score_industry(industry: Optional[str], config: ScoringConfig) -> int:
    if not industry:
        return config.missing.industry
    if matches_target(industry, config.industry.targets):
        return config.industry.target_score
    return config.industry.non_target_score


def score_distance(distance_km: Optional[float], config: ScoringConfig) -> int:
    if distance_km is None:
        return config.missing.distance
    return find_distance_score(distance_km, config.distance_tiers)


def score_existing(score: Optional[float], config: ScoringConfig) -> int:
    """External 0-100 rating passed through, clamped to the scale"""
    if score is None:
        return config.missing.existing
    return round_half_up(clamp_score(score))
