"""
Scoring Configuration Models
"""

from typing import List, Dict, Optional, Iterable
from pydantic import BaseModel, ConfigDict, Field

from ..config.settings import (
    DEFAULT_WEIGHTS,
    DEFAULT_TIERS,
    DEFAULT_PERSON_FACTORS,
    DEFAULT_COMPANY_FACTORS,
    RELATIONSHIP_PERSON_FACTORS,
    RELATIONSHIP_COMPANY_FACTORS,
    WEIGHT_TOLERANCE,
    DEFAULT_ROLE_SCORES,
    UNKNOWN_ROLE_SCORE,
    DEFAULT_RELATIONSHIP_SCORES,
    UNKNOWN_RELATIONSHIP_SCORE,
    DEFAULT_TARGET_INDUSTRIES,
    INDUSTRY_SCORES,
    DEFAULT_REVENUE_TIERS,
    DEFAULT_GROWTH_TIERS,
    DEFAULT_ENGAGEMENT_TIERS,
    DEFAULT_DISTANCE_TIERS,
    DEFAULT_MISSING_SCORES,
)


class ScoringConfigError(ValueError):
    """Raised when a scoring configuration violates its invariants"""


class ThresholdStep(BaseModel):
    """One rung of a descending-minimum ladder; min=None is an open floor"""
    model_config = ConfigDict(populate_by_name=True)

    minimum: Optional[float] = Field(None, alias="min")
    score: int = Field(..., ge=0, le=100)


class DistanceStep(BaseModel):
    """One rung of an ascending-maximum ladder; max=None is unbounded"""
    model_config = ConfigDict(populate_by_name=True)

    maximum: Optional[float] = Field(None, alias="max")
    score: int = Field(..., ge=0, le=100)


class ScoreWeights(BaseModel):
    """Blend of person and company score"""
    person: float = DEFAULT_WEIGHTS["person"]
    company: float = DEFAULT_WEIGHTS["company"]


class TierThresholds(BaseModel):
    """Inclusive lower bounds of the combined-score tiers"""
    gold: int = DEFAULT_TIERS["gold"]
    silver: int = DEFAULT_TIERS["silver"]


class PersonFactors(BaseModel):
    """Person factor weights; relationship is optional (0 disables it)"""
    role: float = DEFAULT_PERSON_FACTORS["role"]
    engagement: float = DEFAULT_PERSON_FACTORS["engagement"]
    relationship: float = DEFAULT_PERSON_FACTORS["relationship"]


class CompanyFactors(BaseModel):
    """Company factor weights"""
    revenue: float = DEFAULT_COMPANY_FACTORS["revenue"]
    growth: float = DEFAULT_COMPANY_FACTORS["growth"]
    industry_fit: float = DEFAULT_COMPANY_FACTORS["industry_fit"]
    distance: float = DEFAULT_COMPANY_FACTORS["distance"]
    existing_score: float = DEFAULT_COMPANY_FACTORS["existing_score"]


class IndustryScoring(BaseModel):
    """Two-tier industry fit: substring match against targets"""
    targets: List[str] = Field(default_factory=lambda: list(DEFAULT_TARGET_INDUSTRIES))
    target_score: int = Field(INDUSTRY_SCORES["target"], ge=0, le=100)
    non_target_score: int = Field(INDUSTRY_SCORES["non_target"], ge=0, le=100)


class MissingDataScores(BaseModel):
    """Scores used when an input is absent altogether"""
    relationship: int = Field(DEFAULT_MISSING_SCORES["relationship"], ge=0, le=100)
    engagement: int = Field(DEFAULT_MISSING_SCORES["engagement"], ge=0, le=100)
    revenue: int = Field(DEFAULT_MISSING_SCORES["revenue"], ge=0, le=100)
    growth: int = Field(DEFAULT_MISSING_SCORES["growth"], ge=0, le=100)
    industry: int = Field(DEFAULT_MISSING_SCORES["industry"], ge=0, le=100)
    distance: int = Field(DEFAULT_MISSING_SCORES["distance"], ge=0, le=100)
    existing: int = Field(DEFAULT_MISSING_SCORES["existing"], ge=0, le=100)


def _steps(raw: Iterable[Dict]) -> List[ThresholdStep]:
    return [ThresholdStep.model_validate(step) for step in raw]


def _distance_steps(raw: Iterable[Dict]) -> List[DistanceStep]:
    return [DistanceStep.model_validate(step) for step in raw]


class ScoringConfig(BaseModel):
    """Complete scoring configuration (the ICP profile)"""
    name: str = "Default ICP"
    description: Optional[str] = None

    # Weights & Thresholds
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    tiers: TierThresholds = Field(default_factory=TierThresholds)
    person_factors: PersonFactors = Field(default_factory=PersonFactors)
    company_factors: CompanyFactors = Field(default_factory=CompanyFactors)

    # Categorical maps
    role_scores: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_ROLE_SCORES))
    unknown_role_score: int = Field(UNKNOWN_ROLE_SCORE, ge=0, le=100)
    relationship_scores: Dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_RELATIONSHIP_SCORES)
    )
    unknown_relationship_score: int = Field(UNKNOWN_RELATIONSHIP_SCORE, ge=0, le=100)
    industry: IndustryScoring = Field(default_factory=IndustryScoring)

    # Ladders
    revenue_tiers: List[ThresholdStep] = Field(
        default_factory=lambda: _steps(DEFAULT_REVENUE_TIERS)
    )
    growth_tiers: List[ThresholdStep] = Field(
        default_factory=lambda: _steps(DEFAULT_GROWTH_TIERS)
    )
    engagement_tiers: List[ThresholdStep] = Field(
        default_factory=lambda: _steps(DEFAULT_ENGAGEMENT_TIERS)
    )
    distance_tiers: List[DistanceStep] = Field(
        default_factory=lambda: _distance_steps(DEFAULT_DISTANCE_TIERS)
    )

    missing: MissingDataScores = Field(default_factory=MissingDataScores)

    def update(self, **kwargs) -> "ScoringConfig":
        """Return a copy with the given fields replaced; this instance is untouched"""
        data = self.model_dump(by_alias=True)
        for key, value in kwargs.items():
            if key in data:
                if isinstance(value, BaseModel):
                    value = value.model_dump(by_alias=True)
                data[key] = value
        return ScoringConfig.model_validate(data)

    @property
    def uses_relationship(self) -> bool:
        return self.person_factors.relationship > 0


def _check_sum(values: Iterable[float], message: str) -> None:
    if abs(sum(values) - 1.0) > WEIGHT_TOLERANCE:
        raise ScoringConfigError(message)


def _check_descending(steps: List[ThresholdStep], label: str) -> None:
    if not steps:
        raise ScoringConfigError(f"{label} must not be empty")
    for position, step in enumerate(steps):
        if step.minimum is None and position != len(steps) - 1:
            raise ScoringConfigError(f"{label}: only the last step may omit min")
    bounded = [s.minimum for s in steps if s.minimum is not None]
    if any(a <= b for a, b in zip(bounded, bounded[1:])):
        raise ScoringConfigError(f"{label} must be sorted by descending min")


def _check_ascending(steps: List[DistanceStep], label: str) -> None:
    if not steps:
        raise ScoringConfigError(f"{label} must not be empty")
    for position, step in enumerate(steps):
        if step.maximum is None and position != len(steps) - 1:
            raise ScoringConfigError(f"{label}: only the last step may omit max")
    bounded = [s.maximum for s in steps if s.maximum is not None]
    if any(a >= b for a, b in zip(bounded, bounded[1:])):
        raise ScoringConfigError(f"{label} must be sorted by ascending max")


def validate_scoring_config(config: ScoringConfig) -> ScoringConfig:
    """
    Reject configurations that break the scoring invariants.

    Called by whoever accepts new configurations (the ICP editor); the
    scorers themselves trust the configuration they are handed.

    Raises:
        ScoringConfigError: with a message naming the violated rule
    """
    _check_sum(
        [config.weights.person, config.weights.company],
        "Weights must sum to 1.0",
    )
    _check_sum(
        config.person_factors.model_dump().values(),
        "Person factors must sum to 1.0",
    )
    _check_sum(
        config.company_factors.model_dump().values(),
        "Company factors must sum to 1.0",
    )
    if config.tiers.gold <= config.tiers.silver:
        raise ScoringConfigError("Gold threshold must be greater than silver")

    for role, score in config.role_scores.items():
        if not 0 <= score <= 100:
            raise ScoringConfigError(f"Role score for {role} must be between 0 and 100")
    for strength, score in config.relationship_scores.items():
        if not 0 <= score <= 100:
            raise ScoringConfigError(
                f"Relationship score for {strength} must be between 0 and 100"
            )

    _check_descending(config.revenue_tiers, "Revenue tiers")
    _check_descending(config.growth_tiers, "Growth tiers")
    _check_descending(config.engagement_tiers, "Engagement tiers")
    _check_ascending(config.distance_tiers, "Distance tiers")
    return config


def create_default_scoring_config(
    target_industries: Optional[List[str]] = None,
    role_scores: Optional[Dict[str, int]] = None,
) -> ScoringConfig:
    """
    Factory for the canonical profile: role + engagement person scoring
    """
    config = ScoringConfig()

    if target_industries:
        config.industry.targets = list(target_industries)

    if role_scores:
        config.role_scores.update(role_scores)

    return config


def create_relationship_scoring_config() -> ScoringConfig:
    """
    Factory for the profile that weighs relationship strength inside
    person scoring, with its own company weight split
    """
    return ScoringConfig(
        name="Relationship ICP",
        person_factors=PersonFactors(**RELATIONSHIP_PERSON_FACTORS),
        company_factors=CompanyFactors(**RELATIONSHIP_COMPANY_FACTORS),
    )
